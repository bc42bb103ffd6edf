"""Repo de la colección `profiles` (un documento por usuario).

- `user` se guarda como ObjectId (referencia a `users`).
- Las listas `experience`/`education` guardan la entrada más reciente primero.
- Las listas se reescriben con control optimista (`rev`): una edición
  concurrente sobre el mismo perfil no se pierde en silencio.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from devconnector.infrastructure.db.mongo import cas_set, get_db, store_errors

COLLECTION = "profiles"

EntryKind = Literal["experience", "education"]


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@store_errors
def find_by_user(user_id: ObjectId) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"user": user_id})


@store_errors
def find_all() -> List[Dict[str, Any]]:
    return list(get_db()[COLLECTION].find({}).sort("date", -1))


@store_errors
def upsert(user_id: ObjectId, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Crea el perfil si no existe; si existe aplica `$set` solo con `fields`.

    `fields` admite rutas con punto (`social.twitter`) para no pisar el resto
    del subdocumento.
    """
    coll = get_db()[COLLECTION]
    on_insert: Dict[str, Any] = {"experience": [], "education": [], "date": _now_iso(), "rev": 0}
    if not any(k == "social" or k.startswith("social.") for k in fields):
        on_insert["social"] = {}
    update = {"$set": dict(fields), "$setOnInsert": on_insert}
    try:
        return coll.find_one_and_update(
            {"user": user_id}, update, upsert=True, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        # Otro upsert creó el perfil entre el match y el insert: ahora sí existe
        return coll.find_one_and_update(
            {"user": user_id}, {"$set": dict(fields)}, return_document=ReturnDocument.AFTER
        )


def set_entries(profile: Dict[str, Any], kind: EntryKind, entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Reemplaza la lista `kind` si el perfil no cambió desde que se leyó; None si cambió."""
    return cas_set(COLLECTION, profile, {kind: entries})


@store_errors
def delete_by_user(user_id: ObjectId) -> bool:
    res = get_db()[COLLECTION].delete_one({"user": user_id})
    return res.deleted_count > 0
