"""Repo de la colección `users` (cuentas locales)."""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from devconnector.infrastructure.db.mongo import get_db, store_errors

COLLECTION = "users"

# Nunca sale de la capa de repositorio
_PUBLIC = {"password": 0}


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@store_errors
def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Busca usuario por email (en minúsculas), incluye el hash de password."""
    return get_db()[COLLECTION].find_one({"email": email.lower()})


@store_errors
def get_user(user_id: ObjectId) -> Optional[Dict[str, Any]]:
    """Usuario sin el hash de password."""
    return get_db()[COLLECTION].find_one({"_id": user_id}, _PUBLIC)


@store_errors
def insert_user(*, name: str, email: str, password_hash: str, avatar: str) -> Optional[str]:
    """Inserta usuario y devuelve id (str); None si el email ya existe."""
    doc = {
        "name": name,
        "email": email.lower(),
        "password": password_hash,
        "avatar": avatar,
        "date": _now_iso(),
    }
    try:
        res = get_db()[COLLECTION].insert_one(doc)
    except DuplicateKeyError:
        return None
    return str(res.inserted_id)


@store_errors
def delete_user(user_id: ObjectId) -> bool:
    res = get_db()[COLLECTION].delete_one({"_id": user_id})
    return res.deleted_count > 0


@store_errors
def get_user_cards(user_ids: Iterable[ObjectId]) -> Dict[ObjectId, Dict[str, Any]]:
    """Nombre y avatar por id, para poblar `user` en perfiles."""
    ids = list(set(user_ids))
    if not ids:
        return {}
    cursor = get_db()[COLLECTION].find({"_id": {"$in": ids}}, {"name": 1, "avatar": 1})
    return {d["_id"]: d for d in cursor}
