"""Servicios de perfil: upsert, listas experience/education y borrado de cuenta.

Todas las operaciones se limitan al perfil del usuario autenticado
(`identity["id"]`), salvo las lecturas públicas.
"""
import logging
from typing import Any, Dict, List

from bson import ObjectId

from devconnector.core.exceptions import (
    CascadeDeleteError,
    ConcurrentUpdate,
    EntryNotFound,
    InvalidCredential,
    ProfileNotFound,
    StoreError,
)
from devconnector.core.values import is_blank
from devconnector.infrastructure.db.mongo import public_doc, to_object_id
from devconnector.repositories import post_repo, profile_repo, user_repo
from devconnector.repositories.profile_repo import EntryKind

_log = logging.getLogger("devconnector.profile")

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")
SOCIAL_NETWORKS = ("youtube", "twitter", "facebook", "linkedin", "instagram")

ENTRY_NOT_FOUND = {
    "experience": "Experience not found.",
    "education": "Education not found.",
}


def user_oid(identity: Dict[str, Any]) -> ObjectId:
    """ObjectId del usuario autenticado; un id ilegible invalida la credencial."""
    oid = to_object_id(identity.get("id"))
    if oid is None:
        raise InvalidCredential()
    return oid


def build_profile_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Documento `$set` con solo los campos presentes (no vacíos).

    Las redes sociales van como `social.<red>` para no borrar las que no vienen.
    """
    fields: Dict[str, Any] = {}
    for name in PROFILE_FIELDS:
        value = data.get(name)
        if not is_blank(value):
            fields[name] = value.strip()
    if data.get("skills"):
        fields["skills"] = list(data["skills"])
    for net in SOCIAL_NETWORKS:
        value = data.get(net)
        if not is_blank(value):
            fields[f"social.{net}"] = value.strip()
    return fields


def _populate(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reemplaza `user` por {id, name, avatar} cuando el usuario existe."""
    cards = user_repo.get_user_cards(d["user"] for d in docs if d.get("user"))
    out = []
    for d in docs:
        item = public_doc(d)
        card = cards.get(d.get("user"))
        if card:
            item["user"] = public_doc(card)
        out.append(item)
    return out


def get_my_profile(identity: Dict[str, Any]) -> Dict[str, Any]:
    doc = profile_repo.find_by_user(user_oid(identity))
    if not doc:
        raise ProfileNotFound()
    return _populate([doc])[0]


def list_profiles() -> List[Dict[str, Any]]:
    return _populate(profile_repo.find_all())


def get_profile_by_user(user_id: str) -> Dict[str, Any]:
    """Perfil público por id de usuario; un id malformado cuenta como inexistente."""
    oid = to_object_id(user_id)
    doc = profile_repo.find_by_user(oid) if oid else None
    if not doc:
        raise ProfileNotFound("Profile not found.")
    return _populate([doc])[0]


def upsert_profile(identity: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """Crea el perfil o actualiza (merge) solo los campos presentes."""
    doc = profile_repo.upsert(user_oid(identity), build_profile_fields(data))
    return public_doc(doc)


def _entry_doc(entry: Dict[str, Any]) -> Dict[str, Any]:
    data = {k: v for k, v in entry.items() if v is not None}
    for key in ("from", "to"):
        if key in data:
            data[key] = data[key].isoformat()
    return {"_id": ObjectId(), **data}


def add_entry(identity: Dict[str, Any], kind: EntryKind, entry: Dict[str, Any]) -> Dict[str, Any]:
    """Inserta la entrada al frente de la lista (más reciente primero)."""
    doc = profile_repo.find_by_user(user_oid(identity))
    if doc is None:
        raise ProfileNotFound()
    updated = profile_repo.set_entries(doc, kind, [_entry_doc(entry), *doc.get(kind, [])])
    if updated is None:
        raise ConcurrentUpdate()
    return public_doc(updated)


def remove_entry(identity: Dict[str, Any], kind: EntryKind, entry_id: str) -> Dict[str, Any]:
    """Quita exactamente la entrada `entry_id`; si no existe no toca nada."""
    doc = profile_repo.find_by_user(user_oid(identity))
    if doc is None:
        raise ProfileNotFound()
    eid = to_object_id(entry_id)
    entries = doc.get(kind, [])
    remaining = [e for e in entries if e.get("_id") != eid]
    if eid is None or len(remaining) == len(entries):
        raise EntryNotFound(ENTRY_NOT_FOUND[kind])
    updated = profile_repo.set_entries(doc, kind, remaining)
    if updated is None:
        raise ConcurrentUpdate()
    return public_doc(updated)


def delete_account(identity: Dict[str, Any]) -> List[str]:
    """Borra posts, perfil y usuario, en ese orden.

    No es atómico: si un paso falla se lanza `CascadeDeleteError` con los
    pasos ya completados.
    """
    oid = user_oid(identity)
    steps = (
        ("posts", post_repo.delete_by_user),
        ("profile", profile_repo.delete_by_user),
        ("user", user_repo.delete_user),
    )
    deleted: List[str] = []
    for name, step in steps:
        try:
            step(oid)
        except StoreError as e:
            _log.error("Borrado en cascada interrumpido user=%s en '%s' (completado: %s)", oid, name, deleted)
            raise CascadeDeleteError(deleted) from e
        deleted.append(name)
    _log.info("Cuenta eliminada user=%s", oid)
    return deleted
