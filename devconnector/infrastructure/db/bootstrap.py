"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app para asegurar colecciones mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from pymongo.errors import PyMongoError

from devconnector.infrastructure.db.mongo import get_db
from devconnector.repositories.post_repo import COLLECTION as POSTS
from devconnector.repositories.profile_repo import COLLECTION as PROFILES
from devconnector.repositories.user_repo import COLLECTION as USERS

_log = logging.getLogger("devconnector.mongo.bootstrap")

_ISO = {"bsonType": "string", "minLength": 10}

_DATED_ENTRY = {
    "from": _ISO,
    "to": {"bsonType": ["string", "null"]},
    "current": {"bsonType": "bool"},
    "description": {"bsonType": ["string", "null"]},
}

USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["name", "email", "password", "date"],
    "properties": {
        "name": {"bsonType": "string", "minLength": 1},
        "email": {"bsonType": "string", "minLength": 3, "description": "lowercase"},
        "password": {"bsonType": "string"},
        "avatar": {"bsonType": "string"},
        "date": _ISO,
    },
    "additionalProperties": True,
}

PROFILE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["user", "status", "skills", "experience", "education", "date"],
    "properties": {
        "user": {"bsonType": "objectId"},
        "status": {"bsonType": "string"},
        "skills": {"bsonType": "array", "items": {"bsonType": "string"}},
        "social": {"bsonType": "object"},
        "experience": {
            "bsonType": "array",
            "items": {
                "bsonType": "object",
                "required": ["_id", "title", "company", "from"],
                "properties": {
                    "_id": {"bsonType": "objectId"},
                    "title": {"bsonType": "string"},
                    "company": {"bsonType": "string"},
                    "location": {"bsonType": ["string", "null"]},
                    **_DATED_ENTRY,
                },
            },
        },
        "education": {
            "bsonType": "array",
            "items": {
                "bsonType": "object",
                "required": ["_id", "school", "degree", "fieldofstudy", "from"],
                "properties": {
                    "_id": {"bsonType": "objectId"},
                    "school": {"bsonType": "string"},
                    "degree": {"bsonType": "string"},
                    "fieldofstudy": {"bsonType": "string"},
                    **_DATED_ENTRY,
                },
            },
        },
        "date": _ISO,
    },
    "additionalProperties": True,
}

POST_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["user", "text", "likes", "comments", "date"],
    "properties": {
        "user": {"bsonType": "objectId"},
        "text": {"bsonType": "string", "minLength": 1},
        "name": {"bsonType": ["string", "null"]},
        "avatar": {"bsonType": ["string", "null"]},
        "likes": {"bsonType": "array"},
        "comments": {"bsonType": "array"},
        "date": _ISO,
    },
    "additionalProperties": True,
}


def _collmod_or_create(name: str, validator: Dict[str, Any]) -> None:
    db = get_db()
    try:
        if name not in db.list_collection_names():
            db.create_collection(name, validator={"$jsonSchema": validator}, validationLevel="moderate")
            return
        db.command({
            "collMod": name,
            "validator": {"$jsonSchema": validator},
            "validationLevel": "moderate",
        })
    except PyMongoError as e:
        # Algunos motores no aceptan collMod sin privilegios; seguimos sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        ix = dict(ix)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., ya existe o datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections() -> None:
    """
    Garantiza colecciones, validadores e índices mínimos.

    El índice único `profiles.user` es el que sostiene "un perfil por usuario"
    cuando dos upserts concurrentes compiten.
    """
    _collmod_or_create(USERS, USER_VALIDATOR)
    _ensure_indexes(USERS, [{"keys": [("email", 1)], "unique": True, "name": "uniq_email"}])

    _collmod_or_create(PROFILES, PROFILE_VALIDATOR)
    _ensure_indexes(PROFILES, [{"keys": [("user", 1)], "unique": True, "name": "uniq_profile_user"}])

    _collmod_or_create(POSTS, POST_VALIDATOR)
    _ensure_indexes(
        POSTS,
        [
            {"keys": [("user", 1)], "name": "ix_post_user"},
            {"keys": [("date", -1)], "name": "ix_post_date"},
        ],
    )
