"""Repo de la colección `posts` (likes y comentarios embebidos).

Likes y comentarios se insertan al frente de su lista y se reescriben con
control optimista (`rev`), igual que las entradas de perfil.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING

from devconnector.infrastructure.db.mongo import cas_set, get_db, store_errors

COLLECTION = "posts"


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@store_errors
def insert_post(*, user_id: ObjectId, text: str, name: Optional[str], avatar: Optional[str]) -> Dict[str, Any]:
    """Inserta post con defaults y devuelve el documento completo."""
    doc = {
        "user": user_id,
        "text": text,
        "name": name,
        "avatar": avatar,
        "likes": [],
        "comments": [],
        "date": _now_iso(),
        "rev": 0,
    }
    res = get_db()[COLLECTION].insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


@store_errors
def list_posts() -> List[Dict[str, Any]]:
    """Todos los posts, más recientes primero (desempate por _id)."""
    return list(get_db()[COLLECTION].find({}).sort([("date", DESCENDING), ("_id", DESCENDING)]))


@store_errors
def get_post(post_id: ObjectId) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"_id": post_id})


@store_errors
def delete_post(post_id: ObjectId) -> bool:
    res = get_db()[COLLECTION].delete_one({"_id": post_id})
    return res.deleted_count > 0


@store_errors
def delete_by_user(user_id: ObjectId) -> int:
    res = get_db()[COLLECTION].delete_many({"user": user_id})
    return res.deleted_count


def set_list(post: Dict[str, Any], field: str, items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Reemplaza `likes` o `comments` si el post no cambió desde que se leyó; None si cambió."""
    return cas_set(COLLECTION, post, {field: items})
