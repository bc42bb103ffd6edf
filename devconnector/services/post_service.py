"""
Servicios de posts: publicar, listar, borrar, likes y comentarios.

El autor (nombre/avatar) se copia al post y al comentario al crearlos.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from bson import ObjectId

from devconnector.core.exceptions import (
    CommentNotFound,
    ConcurrentUpdate,
    Conflict,
    NotAuthorized,
    PostNotFound,
    UserNotFound,
)
from devconnector.infrastructure.db.mongo import public_doc, to_object_id
from devconnector.repositories import post_repo, user_repo
from devconnector.services.profile_service import user_oid

_log = logging.getLogger("devconnector.posts")


def _author(identity: Dict[str, Any]) -> Dict[str, Any]:
    oid = user_oid(identity)
    u = user_repo.get_user(oid)
    if not u:
        raise UserNotFound()
    return u


def _load_post(post_id: str) -> Dict[str, Any]:
    oid = to_object_id(post_id)
    doc = post_repo.get_post(oid) if oid else None
    if not doc:
        raise PostNotFound()
    return doc


def create_post(identity: Dict[str, Any], text: str) -> Dict[str, Any]:
    u = _author(identity)
    doc = post_repo.insert_post(user_id=u["_id"], text=text, name=u.get("name"), avatar=u.get("avatar"))
    return public_doc(doc)


def list_posts() -> List[Dict[str, Any]]:
    return public_doc(post_repo.list_posts())


def get_post(post_id: str) -> Dict[str, Any]:
    return public_doc(_load_post(post_id))


def delete_post(identity: Dict[str, Any], post_id: str) -> None:
    doc = _load_post(post_id)
    if doc.get("user") != user_oid(identity):
        raise NotAuthorized()
    post_repo.delete_post(doc["_id"])
    _log.info("Post eliminado id=%s", doc["_id"])


def _save_list(post: Dict[str, Any], field: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    updated = post_repo.set_list(post, field, items)
    if updated is None:
        raise ConcurrentUpdate()
    return public_doc(updated[field])


def like_post(identity: Dict[str, Any], post_id: str) -> List[Dict[str, Any]]:
    doc = _load_post(post_id)
    uid = user_oid(identity)
    likes = doc.get("likes", [])
    if any(like.get("user") == uid for like in likes):
        raise Conflict("Post already liked.")
    return _save_list(doc, "likes", [{"_id": ObjectId(), "user": uid}, *likes])


def unlike_post(identity: Dict[str, Any], post_id: str) -> List[Dict[str, Any]]:
    doc = _load_post(post_id)
    uid = user_oid(identity)
    likes = doc.get("likes", [])
    remaining = [like for like in likes if like.get("user") != uid]
    if len(remaining) == len(likes):
        raise Conflict("Post has not yet been liked.")
    return _save_list(doc, "likes", remaining)


def add_comment(identity: Dict[str, Any], post_id: str, text: str) -> List[Dict[str, Any]]:
    u = _author(identity)
    doc = _load_post(post_id)
    comment = {
        "_id": ObjectId(),
        "user": u["_id"],
        "text": text,
        "name": u.get("name"),
        "avatar": u.get("avatar"),
        "date": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
    return _save_list(doc, "comments", [comment, *doc.get("comments", [])])


def delete_comment(identity: Dict[str, Any], post_id: str, comment_id: str) -> List[Dict[str, Any]]:
    doc = _load_post(post_id)
    cid = to_object_id(comment_id)
    comments = doc.get("comments", [])
    comment = next((c for c in comments if c.get("_id") == cid), None) if cid else None
    if comment is None:
        raise CommentNotFound()
    if comment.get("user") != user_oid(identity):
        raise NotAuthorized()
    return _save_list(doc, "comments", [c for c in comments if c.get("_id") != cid])
