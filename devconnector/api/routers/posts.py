"""Endpoints de posts (todos requieren token)."""
from fastapi import APIRouter, Depends

from devconnector.api.deps import get_current_user
from devconnector.api.schemas.common import MsgOut
from devconnector.api.schemas.post import CommentIn, PostIn
from devconnector.services import post_service

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=dict, summary="Publicar post")
def create_post(payload: PostIn, user=Depends(get_current_user)):
    payload.ensure_valid()
    return post_service.create_post(user, payload.text)


@router.get("", response_model=list, summary="Listar posts (recientes primero)")
def list_posts(user=Depends(get_current_user)):
    return post_service.list_posts()


@router.get("/{post_id}", response_model=dict, summary="Post por id")
def get_post(post_id: str, user=Depends(get_current_user)):
    return post_service.get_post(post_id)


@router.delete("/{post_id}", response_model=MsgOut, summary="Eliminar post propio")
def delete_post(post_id: str, user=Depends(get_current_user)):
    post_service.delete_post(user, post_id)
    return MsgOut(msg="Post removed.")


@router.put("/like/{post_id}", response_model=list, summary="Dar like")
def like_post(post_id: str, user=Depends(get_current_user)):
    return post_service.like_post(user, post_id)


@router.put("/unlike/{post_id}", response_model=list, summary="Quitar like")
def unlike_post(post_id: str, user=Depends(get_current_user)):
    return post_service.unlike_post(user, post_id)


@router.post("/comment/{post_id}", response_model=list, summary="Comentar post")
def add_comment(post_id: str, payload: CommentIn, user=Depends(get_current_user)):
    payload.ensure_valid()
    return post_service.add_comment(user, post_id, payload.text)


@router.delete("/comment/{post_id}/{comment_id}", response_model=list, summary="Eliminar comentario propio")
def delete_comment(post_id: str, comment_id: str, user=Depends(get_current_user)):
    return post_service.delete_comment(user, post_id, comment_id)
