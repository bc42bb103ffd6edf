"""Health (sin auth)."""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from devconnector.infrastructure.db.mongo import db_ready

router = APIRouter(tags=["Health"])  # se monta bajo el prefijo de la API
root_router = APIRouter(tags=["Health"])  # sin prefijo


class HealthOut(BaseModel):
    ok: bool
    db: bool


@root_router.get("/", response_class=PlainTextResponse, summary="API viva")
def root() -> str:
    return "API Running."


@router.get("/health", response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True, db=db_ready())
