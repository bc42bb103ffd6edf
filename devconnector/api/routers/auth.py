"""Rutas de cuentas: registro (/users) y login / usuario actual (/auth)."""
from fastapi import APIRouter, Depends, Request

from devconnector.api.deps import get_current_user, get_settings
from devconnector.api.schemas.auth import LoginPayload, RegisterPayload, TokenOut
from devconnector.core import rate_limit
from devconnector.core.config import Settings
from devconnector.core.exceptions import TooManyRequests
from devconnector.services import auth_service as service

users_router = APIRouter(prefix="/users", tags=["Users"])
router = APIRouter(prefix="/auth", tags=["Auth"])


@users_router.post(
    "",
    response_model=TokenOut,
    summary="Registrar usuario",
    description="Valida nombre, email y password; devuelve un token de acceso.",
)
def register(payload: RegisterPayload, cfg: Settings = Depends(get_settings)):
    payload.ensure_valid()
    return service.register_user(name=payload.name, email=payload.email, password=payload.password, cfg=cfg)


@router.get("", response_model=dict, summary="Usuario autenticado")
def me(user=Depends(get_current_user)):
    return service.get_me(user)


@router.post("", response_model=TokenOut, summary="Login con email y password")
def login(payload: LoginPayload, request: Request, cfg: Settings = Depends(get_settings)):
    # Rate limit por IP
    ip = request.client.host if request.client else ""
    if not rate_limit.allow(ip, "/auth", limit=cfg.login_rate_per_min):
        raise TooManyRequests()
    payload.ensure_valid()
    return service.login(email=payload.email, password=payload.password, cfg=cfg)
