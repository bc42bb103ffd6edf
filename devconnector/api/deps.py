"""
Dependencias reutilizables para routers (FastAPI Depends).

- Configuración: la instancia de `Settings` creada en el arranque.
- Autenticación: valida el token del header `x-auth-token` y devuelve el
  claim de identidad `{"id": ...}`. Sin token la petición se corta aquí.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from devconnector.core.config import Settings
from devconnector.core.exceptions import Unauthenticated
from devconnector.infrastructure.security.token_service import verify_access_token


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    x_auth_token: Optional[str] = Header(default=None, alias="x-auth-token"),
    cfg: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    if not x_auth_token:
        raise Unauthenticated()
    return verify_access_token(x_auth_token, cfg)
