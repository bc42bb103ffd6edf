"""
Creación y verificación de JWTs de acceso (header `x-auth-token`).

Payload: {"user": {"id": <user_id>}, "iat", "exp"}.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt as pyjwt

from devconnector.core.config import Settings
from devconnector.core.exceptions import InvalidCredential


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _secret(cfg: Settings) -> str:
    if not cfg.jwt_secret:
        raise RuntimeError("JWT_SECRET no configurado")
    return cfg.jwt_secret


def create_access_token(user_id: str, cfg: Settings) -> str:
    """Genera un JWT válido por `jwt_expire_seconds`."""
    now = _now_utc()
    payload = {
        "user": {"id": str(user_id)},
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=cfg.jwt_expire_seconds)).timestamp()),
    }
    return pyjwt.encode(payload, _secret(cfg), algorithm=cfg.jwt_algorithm)


def verify_access_token(token: str, cfg: Settings) -> Dict[str, Any]:
    """
    Valida firma/expiración y devuelve el claim `user` ({"id": ...}).
    Cualquier token ilegible, vencido o sin `user.id` es `InvalidCredential`.
    """
    try:
        payload = pyjwt.decode(token, key=_secret(cfg), algorithms=[cfg.jwt_algorithm])
    except pyjwt.PyJWTError as e:
        raise InvalidCredential() from e
    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise InvalidCredential()
    return {"id": str(user["id"])}
