"""
Lógica de cuentas: registro, login y usuario actual.
"""
import hashlib
import logging
from typing import Any, Dict
from urllib.parse import urlencode

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from argon2.low_level import Type

from devconnector.core.config import Settings
from devconnector.core.exceptions import UserNotFound, ValidationFailed
from devconnector.infrastructure.db.mongo import public_doc, to_object_id
from devconnector.infrastructure.security.token_service import create_access_token
from devconnector.repositories import user_repo as repo

_log = logging.getLogger("devconnector.auth")

ph = PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)

INVALID_CREDENTIALS = "Invalid credentials."


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def gravatar_url(email: str) -> str:
    """Avatar de Gravatar (200px, rating pg, silueta por defecto)."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"//www.gravatar.com/avatar/{digest}?" + urlencode({"s": "200", "r": "pg", "d": "mm"})


def register_user(*, name: str, email: str, password: str, cfg: Settings) -> Dict[str, str]:
    """Crea la cuenta y devuelve {"token": ...}."""
    email = email.lower()
    if repo.find_user_by_email(email):
        raise ValidationFailed.single("User already exists.")
    user_id = repo.insert_user(
        name=name,
        email=email,
        password_hash=hash_password(password),
        avatar=gravatar_url(email),
    )
    if user_id is None:
        # Carrera con otro registro del mismo email (índice único)
        raise ValidationFailed.single("User already exists.")
    _log.info("Usuario registrado id=%s", user_id)
    return {"token": create_access_token(user_id, cfg)}


def login(*, email: str, password: str, cfg: Settings) -> Dict[str, str]:
    u = repo.find_user_by_email(email)
    if not u or not verify_password(password, u.get("password", "")):
        raise ValidationFailed.single(INVALID_CREDENTIALS)
    return {"token": create_access_token(str(u["_id"]), cfg)}


def get_me(identity: Dict[str, Any]) -> Dict[str, Any]:
    """Usuario autenticado sin el hash de password."""
    oid = to_object_id(identity["id"])
    u = repo.get_user(oid) if oid else None
    if not u:
        raise UserNotFound()
    return public_doc(u)
