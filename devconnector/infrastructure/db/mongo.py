"""Cliente MongoDB (pymongo) compartido por los repositorios.

- `init_mongo()` se llama una sola vez en el startup (o desde tests con un
  cliente propio).
- Los repositorios usan `get_db()`; nunca los routers.
- `store_errors` traduce fallos de pymongo a `StoreError` en el borde del repo.
- `cas_set` reescribe campos solo si `rev` no cambió desde la lectura.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

import certifi
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from devconnector.core.config import Settings
from devconnector.core.exceptions import StoreError

_log = logging.getLogger("devconnector.mongo")

_client: Optional[MongoClient] = None
_db: Optional[Database] = None

F = TypeVar("F", bound=Callable[..., Any])


def _build_client(cfg: Settings) -> MongoClient:
    uri = cfg.mongo_uri
    kwargs: dict[str, Any] = dict(serverSelectionTimeoutMS=15000)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif cfg.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsAllowInvalidCertificates"] = cfg.mongo_tls_insecure
        kwargs["tlsAllowInvalidHostnames"] = cfg.mongo_tls_allow_invalid_hostnames
    return MongoClient(uri, **kwargs)


def init_mongo(cfg: Settings, client: Optional[MongoClient] = None) -> None:
    """
    Inicializa el cliente y valida conexión (ping).
    Si la base no responde no tumba la app: deja `_db` en None y lo registra.
    """
    global _client, _db
    try:
        _client = client if client is not None else _build_client(cfg)
        _client.admin.command("ping")
        _db = _client[cfg.mongo_db]
        _log.info("Mongo conectado (db=%s)", cfg.mongo_db)
    except PyMongoError as e:
        _log.warning("Mongo no accesible: %s", e)
        _client = None
        _db = None


def close_mongo() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def get_db() -> Database:
    """
    Devuelve la referencia a la base de datos.
    Úsalo en repositorios, no en routers.
    """
    if _db is None:
        _log.error("Mongo no inicializado; la petición no puede acceder a la base")
        raise StoreError()
    return _db


def db_ready() -> bool:
    return _db is not None


def store_errors(fn: F) -> F:
    """Decorador para funciones de repositorio: PyMongoError -> StoreError."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except PyMongoError as e:
            raise StoreError() from e

    return wrapper  # type: ignore[return-value]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId a partir de str/ObjectId; None si el valor no es un id válido."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def public_doc(value: Any) -> Any:
    """Convierte un documento a JSON público: `_id` -> `id` y ObjectId -> str (recursivo)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [public_doc(v) for v in value]
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        if "_id" in value:
            out["id"] = str(value["_id"])
        for k, v in value.items():
            if k != "_id":
                out[k] = public_doc(v)
        return out
    return value


@store_errors
def cas_set(collection: str, doc: dict[str, Any], fields: dict[str, Any]) -> Optional[dict[str, Any]]:
    """`$set` condicionado a la revisión leída (`rev`); incrementa `rev`.

    Devuelve el documento actualizado o None si otra petición lo modificó
    (o lo borró) desde la lectura. `rev` ausente equivale a None.
    """
    return get_db()[collection].find_one_and_update(
        {"_id": doc["_id"], "rev": doc.get("rev")},
        {"$set": fields, "$inc": {"rev": 1}},
        return_document=ReturnDocument.AFTER,
    )
