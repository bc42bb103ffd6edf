"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Toda respuesta de error lleva `msg` (o `errors` para validación). Los fallos
del servidor se registran con su request id y nunca exponen detalles.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

SERVER_ERROR_MSG = "Server error."


class AppError(Exception):
    """Base de los errores de la API: cada subclase fija su status y mensaje."""

    status_code = 500
    msg = SERVER_ERROR_MSG

    def __init__(self, msg: Optional[str] = None) -> None:
        if msg is not None:
            self.msg = msg
        super().__init__(self.msg)

    def body(self) -> Dict[str, Any]:
        return {"msg": self.msg}


class Unauthenticated(AppError):
    status_code = 401
    msg = "No token. Authorization denied."


class InvalidCredential(AppError):
    status_code = 401
    msg = "Token is not valid."


class NotAuthorized(AppError):
    status_code = 401
    msg = "User not authorized."


class ValidationFailed(AppError):
    """Campos requeridos ausentes o inválidos; lleva la lista de errores por campo."""

    status_code = 400
    msg = "Validation failed."

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__()
        self.errors = errors

    @classmethod
    def single(cls, msg: str) -> "ValidationFailed":
        return cls([{"msg": msg}])

    def body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class Conflict(AppError):
    status_code = 400


class ConcurrentUpdate(AppError):
    """El documento cambió entre la lectura y la escritura; el cliente puede reintentar."""

    status_code = 409
    msg = "The record was modified by another request. Try again."


class TooManyRequests(AppError):
    status_code = 429
    msg = "Too many attempts. Try again later."


class NotFound(AppError):
    status_code = 404
    msg = "Not found."


class ProfileNotFound(NotFound):
    # 400 para conservar el contrato público de /profile
    status_code = 400
    msg = "There is no profile for this user."


class UserNotFound(NotFound):
    msg = "User not found."


class EntryNotFound(NotFound):
    msg = "Entry not found."


class PostNotFound(NotFound):
    msg = "Post not found."


class CommentNotFound(NotFound):
    msg = "Comment does not exist."


class GithubProfileNotFound(NotFound):
    msg = "No Github profile found."


class ServerFault(AppError):
    """Fallo interno: el detalle se registra, al cliente solo llega el mensaje genérico."""

    def body(self) -> Dict[str, Any]:
        return {"msg": SERVER_ERROR_MSG}


class StoreError(ServerFault):
    """Fallo de la base de datos (conexión, escritura, etc.)."""


class CascadeDeleteError(StoreError):
    """El borrado en cascada se interrumpió; `deleted` lista los pasos completados."""

    def __init__(self, deleted: List[str]) -> None:
        super().__init__()
        self.deleted = list(deleted)

    def body(self) -> Dict[str, Any]:
        return {**super().body(), "deleted": self.deleted}


class UpstreamError(ServerFault):
    """Fallo de transporte contra un servicio externo."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Traduce errores de Pydantic al formato {msg, param, location}."""
    out: List[Dict[str, Any]] = []
    for err in exc.errors():
        loc = list(err.get("loc") or [])
        location = str(loc[0]) if loc else "body"
        param = ".".join(str(p) for p in loc[1:]) or location
        out.append({"msg": err.get("msg", "Invalid value."), "param": param, "location": location})
    return out


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("devconnector.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s request_id=%s: %s", type(exc).__name__, _req_id(request), exc.__cause__ or exc)
        return JSONResponse(status_code=exc.status_code, content=exc.body())

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"msg": exc.detail or "HTTP error"})

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"errors": _field_errors(exc)})

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=500, content={"msg": SERVER_ERROR_MSG})
