"""
Middlewares: contexto de petición (id + línea de log) y CORS.
"""
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from devconnector.core.config import Settings

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Asigna `request.state.request_id` y registra método, ruta, status y latencia."""

    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("devconnector.request")

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            elapsed = int((time.perf_counter() - start) * 1000)
            level = logging.WARNING if status >= 500 else logging.INFO
            self.log.log(
                level, "%s %s -> %s (%sms) request_id=%s",
                request.method, request.url.path, status, elapsed, rid,
            )


def add_middlewares(app: FastAPI, cfg: Settings) -> None:
    if cfg.cors_allow_any:
        # orígenes dinámicos no admiten credentials
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=False,
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cfg.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=True,
        )
    app.add_middleware(RequestContextMiddleware)
