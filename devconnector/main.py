"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging

import uvicorn
from fastapi import FastAPI

from devconnector.api.router import api_router
from devconnector.api.routers.health import root_router
from devconnector.core.config import Settings, settings
from devconnector.core.exceptions import register_exception_handlers
from devconnector.core.logging import setup_logging
from devconnector.core.middleware import add_middlewares
from devconnector.infrastructure.db.bootstrap import ensure_collections
from devconnector.infrastructure.db.mongo import close_mongo, db_ready, init_mongo

_log = logging.getLogger("devconnector.startup")


def create_app(cfg: Settings = settings) -> FastAPI:
    setup_logging(cfg.log_level)
    if not cfg.jwt_secret:
        _log.warning("JWT_SECRET no configurado; las rutas con token responderán 500")

    app = FastAPI(title=cfg.app_name)
    app.state.settings = cfg

    add_middlewares(app, cfg)
    register_exception_handlers(app)

    @app.on_event("startup")
    def on_startup():
        # Los tests inyectan su propio cliente antes de arrancar
        if not db_ready():
            init_mongo(cfg)
        # Garantiza colecciones/índices/validadores mínimos si hay conexión
        try:
            if db_ready():
                ensure_collections()
            else:
                _log.warning("Mongo no listo; omitiendo ensure_collections()")
        except Exception as e:
            # No impedir el arranque si fallan validadores/índices
            _log.warning("ensure_collections() falló: %s", e)

    @app.on_event("shutdown")
    def on_shutdown():
        close_mongo()

    app.include_router(root_router)
    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=cfg.api_prefix_normalized)
    return app


app = create_app()


def run() -> None:
    """Arranca el servidor (script `devconnector`)."""
    _log.info("Servidor en puerto %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
