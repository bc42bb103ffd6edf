"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del repositorio.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT, GitHub.
- Se construye una sola vez; los componentes la reciben vía `app.state.settings`.
"""
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del repo (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Variables de configuración con valores por defecto razonables.

    Los nombres heredados de la versión Node (`jwtSecret`, `githubClientId`,
    `githubSecret`) se aceptan como alias.
    """
    # App
    app_name: str = "DevConnector API"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = Field(3001, validation_alias=AliasChoices("PORT", "port"))
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    cors_allow_any: bool = False

    # Mongo
    mongo_uri: str = Field(
        "mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGO_URI", "mongoURI", "mongo_uri"),
    )
    mongo_db: str = "devconnector"
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # Auth / JWT
    jwt_secret: str | None = Field(
        None,
        validation_alias=AliasChoices("JWT_SECRET", "jwtSecret", "jwt_secret"),
    )
    jwt_algorithm: str = "HS256"
    jwt_expire_seconds: int = 360000
    login_rate_per_min: int = 10

    # GitHub (listado de repos públicos)
    github_client_id: str | None = Field(
        None,
        validation_alias=AliasChoices("GITHUB_CLIENT_ID", "githubClientId", "github_client_id"),
    )
    github_secret: str | None = Field(
        None,
        validation_alias=AliasChoices("GITHUB_SECRET", "githubSecret", "github_secret"),
    )
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: int = 10

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )

    # --- Utilidades derivadas ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def github_configured(self) -> bool:
        return bool(self.github_client_id and self.github_secret)


settings = Settings()
