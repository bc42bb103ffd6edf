"""
Cliente mínimo de la API de GitHub para listar repos públicos de un usuario.

Solo lectura: 5 repos, ordenados por fecha de creación ascendente. Si hay
client id/secret configurados se envían como basic auth para subir el
límite de peticiones.
"""
import logging
from typing import Any
from urllib.parse import quote

import requests

from devconnector.core.config import Settings
from devconnector.core.exceptions import GithubProfileNotFound, UpstreamError

_log = logging.getLogger("devconnector.github")

USER_AGENT = "devconnector-api"
PER_PAGE = 5


def list_user_repos(username: str, cfg: Settings) -> Any:
    """Devuelve el JSON de GitHub tal cual.

    Respuesta distinta de 200 -> `GithubProfileNotFound`; fallo de red ->
    `UpstreamError` (registrado).
    """
    url = f"{cfg.github_api_url.rstrip('/')}/users/{quote(username, safe='')}/repos"
    params = {"per_page": PER_PAGE, "sort": "created", "direction": "asc"}
    auth = (cfg.github_client_id, cfg.github_secret) if cfg.github_configured else None
    try:
        r = requests.get(
            url,
            params=params,
            auth=auth,
            headers={"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"},
            timeout=cfg.github_timeout_seconds,
        )
    except requests.RequestException as e:
        _log.error("GitHub no accesible username=%s: %s", username, e)
        raise UpstreamError() from e
    if r.status_code != 200:
        _log.info("GitHub respondió %s para username=%s", r.status_code, username)
        raise GithubProfileNotFound()
    try:
        return r.json()
    except ValueError as e:
        _log.error("Respuesta de GitHub no es JSON username=%s", username)
        raise UpstreamError() from e
