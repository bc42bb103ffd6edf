"""
Rate limit en memoria por (identificador, ruta) con ventana deslizante.

Se usa para frenar intentos de login por IP. Es por proceso: con varios
workers cada uno lleva su propia cuenta.
"""
from threading import Lock
from time import monotonic
from typing import Dict, List, Tuple

_BUCKET: Dict[Tuple[str, str], List[float]] = {}
_lock = Lock()


def allow(identifier: str, route: str, *, limit: int, window_seconds: int = 60) -> bool:
    """Registra un intento y devuelve False si se excede `limit` dentro de la ventana."""
    now = monotonic()
    key = (identifier, route)
    with _lock:
        hits = [t for t in _BUCKET.get(key, []) if now - t < window_seconds]
        if len(hits) >= limit:
            _BUCKET[key] = hits
            return False
        hits.append(now)
        _BUCKET[key] = hits
        return True


def reset() -> None:
    """Limpia el bucket (útil en tests o reinicios)."""
    with _lock:
        _BUCKET.clear()
