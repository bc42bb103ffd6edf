"""Helpers para valores que llegan de la API."""
from typing import Any


def is_blank(value: Any) -> bool:
    """None, texto vacío (o solo espacios) y colecciones vacías cuentan como ausentes."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False
