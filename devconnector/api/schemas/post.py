"""Esquemas para posts y comentarios."""
from typing import ClassVar, Dict, Optional

from devconnector.api.schemas.common import CheckedBody


class PostIn(CheckedBody):
    REQUIRED: ClassVar[Dict[str, str]] = {"text": "Text is required."}

    text: Optional[str] = None


class CommentIn(PostIn):
    pass
