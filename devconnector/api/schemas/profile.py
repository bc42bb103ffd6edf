"""
Esquemas Pydantic para `profile` y sus listas (experience / education).

Reglas clave:
- `status` y `skills` son obligatorios al crear/actualizar el perfil.
- `skills` llega como texto separado por comas (o lista) y se guarda como lista.
- Fechas como ISO-8601 (YYYY-MM-DD).
"""
from datetime import date
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import Field, field_validator

from devconnector.api.schemas.common import CheckedBody


def normalize_skills(raw: Union[str, List[Any]]) -> List[Any]:
    """'go, react, node' -> ['go', 'react', 'node'] (sin tokens vacíos)."""
    items = raw.split(",") if isinstance(raw, str) else raw
    out: List[Any] = []
    for item in items:
        # lo que no sea str lo rechaza la validación de tipo
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
        out.append(item)
    return out


class ProfileIn(CheckedBody):
    REQUIRED: ClassVar[Dict[str, str]] = {
        "status": "Status is required.",
        "skills": "Skills is required.",
    }

    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = None
    githubusername: Optional[str] = None
    skills: Optional[List[str]] = None

    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, v: Any) -> Any:
        if v is None or not isinstance(v, (str, list)):
            return v
        return normalize_skills(v)


class _DatedEntryIn(CheckedBody):
    from_: Optional[date] = Field(default=None, alias="from")
    to: Optional[date] = None
    current: bool = False
    description: Optional[str] = None

    @field_validator("current", mode="before")
    @classmethod
    def _null_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class ExperienceIn(_DatedEntryIn):
    REQUIRED: ClassVar[Dict[str, str]] = {
        "title": "Title is required.",
        "company": "Company name is required.",
        "from_": "From Date is required.",
    }

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None


class EducationIn(_DatedEntryIn):
    REQUIRED: ClassVar[Dict[str, str]] = {
        "school": "School is required.",
        "degree": "Degree is required.",
        "fieldofstudy": "Field of study is required.",
        "from_": "From Date is required.",
    }

    school: Optional[str] = None
    degree: Optional[str] = None
    fieldofstudy: Optional[str] = None
