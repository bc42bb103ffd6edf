"""
Base para payloads con campos obligatorios.

Los campos se declaran opcionales en Pydantic y se validan aquí, para
responder con la lista `errors: [{msg, param, location}]` en un 400 antes de
tocar la lógica de negocio.
"""
from typing import Any, ClassVar, Dict, List

from pydantic import BaseModel, ConfigDict

from devconnector.core.exceptions import ValidationFailed
from devconnector.core.values import is_blank


class CheckedBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # nombre del campo (python) -> mensaje cuando falta
    REQUIRED: ClassVar[Dict[str, str]] = {}

    def field_errors(self) -> List[Dict[str, Any]]:
        errors: List[Dict[str, Any]] = []
        for name, msg in self.REQUIRED.items():
            if is_blank(getattr(self, name)):
                field = type(self).model_fields[name]
                errors.append({"msg": msg, "param": field.alias or name, "location": "body"})
        return errors

    def ensure_valid(self) -> None:
        errors = self.field_errors()
        if errors:
            raise ValidationFailed(errors)


class MsgOut(BaseModel):
    msg: str
