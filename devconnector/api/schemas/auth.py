"""
Esquemas Pydantic para registro y login.

- `email` se normaliza a minúsculas.
- Los mensajes de error siguen el formato `{msg, param, location}`.
"""
from typing import Any, ClassVar, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, field_validator

from devconnector.api.schemas.common import CheckedBody

MIN_PASSWORD_LEN = 6


def _valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class _EmailBody(CheckedBody):
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    def field_errors(self) -> List[Dict[str, Any]]:
        errors = super().field_errors()
        if not _valid_email(self.email):
            errors.append({"msg": "Please include a valid email.", "param": "email", "location": "body"})
        return errors


class RegisterPayload(_EmailBody):
    REQUIRED: ClassVar[Dict[str, str]] = {"name": "Name is required."}

    name: Optional[str] = None
    password: Optional[str] = None

    def field_errors(self) -> List[Dict[str, Any]]:
        errors = super().field_errors()
        if not self.password or len(self.password) < MIN_PASSWORD_LEN:
            errors.append({
                "msg": f"Please enter a password with {MIN_PASSWORD_LEN} or more characters.",
                "param": "password",
                "location": "body",
            })
        return errors


class LoginPayload(_EmailBody):
    REQUIRED: ClassVar[Dict[str, str]] = {"password": "Password is required."}

    password: Optional[str] = None


class TokenOut(BaseModel):
    token: str
