"""Authentication and session schemas."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    SUPER_ADMIN = "superAdmin"
    ADMIN = "admin"
    USER = "user"


def coerce_identifier(value: Any) -> Any:
    """Accept numeric ids from the backend as strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class Principal(BaseModel):
    """Authenticated session record persisted under the ``authUser`` key."""

    id: str = Field(min_length=1)
    role: Role
    token: str = Field(min_length=1)
    email: str | None = None
    firstname: str | None = None
    lastname: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_identifier(value)

    def to_profile(self) -> "PrincipalProfile":
        return PrincipalProfile(
            id=self.id,
            role=self.role,
            email=self.email,
            firstname=self.firstname,
            lastname=self.lastname,
        )


class PrincipalProfile(BaseModel):
    """Display-only view of a principal; never carries the token."""

    id: str
    role: Role
    email: str | None = None
    firstname: str | None = None
    lastname: str | None = None


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class BackendLoginResponse(BaseModel):
    """Raw ``POST /auth/login`` payload; the role is validated after the call."""

    id: str
    role: str | None = None
    token: str = ""
    email: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    company_id: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", "company_id", mode="before")
    @classmethod
    def _normalize_ids(cls, value: Any) -> Any:
        return coerce_identifier(value)
