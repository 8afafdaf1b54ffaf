from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, StringConstraints

from fintrack.schemas.common import EntityResponse, Pagination, RequestModel

Currency = Literal[
    "USD", "EUR", "GBP", "CAD", "AUD", "NZD", "CHF", "JPY", "CNY", "INR",
    "BRL", "ARS", "CLP", "COP", "MXN", "PEN", "PYG", "UYU", "VND", "ZAR",
]


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


Email = Annotated[EmailStr, BeforeValidator(_strip)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30)]


class CredentialsModel(RequestModel):
    """Passwords are taken verbatim; every other text field is stripped."""

    model_config = ConfigDict(str_strip_whitespace=False)


class RegisterRequest(CredentialsModel):
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
    email: Email
    password: str = Field(..., min_length=6)
    first_name: Name
    last_name: Name
    currency: Currency = "USD"


class LoginRequest(CredentialsModel):
    email: Email
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(CredentialsModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserResponse(EntityResponse):
    username: str
    email: str
    first_name: str
    last_name: str
    currency: str
    is_admin: bool
    last_login: Optional[datetime] = None


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    user: UserResponse


class UserListResponse(Pagination):
    users: List[UserResponse]
