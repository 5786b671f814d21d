"""Request/response schemas for login."""

from journal.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str
    password: str
    totp_code: str


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
