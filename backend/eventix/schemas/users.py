"""User Schemas — registration request and response."""

from pydantic import Field, field_validator

from eventix.schemas.tickets import CamelModel


class RegisterRequest(CamelModel):
    """passwordHash is produced by the auth collaborator; stored as given."""
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$", max_length=255)
    password_hash: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class RegisterResponse(CamelModel):
    success: bool
    user_id: int | None = None
    message: str | None = None
    error: str | None = None
    error_code: str | None = None
