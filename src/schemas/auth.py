from pydantic import BaseModel, EmailStr, Field


class Token(BaseModel):
    access_token: str = Field(..., description="Access token for authentication")
    token_type: str = Field(..., description="Type of the token, e.g., 'bearer'")


class LoginForm(BaseModel):
    """Login template returned to clients redirected from protected actions."""

    action: str = Field(..., description="Where to POST the credentials")
    method: str = "POST"
    fields: list[str] = Field(default_factory=lambda: ["username", "password"])
    next: str | None = Field(
        default=None, description="Path to return to after logging in"
    )


class UserRegister(BaseModel):
    """Schema for user registration."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_\-]{3,50}$",
        description="Username (3-50 chars, alphanumeric, underscore, hyphen)",
    )
    email: EmailStr = Field(..., description="Valid email address")
    password: str = Field(
        ...,
        min_length=12,
        description="Password with minimum length of 12 characters",
    )
