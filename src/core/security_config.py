"""Security constants for log redaction and error response shaping."""

# Keys redacted from structured log entries (substring match, case-insensitive)
SENSITIVE_KEYS: set[str] = {
    # Credentials
    "password",
    "secret",
    "token",
    "authorization",
    "api_key",
    "jwt",
    "session_id",
    "bearer",
    "cookie",
    # Personal data held on users
    "email",
    "phone",
    "address",
}

# Error response fields visible in production
PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
    "fields",
}

# Development additionally exposes diagnostics
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment."""
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
