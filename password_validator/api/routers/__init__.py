"""API routers for the password validator."""

from password_validator.api.routers import health, password, rules

__all__ = [
    "health",
    "password",
    "rules",
]
