from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from uuid import UUID


class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class NotFoundError(DomainError):
    """Base class for lookups that matched no row."""

    resource = "Resource"

    def __init__(self, message: str | None = None):
        super().__init__(message or f"{self.resource} not found")


class RecipeNotFoundError(NotFoundError):
    """Exception raised when a recipe id matches no row."""

    resource = "Recipe"


class IngredientNotFoundError(NotFoundError):
    """Exception raised when one or more ingredient ids match no row."""

    resource = "Ingredient"

    def __init__(self, missing_ids: Iterable[UUID] = ()):
        self.missing_ids = sorted(set(missing_ids), key=str)
        if self.missing_ids:
            ids = ", ".join(str(i) for i in self.missing_ids)
            super().__init__(f"Unknown ingredient id(s): {ids}")
        else:
            super().__init__()


class DuplicateUserError(DomainError):
    """Exception raised when attempting to create a user that already exists."""

    pass


class FormValidationError(DomainError):
    """Submitted form data was rejected; carries the form to re-render.

    ``form`` is the template echoed back to the client with the submitted
    values, ``fields`` maps each offending field to its messages.
    """

    def __init__(self, form: Any, fields: dict[str, list[str]]):
        super().__init__("Invalid form submission")
        self.form = form
        self.fields = fields


class AuthenticationRequiredError(DomainError):
    """A protected action was requested without a valid identity."""

    def __init__(self, next_path: str | None = None):
        super().__init__("Authentication required")
        self.next_path = next_path
