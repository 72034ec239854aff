from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, Protocol, TypeVar
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from core.exceptions import AuthenticationRequiredError, NotFoundError
from core.security import read_access_token
from crud.user import user_crud
from dependencies.db import DbSession
from models.users import User


LOGGER = logging.getLogger(__name__)

# An absent header yields None; the action policy decides what that means
bearer_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


# --------------------------------------------------------------------------- #
# Identity resolution
# --------------------------------------------------------------------------- #
async def get_optional_user(
    db: DbSession,
    token: Annotated[str | None, Depends(bearer_scheme)],
) -> User | None:
    """Resolve the acting user from the bearer token.

    A missing, malformed or expired token, or one naming a user that no
    longer exists, resolves to an anonymous caller (None).
    """
    if not token:
        return None
    user_id = read_access_token(token)
    if user_id is None:
        return None
    user = await user_crud.get_by_id(db, user_id)
    if user is None:
        LOGGER.debug("Token names unknown user %s", user_id)
    return user


# --------------------------------------------------------------------------- #
# Action policy
# --------------------------------------------------------------------------- #
class Access(str, Enum):
    """Who may invoke a routed action."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


# Every routed action, keyed by its route name. Reads are public, anything
# that renders a form for or performs a mutation needs an identity.
ACTION_POLICIES: dict[str, Access] = {
    "recipes.index": Access.PUBLIC,
    "recipes.show": Access.PUBLIC,
    "recipes.new": Access.AUTHENTICATED,
    "recipes.create": Access.AUTHENTICATED,
    "recipes.edit": Access.AUTHENTICATED,
    "recipes.update": Access.AUTHENTICATED,
    "recipes.destroy": Access.AUTHENTICATED,
    "ingredients.index": Access.PUBLIC,
    "ingredients.show": Access.PUBLIC,
    "ingredients.new": Access.AUTHENTICATED,
    "ingredients.create": Access.AUTHENTICATED,
    "ingredients.edit": Access.AUTHENTICATED,
    "ingredients.update": Access.AUTHENTICATED,
    "ingredients.destroy": Access.AUTHENTICATED,
}


def authorize(action: str) -> Callable[..., Awaitable[User | None]]:
    """Build the dependency enforcing ``ACTION_POLICIES[action]``.

    Unknown actions fail with KeyError when the route module is imported.
    The dependency returns the acting user (None for anonymous public reads)
    and raises AuthenticationRequiredError for anonymous protected calls.
    """
    access = ACTION_POLICIES[action]

    async def _enforce(
        request: Request,
        user: Annotated[User | None, Depends(get_optional_user)],
    ) -> User | None:
        if access is Access.AUTHENTICATED and user is None:
            LOGGER.debug("Anonymous request to protected action %s", action)
            raise AuthenticationRequiredError(request.url.path)
        return user

    return _enforce


# --------------------------------------------------------------------------- #
# Ownership
# --------------------------------------------------------------------------- #
class Owned(Protocol):
    user_id: UUID | None


OwnedT = TypeVar("OwnedT", bound=Owned)


def check_resource_access(
    resource: OwnedT,
    current_user: User,
    *,
    missing: type[NotFoundError] = NotFoundError,
) -> OwnedT:
    """Return ``resource`` if ``current_user`` may change it.

    Owners and admins may; rows with no owner (seed data) are open to any
    authenticated user. Anyone else gets ``missing`` raised, the same 404 an
    unknown id produces.
    """
    if (
        resource.user_id is None
        or current_user.is_admin
        or resource.user_id == current_user.id
    ):
        return resource
    LOGGER.debug(
        "User %s may not modify resource owned by %s",
        current_user.id,
        resource.user_id,
    )
    raise missing()
