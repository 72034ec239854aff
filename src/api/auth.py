"""Auth routes: the login form, token login and registration."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm

from core.security import create_access_token
from crud.user import user_crud
from dependencies.db import DbSession
from schemas.api import ApiResponse
from schemas.auth import LoginForm, Token, UserRegister
from schemas.user import UserPublic


router = APIRouter(prefix="/auth", tags=["auth"])

PasswordForm = Annotated[OAuth2PasswordRequestForm, Depends()]

_logger = logging.getLogger(__name__)


@router.get(
    "/login", name="auth.login_form", response_model=ApiResponse[LoginForm]
)
async def login_form(
    request: Request, next: str | None = None
) -> ApiResponse[LoginForm]:
    """
    Describe the login form.

    Anonymous calls to protected actions are redirected here with the
    original path in ``next``.
    """
    return ApiResponse(
        data=LoginForm(action=str(request.url_for("auth.login")), next=next),
        message="Authentication required",
    )


@router.post("/login", name="auth.login", response_model=Token)
async def login(form_data: PasswordForm, db: DbSession) -> Token:
    """
    OAuth2-compatible token login, get an access token for future requests.

    - **username**: The user's username
    - **password**: The user's password
    """
    user = await user_crud.authenticate(db, form_data.username, form_data.password)
    if user is None:
        _logger.info("Failed login for username=%s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(access_token=create_access_token(user.id), token_type="bearer")


@router.post(
    "/register",
    name="auth.register",
    response_model=ApiResponse[UserPublic],
    status_code=status.HTTP_201_CREATED,
)
async def register(payload: UserRegister, db: DbSession) -> ApiResponse[UserPublic]:
    """
    Register a new user account.

    - **username**: The user's username (3-50 chars, alphanumeric, underscore, hyphen)
    - **email**: Valid email address
    - **password**: Password with minimum length of 12 characters

    A taken username or email answers 409.
    """
    # DuplicateUserError propagates to the domain handler (409)
    user = await user_crud.create(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    _logger.info("Registered user_id=%s", user.id)

    return ApiResponse(
        data=UserPublic.model_validate(user), message="Registration successful"
    )
