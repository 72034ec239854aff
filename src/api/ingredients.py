"""Ingredient resource endpoints, mirroring the recipe resource surface."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from api.forms import MALFORMED_BODY, field_errors, read_submission, submitted_text
from core.error_handler import structured_logger
from core.exceptions import FormValidationError
from crud.ingredients import ingredient_crud
from dependencies.auth import authorize
from dependencies.db import DbSession
from models.ingredients import Ingredient
from models.users import User
from schemas.api import ApiResponse
from schemas.ingredients import IngredientForm, IngredientOut, IngredientParams


router = APIRouter(prefix="/ingredients", tags=["ingredients"])


def _ingredient_form(
    request: Request, *, ingredient_id: UUID | None = None, name: str = ""
) -> IngredientForm:
    if ingredient_id is None:
        action, method = str(request.url_for("ingredients.create")), "POST"
    else:
        action = str(
            request.url_for("ingredients.update", ingredient_id=str(ingredient_id))
        )
        method = "PUT"
    return IngredientForm(id=ingredient_id, name=name, action=action, method=method)


def _redirect_to_ingredient(
    request: Request, ingredient: Ingredient
) -> RedirectResponse:
    return RedirectResponse(
        url=str(
            request.url_for("ingredients.show", ingredient_id=str(ingredient.id))
        ),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get(
    "",
    name="ingredients.index",
    response_model=ApiResponse[list[IngredientOut]],
    summary="List all ingredients",
)
async def list_ingredients(
    db: DbSession,
    _user: Annotated[User | None, Depends(authorize("ingredients.index"))],
) -> ApiResponse[list[IngredientOut]]:
    ingredients = await ingredient_crud.get_all(db)
    return ApiResponse(data=[IngredientOut.model_validate(i) for i in ingredients])


@router.get(
    "/new",
    name="ingredients.new",
    response_model=ApiResponse[IngredientForm],
    summary="Empty ingredient form",
)
async def new_ingredient(
    request: Request,
    _user: Annotated[User, Depends(authorize("ingredients.new"))],
) -> ApiResponse[IngredientForm]:
    return ApiResponse(data=_ingredient_form(request))


@router.post(
    "",
    name="ingredients.create",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    summary="Create an ingredient",
    responses={422: {"description": "Form re-rendered with field errors"}},
)
async def create_ingredient(
    request: Request,
    db: DbSession,
    _user: Annotated[User, Depends(authorize("ingredients.create"))],
) -> RedirectResponse:
    try:
        submitted = await read_submission(request)
    except ValueError as exc:
        raise FormValidationError(_ingredient_form(request), MALFORMED_BODY) from exc

    try:
        params = IngredientParams.model_validate(submitted)
    except ValidationError as exc:
        form = _ingredient_form(request, name=submitted_text(submitted, "name"))
        raise FormValidationError(form, field_errors(exc)) from exc

    ingredient = await ingredient_crud.create(db, params.name)
    structured_logger.info("Ingredient created", ingredient_id=str(ingredient.id))
    return _redirect_to_ingredient(request, ingredient)


@router.get(
    "/{ingredient_id}",
    name="ingredients.show",
    response_model=ApiResponse[IngredientOut],
    summary="Get an ingredient and the recipes using it",
)
async def get_ingredient(
    ingredient_id: UUID,
    db: DbSession,
    _user: Annotated[User | None, Depends(authorize("ingredients.show"))],
) -> ApiResponse[IngredientOut]:
    ingredient = await ingredient_crud.get_by_id(db, ingredient_id)
    return ApiResponse(data=IngredientOut.model_validate(ingredient))


@router.get(
    "/{ingredient_id}/edit",
    name="ingredients.edit",
    response_model=ApiResponse[IngredientForm],
    summary="Ingredient form pre-filled for editing",
)
async def edit_ingredient(
    ingredient_id: UUID,
    request: Request,
    db: DbSession,
    _user: Annotated[User, Depends(authorize("ingredients.edit"))],
) -> ApiResponse[IngredientForm]:
    ingredient = await ingredient_crud.get_by_id(db, ingredient_id)
    return ApiResponse(
        data=_ingredient_form(
            request, ingredient_id=ingredient.id, name=ingredient.name
        )
    )


@router.api_route(
    "/{ingredient_id}",
    methods=["PUT", "PATCH"],
    name="ingredients.update",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    summary="Rename an ingredient",
    responses={422: {"description": "Form re-rendered with field errors"}},
)
async def update_ingredient(
    ingredient_id: UUID,
    request: Request,
    db: DbSession,
    _user: Annotated[User, Depends(authorize("ingredients.update"))],
) -> RedirectResponse:
    ingredient = await ingredient_crud.get_by_id(db, ingredient_id)
    try:
        submitted = await read_submission(request)
    except ValueError as exc:
        form = _ingredient_form(
            request, ingredient_id=ingredient.id, name=ingredient.name
        )
        raise FormValidationError(form, MALFORMED_BODY) from exc

    try:
        params = IngredientParams.model_validate(submitted)
    except ValidationError as exc:
        form = _ingredient_form(
            request,
            ingredient_id=ingredient.id,
            name=submitted_text(submitted, "name"),
        )
        raise FormValidationError(form, field_errors(exc)) from exc

    ingredient = await ingredient_crud.update(db, ingredient, params.name)
    return _redirect_to_ingredient(request, ingredient)


@router.delete(
    "/{ingredient_id}",
    name="ingredients.destroy",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an ingredient",
)
async def delete_ingredient(
    ingredient_id: UUID,
    db: DbSession,
    _user: Annotated[User, Depends(authorize("ingredients.destroy"))],
) -> Response:
    ingredient = await ingredient_crud.get_by_id(db, ingredient_id)
    await ingredient_crud.delete(db, ingredient)
    structured_logger.info("Ingredient deleted", ingredient_id=str(ingredient_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
