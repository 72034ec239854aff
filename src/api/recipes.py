"""Recipe resource endpoints.

Reads are public; forms and mutations require an identity (see
``dependencies.auth.ACTION_POLICIES``). Successful writes answer with a
303 redirect to the recipe, rejected submissions re-render the form as 422.
"""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.forms import (
    MALFORMED_BODY,
    field_errors,
    read_submission,
    submitted_ids,
    submitted_text,
)
from core.error_handler import structured_logger
from core.exceptions import (
    FormValidationError,
    IngredientNotFoundError,
    RecipeNotFoundError,
)
from crud.ingredients import ingredient_crud
from crud.recipes import recipe_crud
from dependencies.auth import authorize, check_resource_access
from dependencies.db import DbSession
from models.recipes import Recipe
from models.users import User
from schemas.api import ApiResponse
from schemas.recipes import (
    IngredientSummary,
    RecipeForm,
    RecipeOut,
    RecipeParams,
    RecipeUpdateParams,
)


router = APIRouter(prefix="/recipes", tags=["recipes"])


async def _recipe_form(
    db: AsyncSession,
    request: Request,
    *,
    recipe_id: UUID | None = None,
    name: str = "",
    ingredient_ids: list[str] | None = None,
) -> RecipeForm:
    """Build the create form, or the edit form when ``recipe_id`` is given."""
    available = await ingredient_crud.get_all(db)
    if recipe_id is None:
        action, method = str(request.url_for("recipes.create")), "POST"
    else:
        action = str(request.url_for("recipes.update", recipe_id=str(recipe_id)))
        method = "PUT"
    return RecipeForm(
        id=recipe_id,
        name=name,
        ingredient_ids=ingredient_ids or [],
        available_ingredients=[
            IngredientSummary.model_validate(i) for i in available
        ],
        action=action,
        method=method,
    )


def _redirect_to_recipe(request: Request, recipe: Recipe) -> RedirectResponse:
    return RedirectResponse(
        url=str(request.url_for("recipes.show", recipe_id=str(recipe.id))),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get(
    "",
    name="recipes.index",
    response_model=ApiResponse[list[RecipeOut]],
    summary="List all recipes",
)
async def list_recipes(
    db: DbSession,
    _user: Annotated[User | None, Depends(authorize("recipes.index"))],
) -> ApiResponse[list[RecipeOut]]:
    """Return every recipe. Listing is deliberately global, not owner-scoped."""
    recipes = await recipe_crud.get_all(db)
    return ApiResponse(data=[RecipeOut.model_validate(r) for r in recipes])


@router.get(
    "/new",
    name="recipes.new",
    response_model=ApiResponse[RecipeForm],
    summary="Empty recipe form",
)
async def new_recipe(
    request: Request,
    db: DbSession,
    _user: Annotated[User, Depends(authorize("recipes.new"))],
) -> ApiResponse[RecipeForm]:
    return ApiResponse(data=await _recipe_form(db, request))


@router.post(
    "",
    name="recipes.create",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    summary="Create a recipe",
    responses={422: {"description": "Form re-rendered with field errors"}},
)
async def create_recipe(
    request: Request,
    db: DbSession,
    current_user: Annotated[User, Depends(authorize("recipes.create"))],
) -> RedirectResponse:
    """Create a recipe owned by the acting user and redirect to it.

    Only ``name`` and ``ingredient_ids`` are read from the JSON body.
    """
    submitted: dict[str, Any] = {}

    async def rejected(fields: dict[str, list[str]]) -> FormValidationError:
        form = await _recipe_form(
            db,
            request,
            name=submitted_text(submitted, "name"),
            ingredient_ids=submitted_ids(submitted, "ingredient_ids"),
        )
        return FormValidationError(form, fields)

    try:
        submitted = await read_submission(request)
    except ValueError as exc:
        raise await rejected(MALFORMED_BODY) from exc

    try:
        params = RecipeParams.model_validate(submitted)
    except ValidationError as exc:
        raise await rejected(field_errors(exc)) from exc

    try:
        recipe = await recipe_crud.create(
            db, params.name, params.ingredient_ids, user_id=current_user.id
        )
    except IngredientNotFoundError as exc:
        raise await rejected({"ingredient_ids": [str(exc)]}) from exc

    structured_logger.info(
        "Recipe created",
        recipe_id=str(recipe.id),
        ingredient_count=len(recipe.ingredients),
    )
    return _redirect_to_recipe(request, recipe)


@router.get(
    "/{recipe_id}",
    name="recipes.show",
    response_model=ApiResponse[RecipeOut],
    summary="Get a recipe by id",
)
async def get_recipe(
    recipe_id: UUID,
    db: DbSession,
    _user: Annotated[User | None, Depends(authorize("recipes.show"))],
) -> ApiResponse[RecipeOut]:
    recipe = await recipe_crud.get_by_id(db, recipe_id)
    return ApiResponse(data=RecipeOut.model_validate(recipe))


@router.get(
    "/{recipe_id}/edit",
    name="recipes.edit",
    response_model=ApiResponse[RecipeForm],
    summary="Recipe form pre-filled for editing",
)
async def edit_recipe(
    recipe_id: UUID,
    request: Request,
    db: DbSession,
    current_user: Annotated[User, Depends(authorize("recipes.edit"))],
) -> ApiResponse[RecipeForm]:
    recipe = check_resource_access(
        await recipe_crud.get_by_id(db, recipe_id),
        current_user,
        missing=RecipeNotFoundError,
    )
    form = await _recipe_form(
        db,
        request,
        recipe_id=recipe.id,
        name=recipe.name,
        ingredient_ids=[str(i.id) for i in recipe.ingredients],
    )
    return ApiResponse(data=form)


@router.api_route(
    "/{recipe_id}",
    methods=["PUT", "PATCH"],
    name="recipes.update",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    summary="Update a recipe",
    responses={422: {"description": "Form re-rendered with field errors"}},
)
async def update_recipe(
    recipe_id: UUID,
    request: Request,
    db: DbSession,
    current_user: Annotated[User, Depends(authorize("recipes.update"))],
) -> RedirectResponse:
    """Rename a recipe and/or replace its ingredient set, then redirect to it."""
    recipe = check_resource_access(
        await recipe_crud.get_by_id(db, recipe_id),
        current_user,
        missing=RecipeNotFoundError,
    )
    submitted: dict[str, Any] = {}

    async def rejected(fields: dict[str, list[str]]) -> FormValidationError:
        ids = (
            submitted_ids(submitted, "ingredient_ids")
            if "ingredient_ids" in submitted
            else [str(i.id) for i in recipe.ingredients]
        )
        form = await _recipe_form(
            db,
            request,
            recipe_id=recipe.id,
            name=submitted_text(submitted, "name") or recipe.name,
            ingredient_ids=ids,
        )
        return FormValidationError(form, fields)

    try:
        submitted = await read_submission(request)
    except ValueError as exc:
        raise await rejected(MALFORMED_BODY) from exc

    try:
        params = RecipeUpdateParams.model_validate(submitted)
    except ValidationError as exc:
        raise await rejected(field_errors(exc)) from exc

    try:
        recipe = await recipe_crud.update(
            db, recipe, name=params.name, ingredient_ids=params.ingredient_ids
        )
    except IngredientNotFoundError as exc:
        raise await rejected({"ingredient_ids": [str(exc)]}) from exc

    structured_logger.info("Recipe updated", recipe_id=str(recipe.id))
    return _redirect_to_recipe(request, recipe)


@router.delete(
    "/{recipe_id}",
    name="recipes.destroy",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a recipe",
)
async def delete_recipe(
    recipe_id: UUID,
    db: DbSession,
    current_user: Annotated[User, Depends(authorize("recipes.destroy"))],
) -> Response:
    recipe = check_resource_access(
        await recipe_crud.get_by_id(db, recipe_id),
        current_user,
        missing=RecipeNotFoundError,
    )
    await recipe_crud.delete(db, recipe)
    structured_logger.info("Recipe deleted", recipe_id=str(recipe_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
