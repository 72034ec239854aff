from fastapi import APIRouter

from schemas.api import ApiResponse
from schemas.recipes import RecipeOut

from .auth import router as auth_router
from .health import router as health_router
from .ingredients import router as ingredients_router
from .recipes import list_recipes, router as recipes_router


api_router = APIRouter()

# Public routers
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router)

# Resource routers enforce ACTION_POLICIES per route via `authorize`
api_router.include_router(recipes_router)
api_router.include_router(ingredients_router)

# The site root is the recipe listing
api_router.add_api_route(
    "/",
    list_recipes,
    methods=["GET"],
    name="root",
    response_model=ApiResponse[list[RecipeOut]],
    tags=["recipes"],
)
