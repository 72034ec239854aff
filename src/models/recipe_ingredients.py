from sqlalchemy import UUID, Column, ForeignKey, Table

from .base import Base


# Pure association table: a recipe/ingredient pair exists at most once.
recipe_ingredients = Table(
    "ingredients_recipes",
    Base.metadata,
    Column(
        "ingredient_id",
        UUID(as_uuid=True),
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "recipe_id",
        UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)
