from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngredientSummary(BaseModel):
    """Ingredient as embedded in a recipe."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class RecipeParams(BaseModel):
    """Permitted fields for creating a recipe.

    Unknown keys are dropped rather than persisted; blank names are rejected
    after whitespace is stripped.
    """

    name: Annotated[
        str, Field(min_length=1, max_length=255, description="Recipe name")
    ]
    ingredient_ids: list[UUID] = Field(
        default_factory=list, description="Ingredients to link to the recipe"
    )

    @field_validator("ingredient_ids", mode="before")
    @classmethod
    def null_means_no_ingredients(cls, v: object) -> object:
        return [] if v is None else v

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class RecipeUpdateParams(BaseModel):
    """Permitted fields for updating a recipe; omitted fields are unchanged.

    A provided ``ingredient_ids`` replaces the recipe's ingredient set.
    """

    name: str | None = Field(
        default=None, min_length=1, max_length=255, description="Recipe name"
    )
    ingredient_ids: list[UUID] | None = Field(
        default=None, description="Complete replacement ingredient set"
    )

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class RecipeOut(BaseModel):
    """Response model for a recipe."""

    id: Annotated[UUID, Field(description="Unique identifier for the recipe")]
    name: str
    user_id: UUID | None = Field(default=None, description="Owning user, if any")
    ingredients: list[IngredientSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecipeForm(BaseModel):
    """Template a client renders to create or edit a recipe.

    ``name`` and ``ingredient_ids`` echo what was submitted (or stored), so
    ids are kept as raw strings even when they failed validation.
    """

    id: UUID | None = None
    name: str = ""
    ingredient_ids: list[str] = Field(default_factory=list)
    available_ingredients: list[IngredientSummary] = Field(default_factory=list)
    action: str
    method: str
