from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RecipeSummary(BaseModel):
    """Recipe as embedded in an ingredient."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class IngredientParams(BaseModel):
    """Permitted fields for creating or renaming an ingredient."""

    name: Annotated[
        str, Field(min_length=1, max_length=255, description="Ingredient name")
    ]

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class IngredientOut(BaseModel):
    """Response model for an ingredient with the recipes using it."""

    id: UUID
    name: str
    recipes: list[RecipeSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class IngredientForm(BaseModel):
    """Template a client renders to create or edit an ingredient."""

    id: UUID | None = None
    name: str = ""
    action: str
    method: str
