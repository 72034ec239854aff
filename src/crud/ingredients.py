from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import IngredientNotFoundError
from models.ingredients import Ingredient
from models.recipe_ingredients import recipe_ingredients


class IngredientCRUD:
    """CRUD operations for ingredients."""

    async def get_all(self, db: AsyncSession) -> list[Ingredient]:
        """Return every ingredient with the recipes using it."""
        statement = select(Ingredient).options(selectinload(Ingredient.recipes))
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, ingredient_id: UUID) -> Ingredient:
        """Get an ingredient by its ID or raise IngredientNotFoundError."""
        statement = (
            select(Ingredient)
            .where(Ingredient.id == ingredient_id)
            .options(selectinload(Ingredient.recipes))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        ingredient = result.scalar_one_or_none()
        if ingredient is None:
            raise IngredientNotFoundError()
        return ingredient

    async def get_many(
        self, db: AsyncSession, ingredient_ids: Iterable[UUID]
    ) -> list[Ingredient]:
        """Resolve ids to ingredients, in first-seen order, without repeats.

        Raises IngredientNotFoundError naming every id that matched no row.
        """
        wanted = list(dict.fromkeys(ingredient_ids))
        if not wanted:
            return []
        statement = select(Ingredient).where(Ingredient.id.in_(wanted))
        result = await db.execute(statement)
        found = {ingredient.id: ingredient for ingredient in result.scalars().all()}
        missing = [i for i in wanted if i not in found]
        if missing:
            raise IngredientNotFoundError(missing)
        return [found[i] for i in wanted]

    async def create(self, db: AsyncSession, name: str) -> Ingredient:
        """Create a new, unlinked ingredient."""
        ingredient = Ingredient(name=name, recipes=[])
        try:
            db.add(ingredient)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ingredient

    async def update(
        self, db: AsyncSession, ingredient: Ingredient, name: str
    ) -> Ingredient:
        """Rename an existing ingredient."""
        try:
            ingredient.name = name
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ingredient

    async def delete(self, db: AsyncSession, ingredient: Ingredient) -> None:
        """Delete an ingredient; its recipe links go with it."""
        try:
            await db.delete(ingredient)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def delete_all(self, db: AsyncSession) -> None:
        """Delete every ingredient together with all recipe links."""
        try:
            await db.execute(delete(recipe_ingredients))
            await db.execute(delete(Ingredient))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        db.expunge_all()


# Create singleton instance
ingredient_crud = IngredientCRUD()
