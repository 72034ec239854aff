from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import RecipeNotFoundError
from crud.ingredients import ingredient_crud
from models.ingredients import Ingredient
from models.recipe_ingredients import recipe_ingredients
from models.recipes import Recipe


class RecipeCRUD:
    """CRUD operations for recipes and their ingredient links.

    Every method returning a Recipe leaves ``Recipe.ingredients`` loaded, so
    callers can serialize it without further IO.
    """

    async def get_all(self, db: AsyncSession) -> list[Recipe]:
        """Return every recipe; no owner scoping is applied."""
        statement = select(Recipe).options(selectinload(Recipe.ingredients))
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, recipe_id: UUID) -> Recipe:
        """Get a recipe by its ID or raise RecipeNotFoundError."""
        statement = (
            select(Recipe)
            .where(Recipe.id == recipe_id)
            .options(selectinload(Recipe.ingredients))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        recipe = result.scalar_one_or_none()
        if recipe is None:
            raise RecipeNotFoundError()
        return recipe

    async def create(
        self,
        db: AsyncSession,
        name: str,
        ingredient_ids: Iterable[UUID] = (),
        user_id: UUID | None = None,
    ) -> Recipe:
        """Create a recipe linked to the given ingredients.

        Raises IngredientNotFoundError before writing anything if any id is
        unknown.
        """
        ingredients = await ingredient_crud.get_many(db, ingredient_ids)
        recipe = Recipe(name=name, user_id=user_id, ingredients=ingredients)
        try:
            db.add(recipe)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return await self.get_by_id(db, recipe.id)

    async def attach_ingredients(
        self, db: AsyncSession, recipe: Recipe, ingredients: Iterable[Ingredient]
    ) -> Recipe:
        """Link ingredients to a recipe; pairs already linked are left alone."""
        linked = {ingredient.id for ingredient in recipe.ingredients}
        try:
            for ingredient in ingredients:
                if ingredient.id in linked:
                    continue
                recipe.ingredients.append(ingredient)
                linked.add(ingredient.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return recipe

    async def create_ingredient(
        self, db: AsyncSession, recipe: Recipe, name: str
    ) -> Ingredient:
        """Create a new ingredient already linked to ``recipe``."""
        ingredient = Ingredient(name=name)
        try:
            recipe.ingredients.append(ingredient)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ingredient

    async def update(
        self,
        db: AsyncSession,
        recipe: Recipe,
        name: str | None = None,
        ingredient_ids: Iterable[UUID] | None = None,
    ) -> Recipe:
        """Rename a recipe and/or replace its whole ingredient set."""
        # Resolve first so an unknown id leaves the recipe untouched
        ingredients = (
            await ingredient_crud.get_many(db, ingredient_ids)
            if ingredient_ids is not None
            else None
        )
        try:
            if name is not None:
                recipe.name = name
            if ingredients is not None:
                recipe.ingredients = ingredients
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return await self.get_by_id(db, recipe.id)

    async def delete(self, db: AsyncSession, recipe: Recipe) -> None:
        """Delete a recipe; its ingredient links go with it."""
        try:
            await db.delete(recipe)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def delete_all(self, db: AsyncSession) -> None:
        """Delete every recipe together with all ingredient links."""
        try:
            await db.execute(delete(recipe_ingredients))
            await db.execute(delete(Recipe))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        db.expunge_all()


# Create singleton instance
recipe_crud = RecipeCRUD()


async def get_recipes(db: AsyncSession) -> list[Recipe]:
    """Return every recipe."""
    return await recipe_crud.get_all(db)


async def get_recipe(db: AsyncSession, recipe_id: UUID) -> Recipe:
    """Get a recipe by its ID."""
    return await recipe_crud.get_by_id(db, recipe_id)


async def create_recipe(
    db: AsyncSession,
    name: str,
    ingredient_ids: Iterable[UUID] = (),
    user_id: UUID | None = None,
) -> Recipe:
    """Create a recipe linked to existing ingredients."""
    return await recipe_crud.create(db, name, ingredient_ids, user_id)
