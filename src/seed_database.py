"""Reset the catalog to a small, known set of recipes and ingredients.

Destructive: every existing recipe, ingredient and link is deleted before
the fixtures are inserted, so running it twice leaves the same catalog.

Usage:
  python -m seed_database          (from src/)
  python scripts/seed_database.py  (from the repo root)
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.error_handler import setup_logging
from crud.ingredients import ingredient_crud
from crud.recipes import recipe_crud
from dependencies.db import AsyncSessionLocal, engine
from models import Base, Recipe


logger = logging.getLogger(__name__)

PIZZA_INGREDIENTS = ("tomato sauce", "pepperoni", "cheese", "tomato")


async def seed_catalog(db: AsyncSession) -> list[Recipe]:
    """Wipe the catalog and insert the fixture recipes.

    Returns the seeded recipes with their ingredients loaded.
    """
    await recipe_crud.delete_all(db)
    await ingredient_crud.delete_all(db)

    pizza = await recipe_crud.create(db, "Pizza")
    grilled_cheese = await recipe_crud.create(db, "grilled cheese")

    await recipe_crud.create_ingredient(db, grilled_cheese, "Pickles")

    added = {}
    for name in PIZZA_INGREDIENTS:
        added[name] = await recipe_crud.create_ingredient(db, pizza, name)

    await recipe_crud.attach_ingredients(
        db, grilled_cheese, [added["cheese"], added["tomato"]]
    )

    recipes = await recipe_crud.get_all(db)
    logger.info(
        "Seeded %d recipes: %s",
        len(recipes),
        ", ".join(
            f"{r.name} ({len(r.ingredients)} ingredients)" for r in recipes
        ),
    )
    return recipes


async def main() -> None:
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_catalog(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
