"""Recipe and ingredient data-layer tests against in-memory SQLite."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import IngredientNotFoundError, RecipeNotFoundError
from crud.ingredients import ingredient_crud
from crud.recipes import create_recipe, get_recipe, get_recipes, recipe_crud
from models import Ingredient, Recipe, recipe_ingredients


async def _link_count(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(recipe_ingredients))
    return result.scalar_one()


def _names(recipe: Recipe) -> set[str]:
    return {ingredient.name for ingredient in recipe.ingredients}


@pytest.mark.asyncio
async def test_create_then_find_returns_same_name_and_ingredients(
    db_session: AsyncSession,
):
    cheese = await ingredient_crud.create(db_session, "cheese")
    bread = await ingredient_crud.create(db_session, "bread")

    created = await create_recipe(db_session, "Toastie", [cheese.id, bread.id])
    found = await get_recipe(db_session, created.id)

    assert found.name == "Toastie"
    assert {i.id for i in found.ingredients} == {cheese.id, bread.id}


@pytest.mark.asyncio
async def test_create_with_no_ingredients(db_session: AsyncSession):
    recipe = await recipe_crud.create(db_session, "Tacos", [])

    assert recipe.id is not None
    assert recipe.name == "Tacos"
    assert recipe.ingredients == []
    assert recipe.user_id is None


@pytest.mark.asyncio
async def test_create_binds_owner(db_session: AsyncSession, user):
    recipe = await recipe_crud.create(db_session, "Omelette", user_id=user.id)
    assert recipe.user_id == user.id


@pytest.mark.asyncio
async def test_create_with_duplicate_ids_links_once(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")

    recipe = await recipe_crud.create(
        db_session, "Cheese plate", [cheese.id, cheese.id]
    )

    assert len(recipe.ingredients) == 1
    assert await _link_count(db_session) == 1


@pytest.mark.asyncio
async def test_create_with_unknown_ingredient_persists_nothing(
    db_session: AsyncSession,
):
    cheese = await ingredient_crud.create(db_session, "cheese")
    missing = uuid.uuid4()

    with pytest.raises(IngredientNotFoundError) as exc_info:
        await recipe_crud.create(db_session, "Ghost", [cheese.id, missing])

    assert exc_info.value.missing_ids == [missing]
    assert await get_recipes(db_session) == []
    assert await _link_count(db_session) == 0


@pytest.mark.asyncio
async def test_get_by_id_unknown_raises_not_found(db_session: AsyncSession):
    with pytest.raises(RecipeNotFoundError):
        await recipe_crud.get_by_id(db_session, uuid.uuid4())

    with pytest.raises(IngredientNotFoundError):
        await ingredient_crud.get_by_id(db_session, uuid.uuid4())


@pytest.mark.asyncio
async def test_attach_same_ingredient_twice_is_idempotent(db_session: AsyncSession):
    recipe = await recipe_crud.create(db_session, "Salad")
    tomato = await ingredient_crud.create(db_session, "tomato")

    await recipe_crud.attach_ingredients(db_session, recipe, [tomato])
    await recipe_crud.attach_ingredients(db_session, recipe, [tomato, tomato])

    reloaded = await recipe_crud.get_by_id(db_session, recipe.id)
    assert [i.name for i in reloaded.ingredients] == ["tomato"]
    assert await _link_count(db_session) == 1


@pytest.mark.asyncio
async def test_create_ingredient_links_new_ingredient(db_session: AsyncSession):
    recipe = await recipe_crud.create(db_session, "Soup")

    onion = await recipe_crud.create_ingredient(db_session, recipe, "onion")

    stored = await ingredient_crud.get_by_id(db_session, onion.id)
    assert [r.name for r in stored.recipes] == ["Soup"]


@pytest.mark.asyncio
async def test_update_replaces_ingredient_set(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    ham = await ingredient_crud.create(db_session, "ham")
    egg = await ingredient_crud.create(db_session, "egg")
    recipe = await recipe_crud.create(db_session, "Sandwich", [cheese.id, ham.id])

    updated = await recipe_crud.update(
        db_session, recipe, name="Egg sandwich", ingredient_ids=[egg.id, cheese.id]
    )

    assert updated.name == "Egg sandwich"
    assert _names(updated) == {"egg", "cheese"}
    assert await _link_count(db_session) == 2


@pytest.mark.asyncio
async def test_update_without_ids_keeps_ingredients(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    recipe = await recipe_crud.create(db_session, "Melt", [cheese.id])

    updated = await recipe_crud.update(db_session, recipe, name="Big melt")

    assert updated.name == "Big melt"
    assert _names(updated) == {"cheese"}


@pytest.mark.asyncio
async def test_update_with_empty_ids_clears_ingredients(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    recipe = await recipe_crud.create(db_session, "Melt", [cheese.id])

    updated = await recipe_crud.update(db_session, recipe, ingredient_ids=[])

    assert updated.ingredients == []
    assert await _link_count(db_session) == 0


@pytest.mark.asyncio
async def test_update_with_unknown_id_leaves_recipe_untouched(
    db_session: AsyncSession,
):
    cheese = await ingredient_crud.create(db_session, "cheese")
    recipe = await recipe_crud.create(db_session, "Melt", [cheese.id])

    with pytest.raises(IngredientNotFoundError):
        await recipe_crud.update(
            db_session, recipe, name="Renamed", ingredient_ids=[uuid.uuid4()]
        )

    reloaded = await recipe_crud.get_by_id(db_session, recipe.id)
    assert reloaded.name == "Melt"
    assert _names(reloaded) == {"cheese"}


@pytest.mark.asyncio
async def test_delete_recipe_removes_links_but_keeps_ingredients(
    db_session: AsyncSession,
):
    cheese = await ingredient_crud.create(db_session, "cheese")
    recipe = await recipe_crud.create(db_session, "Melt", [cheese.id])

    await recipe_crud.delete(db_session, recipe)

    assert await get_recipes(db_session) == []
    assert await _link_count(db_session) == 0
    assert (await ingredient_crud.get_by_id(db_session, cheese.id)).recipes == []


@pytest.mark.asyncio
async def test_delete_ingredient_unlinks_it_from_recipes(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    ham = await ingredient_crud.create(db_session, "ham")
    recipe = await recipe_crud.create(db_session, "Sandwich", [cheese.id, ham.id])

    await ingredient_crud.delete(
        db_session, await ingredient_crud.get_by_id(db_session, ham.id)
    )

    reloaded = await recipe_crud.get_by_id(db_session, recipe.id)
    assert _names(reloaded) == {"cheese"}
    assert await _link_count(db_session) == 1


@pytest.mark.asyncio
async def test_delete_all_leaves_no_orphaned_links(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    await recipe_crud.create(db_session, "A", [cheese.id])
    await recipe_crud.create(db_session, "B", [cheese.id])

    await recipe_crud.delete_all(db_session)
    assert await _link_count(db_session) == 0
    assert len(await ingredient_crud.get_all(db_session)) == 1

    await ingredient_crud.delete_all(db_session)
    count = await db_session.execute(select(func.count()).select_from(Ingredient))
    assert count.scalar_one() == 0


@pytest.mark.asyncio
async def test_join_rows_cascade_at_the_database_level(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    await recipe_crud.create(db_session, "A", [cheese.id])

    # Bulk delete bypasses the ORM relationship; the FK cascade must clean up.
    await db_session.execute(Recipe.__table__.delete())
    await db_session.commit()

    assert await _link_count(db_session) == 0


@pytest.mark.asyncio
async def test_get_many_reports_every_missing_id(db_session: AsyncSession):
    cheese = await ingredient_crud.create(db_session, "cheese")
    first, second = uuid.uuid4(), uuid.uuid4()

    with pytest.raises(IngredientNotFoundError) as exc_info:
        await ingredient_crud.get_many(db_session, [first, cheese.id, second])

    assert set(exc_info.value.missing_ids) == {first, second}
    assert str(first) in str(exc_info.value)
