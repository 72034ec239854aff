"""Ingredient endpoint tests."""

from __future__ import annotations

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from crud.ingredients import ingredient_crud
from crud.recipes import recipe_crud
from seed_database import seed_catalog


@pytest.mark.asyncio
async def test_index_lists_ingredients_with_their_recipes(
    async_client: AsyncClient, db_session: AsyncSession
):
    await seed_catalog(db_session)

    response = await async_client.get("/ingredients")

    assert response.status_code == status.HTTP_200_OK
    by_name = {i["name"]: i for i in response.json()["data"]}
    assert set(by_name) == {"Pickles", "tomato sauce", "pepperoni", "cheese", "tomato"}
    assert {r["name"] for r in by_name["cheese"]["recipes"]} == {
        "Pizza",
        "grilled cheese",
    }
    assert [r["name"] for r in by_name["pepperoni"]["recipes"]] == ["Pizza"]


@pytest.mark.asyncio
async def test_show_and_missing(async_client: AsyncClient, db_session: AsyncSession):
    basil = await ingredient_crud.create(db_session, "basil")

    found = await async_client.get(f"/ingredients/{basil.id}")
    missing = await async_client.get(f"/ingredients/{uuid.uuid4()}")

    assert found.status_code == status.HTTP_200_OK
    assert found.json()["data"]["name"] == "basil"
    assert found.json()["data"]["recipes"] == []
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["message"] == "Ingredient not found"


@pytest.mark.asyncio
async def test_malformed_id_is_a_request_validation_error(async_client: AsyncClient):
    response = await async_client.get("/ingredients/not-a-uuid")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["error"]["type"] == "validation_error"


@pytest.mark.asyncio
async def test_anonymous_create_redirects_to_login(
    async_client: AsyncClient, db_session: AsyncSession
):
    response = await async_client.post("/ingredients", json={"name": "salt"})

    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/auth/login?next=%2Fingredients"
    assert await ingredient_crud.get_all(db_session) == []


@pytest.mark.asyncio
async def test_anonymous_write_with_unreadable_body_still_redirects(
    async_client: AsyncClient, db_session: AsyncSession
):
    basil = await ingredient_crud.create(db_session, "basil")
    headers = {"Content-Type": "application/json"}

    create = await async_client.post(
        "/ingredients", content=b"{not json", headers=headers
    )
    rename = await async_client.patch(
        f"/ingredients/{basil.id}", content=b"{not json", headers=headers
    )

    assert create.status_code == status.HTTP_303_SEE_OTHER
    assert create.headers["location"] == "/auth/login?next=%2Fingredients"
    assert rename.status_code == status.HTTP_303_SEE_OTHER


@pytest.mark.asyncio
async def test_malformed_body_rerenders_form(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    basil = await ingredient_crud.create(db_session, "basil")
    headers = {**auth_headers(user), "Content-Type": "application/json"}

    create = await async_client.post(
        "/ingredients", content=b"{not json", headers=headers
    )
    rename = await async_client.put(
        f"/ingredients/{basil.id}", content=b"{not json", headers=headers
    )

    assert create.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "__root__" in create.json()["error"]["fields"]
    assert rename.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert rename.json()["data"] == {
        "id": str(basil.id),
        "name": "basil",
        "action": f"http://testserver/ingredients/{basil.id}",
        "method": "PUT",
    }


@pytest.mark.asyncio
async def test_new_form(async_client: AsyncClient, user, auth_headers):
    response = await async_client.get("/ingredients/new", headers=auth_headers(user))

    assert response.status_code == status.HTTP_200_OK
    form = response.json()["data"]
    assert form == {
        "id": None,
        "name": "",
        "action": "http://testserver/ingredients",
        "method": "POST",
    }


@pytest.mark.asyncio
async def test_create_redirects_to_show(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    response = await async_client.post(
        "/ingredients", json={"name": " salt "}, headers=auth_headers(user)
    )

    assert response.status_code == status.HTTP_303_SEE_OTHER
    ingredient_id = uuid.UUID(response.headers["location"].rsplit("/", 1)[-1])
    stored = await ingredient_crud.get_by_id(db_session, ingredient_id)
    assert stored.name == "salt"


@pytest.mark.asyncio
async def test_create_blank_name_rerenders_form(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    response = await async_client.post(
        "/ingredients", json={"name": ""}, headers=auth_headers(user)
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    body = response.json()
    assert "name" in body["error"]["fields"]
    assert body["data"]["method"] == "POST"
    assert await ingredient_crud.get_all(db_session) == []


@pytest.mark.asyncio
async def test_edit_and_rename(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    basil = await ingredient_crud.create(db_session, "basil")
    headers = auth_headers(user)

    edit = await async_client.get(f"/ingredients/{basil.id}/edit", headers=headers)
    assert edit.status_code == status.HTTP_200_OK
    assert edit.json()["data"]["name"] == "basil"
    assert edit.json()["data"]["method"] == "PUT"

    update = await async_client.put(
        f"/ingredients/{basil.id}", json={"name": "Thai basil"}, headers=headers
    )
    assert update.status_code == status.HTTP_303_SEE_OTHER
    renamed = await ingredient_crud.get_by_id(db_session, basil.id)
    assert renamed.name == "Thai basil"


@pytest.mark.asyncio
async def test_rename_with_blank_name_rerenders_edit_form(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    basil = await ingredient_crud.create(db_session, "basil")

    response = await async_client.patch(
        f"/ingredients/{basil.id}", json={"name": " "}, headers=auth_headers(user)
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["data"]["id"] == str(basil.id)
    assert (await ingredient_crud.get_by_id(db_session, basil.id)).name == "basil"


@pytest.mark.asyncio
async def test_delete_unlinks_from_recipes(
    async_client: AsyncClient, db_session: AsyncSession, user, auth_headers
):
    cheese = await ingredient_crud.create(db_session, "cheese")
    ham = await ingredient_crud.create(db_session, "ham")
    recipe = await recipe_crud.create(db_session, "Sandwich", [cheese.id, ham.id])

    response = await async_client.delete(
        f"/ingredients/{ham.id}", headers=auth_headers(user)
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    reloaded = await recipe_crud.get_by_id(db_session, recipe.id)
    assert [i.name for i in reloaded.ingredients] == ["cheese"]
