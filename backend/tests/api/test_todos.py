"""Tests for todo endpoints."""
from httpx import AsyncClient
from uuid6 import uuid7


async def _create_category(client: AsyncClient, name: str, slug: str) -> dict:
    response = await client.post("/categories/", json={"name": name, "slug": slug})
    assert response.status_code == 201, response.text
    return response.json()


async def _create_todo(
    client: AsyncClient, title: str, category_ids: list[str] | None = None,
) -> dict:
    response = await client.post(
        "/todos/", json={"title": title, "category_ids": category_ids or []},
    )
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Create
# =============================================================================


async def test__create_todo__returns_201(client: AsyncClient) -> None:
    work = await _create_category(client, "Work", "work")

    response = await client.post(
        "/todos/", json={"title": "Write report", "category_ids": [work["id"]]},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Write report"
    assert data["completed"] is False
    assert [c["slug"] for c in data["categories"]] == ["work"]


async def test__create_todo__without_categories(client: AsyncClient) -> None:
    response = await client.post("/todos/", json={"title": "Buy milk"})

    assert response.status_code == 201
    assert response.json()["categories"] == []


async def test__create_todo__empty_title_is_field_error(client: AsyncClient) -> None:
    response = await client.post("/todos/", json={"title": "   "})

    assert response.status_code == 422
    assert response.json()["detail"] == {"message": "Title is required", "field": "title"}


async def test__create_todo__title_too_long(client: AsyncClient) -> None:
    response = await client.post("/todos/", json={"title": "x" * 501})

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "title"
    assert (await client.get("/todos/")).json() == []


async def test__create_todo__unknown_category_is_field_error(client: AsyncClient) -> None:
    response = await client.post(
        "/todos/", json={"title": "Report", "category_ids": [str(uuid7())]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "category_ids"
    assert (await client.get("/todos/")).json() == []


# =============================================================================
# Read
# =============================================================================


async def test__list_todos__ordering(client: AsyncClient) -> None:
    """Pending todos first (newest first), then completed todos."""
    first = await _create_todo(client, "First")
    second = await _create_todo(client, "Second")
    third = await _create_todo(client, "Third")
    await client.post(f"/todos/{second['id']}/completion", json={"completed": True})

    response = await client.get("/todos/")

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [third["id"], first["id"], second["id"]]


async def test__list_todos__filter_by_slug_or_id(client: AsyncClient) -> None:
    work = await _create_category(client, "Work", "work")
    report = await _create_todo(client, "Report", [work["id"]])
    await _create_todo(client, "Dishes")

    by_slug = await client.get("/todos/", params={"category": "work"})
    by_id = await client.get("/todos/", params={"category": work["id"]})

    assert [t["id"] for t in by_slug.json()] == [report["id"]]
    assert by_id.json() == by_slug.json()


async def test__list_todos__unknown_category_is_empty(client: AsyncClient) -> None:
    await _create_todo(client, "Dishes")

    response = await client.get("/todos/", params={"category": "nope"})

    assert response.status_code == 200
    assert response.json() == []


async def test__get_todo__returns_todo(client: AsyncClient) -> None:
    created = await _create_todo(client, "Dishes")

    response = await client.get(f"/todos/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


async def test__get_todo__unknown_returns_404(client: AsyncClient) -> None:
    response = await client.get(f"/todos/{uuid7()}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Todo not found"


# =============================================================================
# Update / completion / delete
# =============================================================================


async def test__update_todo__replaces_categories(client: AsyncClient) -> None:
    c1 = await _create_category(client, "Alpha", "alpha")
    c2 = await _create_category(client, "Beta", "beta")
    created = await _create_todo(client, "Plan", [c1["id"], c2["id"]])

    response = await client.put(
        f"/todos/{created['id']}", json={"title": "Plan v2", "category_ids": [c2["id"]]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Plan v2"
    assert [c["id"] for c in data["categories"]] == [c2["id"]]


async def test__update_todo__omitted_categories_are_detached(client: AsyncClient) -> None:
    c1 = await _create_category(client, "Alpha", "alpha")
    created = await _create_todo(client, "Plan", [c1["id"]])

    response = await client.put(f"/todos/{created['id']}", json={"title": "Plan"})

    assert response.status_code == 200
    assert response.json()["categories"] == []
    # The category is free to delete now
    assert (await client.delete(f"/categories/{c1['id']}")).status_code == 204


async def test__update_todo__unknown_returns_404(client: AsyncClient) -> None:
    response = await client.put(f"/todos/{uuid7()}", json={"title": "Plan"})

    assert response.status_code == 404


async def test__set_todo_completion__sets_and_clears(client: AsyncClient) -> None:
    created = await _create_todo(client, "Dishes")

    done = await client.post(f"/todos/{created['id']}/completion", json={"completed": True})
    assert done.status_code == 200
    assert done.json()["completed"] is True

    # Same request again is a no-op, not a flip
    again = await client.post(f"/todos/{created['id']}/completion", json={"completed": True})
    assert again.json()["completed"] is True

    undone = await client.post(
        f"/todos/{created['id']}/completion", json={"completed": False},
    )
    assert undone.json()["completed"] is False


async def test__set_todo_completion__requires_flag(client: AsyncClient) -> None:
    created = await _create_todo(client, "Dishes")

    response = await client.post(f"/todos/{created['id']}/completion", json={})

    assert response.status_code == 422


async def test__delete_todo__returns_204(client: AsyncClient) -> None:
    created = await _create_todo(client, "Dishes")

    response = await client.delete(f"/todos/{created['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/todos/{created['id']}")).status_code == 404


async def test__delete_todo__unknown_returns_404(client: AsyncClient) -> None:
    response = await client.delete(f"/todos/{uuid7()}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Todo not found"
