"""Tests for the HTTP API."""

from datetime import UTC, datetime

from fastapi.testclient import TestClient

from household_hub.api.app import create_app
from household_hub.config import parse_origins
from tests.conftest import TOKEN, make_item, make_recipe

AUTH = {"Authorization": f"Bearer {TOKEN}"}
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _seed_catalog(repository) -> None:  # type: ignore[no-untyped-def]
    flour = make_item("Flour", unit="g")
    milk = make_item("Milk", unit="ml", category="fridge")
    egg = make_item("Egg")
    for item in (flour, milk, egg):
        repository.items[item.id] = item
    for recipe in (
        make_recipe("Pancakes", [flour, milk, egg]),
        make_recipe("Omelette", [egg, milk]),
    ):
        repository.recipes[recipe.id] = recipe


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_requests_without_token_are_rejected(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/items").status_code == 401
    response = client.get("/chores", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401
    assert response.json()["detail"] == "missing_token"


def test_suggest_returns_ranked_camel_case(container, catalog_repository) -> None:
    _seed_catalog(catalog_repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/recipes/suggest",
        json={"items": ["item-egg", "item-milk"], "type": "MEAL", "missing": 1},
        headers=AUTH,
    )

    assert response.status_code == 200
    body = response.json()
    assert [entry["title"] for entry in body] == ["Omelette", "Pancakes"]
    assert body[0]["match"] == {
        "matched": 2,
        "total": 2,
        "missing": 0,
        "matchPct": 100.0,
    }
    assert body[1]["match"]["missing"] == 1
    assert body[1]["ingredients"][0]["displayUnit"] == "g"
    assert body[1]["ingredients"][0]["quantity"] == "1"


def test_suggest_default_requires_full_coverage(container, catalog_repository) -> None:
    _seed_catalog(catalog_repository)
    client = TestClient(create_app(container))

    response = client.post(
        "/recipes/suggest", json={"items": ["item-egg"]}, headers=AUTH
    )

    assert response.status_code == 200
    assert response.json() == []


def test_suggest_rejects_negative_missing(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/recipes/suggest", json={"items": [], "missing": -1}, headers=AUTH
    )

    assert response.status_code == 422


def test_items_grouped_and_create(container) -> None:
    client = TestClient(create_app(container))

    created = client.post(
        "/items",
        json={"name": "Milk", "category": "fridge", "unit": "ml", "tags": "dairy"},
        headers=AUTH,
    )
    grouped = client.get("/items/grouped", headers=AUTH)

    assert created.status_code == 201
    assert created.json()["tags"] == ["dairy"]
    assert [item["name"] for item in grouped.json()["fridge"]] == ["Milk"]


def test_value_errors_become_bad_request(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/items", json={"name": "   "}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"error": "name_required"}


def test_backend_errors_keep_status_and_code(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/auth/me", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_login_and_me(container) -> None:
    client = TestClient(create_app(container))

    login = client.post(
        "/auth/login", json={"email": "sam@example.com", "password": "secret"}
    )
    me = client.get("/auth/me", headers=AUTH)

    assert login.json()["token"] == TOKEN
    assert login.json()["user"]["displayName"] == "Sam"
    assert me.json()["house"] == {"id": "h-1", "name": "Home"}


def test_recipe_detail_and_missing(container, catalog_repository) -> None:
    _seed_catalog(catalog_repository)
    client = TestClient(create_app(container))

    found = client.get("/recipes/recipe-omelette", headers=AUTH)
    missing = client.get("/recipes/nope", headers=AUTH)

    assert found.status_code == 200
    assert [line["itemId"] for line in found.json()["ingredients"]] == [
        "item-egg",
        "item-milk",
    ]
    assert missing.status_code == 404


def test_chore_reassign_round_trip(container, chore_repository) -> None:
    chore = chore_repository.add("Dust", NOW, assigned_to_id="user-1")
    client = TestClient(create_app(container))

    listed = client.get("/chores", headers=AUTH)
    reassigned = client.patch(
        f"/chores/{chore.id}/reassign",
        json={"assignedToId": "user-2"},
        headers=AUTH,
    )
    relisted = client.get("/chores", headers=AUTH)

    assert listed.json()[0]["assignedTo"] == {"id": "user-1", "displayName": None}
    assert reassigned.json()["chore"]["assignedTo"]["displayName"] == "Sam"
    assert relisted.json()[0]["assignedToId"] == "user-2"


def test_chore_reassign_failure_keeps_previous_assignee(
    container, chore_repository
) -> None:
    chore = chore_repository.add("Dust", NOW, assigned_to_id="user-1")
    chore_repository.fail_reassign = True
    client = TestClient(create_app(container))

    client.get("/chores", headers=AUTH)
    failed = client.patch(
        f"/chores/{chore.id}/reassign", json={"assignedToId": "user-2"}, headers=AUTH
    )
    relisted = client.get("/chores", headers=AUTH)

    assert failed.status_code == 403
    assert failed.json() == {"error": "assign_failed"}
    assert relisted.json()[0]["assignedToId"] == "user-1"


def test_shopping_list_flow(container) -> None:
    client = TestClient(create_app(container))

    created = client.post("/shopping-lists", json={"title": "Weekly"}, headers=AUTH)
    list_id = created.json()["id"]
    added = client.post(
        f"/shopping-lists/{list_id}/items",
        json={"itemId": "item-milk", "quantity": "2"},
        headers=AUTH,
    )
    line_id = added.json()["list"]["items"][0]["id"]
    removed = client.delete(f"/shopping-lists/{list_id}/items/{line_id}", headers=AUTH)
    detail = client.get(f"/shopping-lists/{list_id}", headers=AUTH)

    assert created.status_code == 201
    assert added.json()["list"]["items"][0]["quantity"] == "2"
    assert removed.json() == {"status": "ok"}
    assert detail.json()["items"] == []
    assert client.get("/shopping-lists/nope", headers=AUTH).status_code == 404


def test_cors_headers_when_configured(container) -> None:
    container.settings.cors_allowed_origins = "https://app.example.com"
    client = TestClient(create_app(container))

    response = client.get(
        "/health", headers={"Origin": "https://app.example.com"}
    )

    assert response.headers["access-control-allow-origin"] == "https://app.example.com"


def test_parse_origins() -> None:
    assert parse_origins(None) == []
    assert parse_origins(" * ") == ["*"]
    assert parse_origins("https://a.test, https://b.test,") == [
        "https://a.test",
        "https://b.test",
    ]
