"""
Integration tests for the banned ingredient endpoints.
"""

import pytest


def test_list_ingredients_by_name(client):
    response = client.get("/api/ingredients")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [i["name"] for i in data["ingredients"]] == ["Hydroquinone", "Mercury", "Tretinoin"]
    assert data["total"] == 3


def test_list_ingredients_search(client):
    response = client.get("/api/ingredients", params={"query": "MERC"})

    ingredients = response.json()["data"]["ingredients"]
    assert len(ingredients) == 1
    assert ingredients[0]["occurrencesCount"] == 1
    assert ingredients[0]["riskScore"] == pytest.approx(0.9)
    assert ingredients[0]["alternativeNames"] == "Hg, Quicksilver"


def test_list_ingredients_sort_by_ewg_rating(client):
    response = client.get("/api/ingredients", params={"sortBy": "ewgRating", "sortOrder": "desc"})

    assert [i["id"] for i in response.json()["data"]["ingredients"]] == [1, 2, 3]


def test_list_ingredients_pagination(client):
    response = client.get("/api/ingredients", params={"limit": 2})

    assert response.json()["data"]["pagination"] == {"limit": 2, "offset": 0, "hasMore": True}


def test_ingredient_detail_with_affected_products(client):
    response = client.get("/api/ingredients/1")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ingredient"]["pubchemCid"] == 23931
    assert data["ingredient"]["healthRiskDescription"] == "Kidney damage and skin rashes."
    assert [p["id"] for p in data["affectedProducts"]] == [1]
    assert data["affectedProducts"][0]["riskLevel"] == "unsafe"


def test_ingredient_without_metrics_or_products(client):
    response = client.get("/api/ingredients/3")

    data = response.json()["data"]
    assert data["ingredient"]["occurrencesCount"] is None
    assert data["affectedProducts"] == []


def test_missing_ingredient(client):
    response = client.get("/api/ingredients/42")

    assert response.status_code == 404
    assert response.json()["error"] == "Ingredient not found"


def test_invalid_ingredient_id(client):
    response = client.get("/api/ingredients/mercury")

    assert response.status_code == 400
    assert response.json()["message"] == "Ingredient ID must be a number"


def test_ingredient_id_beyond_integer_range_is_not_found(client):
    response = client.get("/api/ingredients/" + "9" * 25)

    assert response.status_code == 404
    assert response.json()["error"] == "Ingredient not found"
