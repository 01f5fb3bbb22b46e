"""
API tests: location endpoints against the in-memory test database.
"""

import pytest

API = "/api/v1/locations"
LOCATION_FIELDS = {"id", "code", "name", "image", "created_at", "updated_at"}


@pytest.mark.asyncio
async def test_list_locations_with_pagination(client, location_factory):
    for _ in range(15):
        await location_factory()

    response = await client.get(API)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["data"]) == 15
    assert set(body["data"][0]) == LOCATION_FIELDS
    assert body["meta"] == {
        "current_page": 1,
        "per_page": 15,
        "total": 15,
        "total_pages": 1,
        "count": 15,
    }


@pytest.mark.asyncio
async def test_pagination_parameters(client, location_factory):
    for _ in range(25):
        await location_factory()

    response = await client.get(API, params={"per_page": 10})

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 10
    assert body["meta"]["total"] == 25
    assert body["meta"]["total_pages"] == 3
    assert body["meta"]["current_page"] == 1
    assert body["meta"]["per_page"] == 10

    links = body["links"]
    assert links["prev"] is None
    assert "page=1" in links["first"]
    assert "page=3" in links["last"]
    assert "page=2" in links["next"]
    assert "per_page=10" in links["next"]


@pytest.mark.asyncio
async def test_last_page_links_and_items(client, location_factory):
    for _ in range(25):
        await location_factory()

    body = (await client.get(API, params={"per_page": 10, "page": 3})).json()

    assert len(body["data"]) == 5
    assert body["meta"]["count"] == 5
    assert body["links"]["next"] is None
    assert "page=2" in body["links"]["prev"]


@pytest.mark.asyncio
async def test_empty_listing_has_one_page(client):
    body = (await client.get(API)).json()

    assert body["data"] == []
    assert body["meta"]["total"] == 0
    assert body["meta"]["total_pages"] == 1


@pytest.mark.asyncio
async def test_list_is_newest_first(client, location_factory):
    older = await location_factory(code="OLDER")
    newer = await location_factory(code="NEWER")

    codes = [loc["code"] for loc in (await client.get(API)).json()["data"]]

    assert codes == [newer.code, older.code]


@pytest.mark.asyncio
async def test_per_page_is_capped(client, test_settings, location_factory):
    await location_factory()

    body = (await client.get(API, params={"per_page": 10_000})).json()

    assert body["meta"]["per_page"] == test_settings.MAX_PER_PAGE


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"per_page": 0}, {"page": "abc"}])
async def test_invalid_paging_parameters(client, params):
    response = await client.get(API, params=params)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "E_INVALID_PARAM"


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [2, 10**19])
async def test_page_past_the_end_is_empty(client, location_factory, page):
    await location_factory()

    response = await client.get(API, params={"page": page})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["meta"]["current_page"] == page
    assert body["meta"]["total"] == 1
    assert body["meta"]["total_pages"] == 1
    assert body["meta"]["count"] == 0
    assert body["links"]["next"] is None


@pytest.mark.asyncio
async def test_malformed_json_body_is_reported_on_body(client):
    response = await client.post(
        API,
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "E_INVALID_PARAM"
    assert list(error["details"]) == ["body"]


@pytest.mark.asyncio
async def test_filter_locations_by_name(client, location_factory):
    await location_factory(name="Test Location")
    await location_factory(name="Another Location")

    response = await client.get(API, params={"name": "Test"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["name"] == "Test Location"


@pytest.mark.asyncio
async def test_filter_locations_by_code(client, location_factory):
    await location_factory(code="TEST001")
    await location_factory(code="PROD001")

    data = (await client.get(API, params={"code": "test"})).json()["data"]

    assert [loc["code"] for loc in data] == ["TEST001"]


@pytest.mark.asyncio
async def test_show_single_location(client, location_factory):
    location = await location_factory()

    response = await client.get(f"{API}/{location.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Location retrieved successfully"
    assert body["data"]["id"] == location.id
    assert body["data"]["code"] == location.code
    assert body["data"]["name"] == location.name


@pytest.mark.asyncio
async def test_show_missing_location_returns_404(client):
    response = await client.get(f"{API}/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Location not found"


@pytest.mark.asyncio
async def test_create_location(client):
    payload = {
        "code": "NEW001",
        "name": "New Test Location",
        "image": "https://example.com/image.jpg",
    }

    response = await client.post(API, json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Location created successfully"
    assert {k: body["data"][k] for k in payload} == payload
    assert set(body["data"]) == LOCATION_FIELDS

    fetched = await client.get(f"{API}/{body['data']['id']}")
    assert fetched.json()["data"]["code"] == "NEW001"


@pytest.mark.asyncio
async def test_create_location_without_image(client):
    response = await client.post(API, json={"code": "NOIMG", "name": "No Image"})

    assert response.status_code == 201
    assert response.json()["data"]["image"] is None


@pytest.mark.asyncio
async def test_create_strips_markup(client):
    response = await client.post(
        API,
        json={"code": "  <script>x</script>ABC  ", "name": "<b>Bold</b> Place"},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["code"] == "xABC"
    assert data["name"] == "Bold Place"


@pytest.mark.asyncio
async def test_create_validates_required_fields(client):
    response = await client.post(API, json={})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "E_INVALID_PARAM"
    assert error["message"] == "Validation failed"
    assert {"code", "name"} <= set(error["details"])


@pytest.mark.asyncio
async def test_create_validates_field_lengths(client):
    response = await client.post(API, json={"code": "X" * 51, "name": "N" * 256})

    assert response.status_code == 422
    assert {"code", "name"} <= set(response.json()["error"]["details"])


@pytest.mark.asyncio
async def test_create_rejects_invalid_image_url(client):
    response = await client.post(API, json={"code": "BADIMG", "name": "Bad", "image": "javascript:alert(1)"})

    assert response.status_code == 422
    assert "image" in response.json()["error"]["details"]


@pytest.mark.asyncio
async def test_create_rejects_code_that_is_only_markup(client):
    response = await client.post(API, json={"code": "<i></i>", "name": "Valid"})

    assert response.status_code == 422
    assert list(response.json()["error"]["details"]) == ["code"]


@pytest.mark.asyncio
async def test_create_validates_unique_code(client, location_factory):
    await location_factory(code="DUPLICATE")

    response = await client.post(API, json={"code": "DUPLICATE", "name": "Test Location"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "E_DUPLICATE_CODE"
    assert error["details"] == {"code": ["The code has already been taken."]}

    body = (await client.get(API, params={"code": "DUPLICATE"})).json()
    assert body["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_update_location(client, location_factory):
    location = await location_factory()
    payload = {"name": "Updated Location Name", "image": "https://example.com/updated-image.jpg"}

    response = await client.put(f"{API}/{location.id}", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Location updated successfully"
    assert body["data"]["id"] == location.id
    assert body["data"]["name"] == "Updated Location Name"
    assert body["data"]["image"] == "https://example.com/updated-image.jpg"
    assert body["data"]["code"] == location.code


@pytest.mark.asyncio
async def test_update_rejects_null_name(client, location_factory):
    location = await location_factory()

    response = await client.put(f"{API}/{location.id}", json={"name": None})

    assert response.status_code == 422
    assert "name" in response.json()["error"]["details"]


@pytest.mark.asyncio
async def test_update_validates_unique_code(client, location_factory):
    await location_factory(code="CODE001")
    second = await location_factory(code="CODE002")

    response = await client.put(f"{API}/{second.id}", json={"code": "CODE001"})

    assert response.status_code == 422
    assert "code" in response.json()["error"]["details"]

    unchanged = (await client.get(f"{API}/{second.id}")).json()["data"]
    assert unchanged["code"] == "CODE002"


@pytest.mark.asyncio
async def test_update_missing_location_returns_404(client):
    response = await client.put(f"{API}/999", json={"name": "Nobody"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_location(client, location_factory):
    location = await location_factory()

    response = await client.delete(f"{API}/{location.id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Location deleted successfully"}
    assert (await client.get(f"{API}/{location.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_location_returns_404(client):
    response = await client.delete(f"{API}/999")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_non_integer_id_is_a_validation_error(client):
    response = await client.get(f"{API}/abc")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unexpected_failure_maps_to_operation_code(client, monkeypatch):
    from app.services.location_service import LocationService

    async def explode(self, *args, **kwargs):
        raise RuntimeError("database is on fire")

    monkeypatch.setattr(LocationService, "get_paginated_locations", explode)

    response = await client.get(API)

    assert response.status_code == 500
    error = response.json()["error"]
    assert error == {"message": "Error retrieving locations", "code": "E_RETRIEVAL_ERROR"}


@pytest.mark.asyncio
async def test_failure_details_shown_in_debug_mode(client, test_settings, monkeypatch):
    from app.services.location_service import LocationService

    async def explode(self, *args, **kwargs):
        raise RuntimeError("database is on fire")

    monkeypatch.setattr(LocationService, "create_location", explode)
    test_settings.DEBUG = True

    response = await client.post(API, json={"code": "BOOM", "name": "Boom"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "E_CREATION_ERROR"
    assert error["details"] == "database is on fire"
