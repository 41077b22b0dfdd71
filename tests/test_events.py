import pytest
from httpx import AsyncClient
from fastapi import status
from datetime import datetime, UTC
from typing import Dict

pytestmark = pytest.mark.asyncio

def _dt(value: str) -> datetime:
    return datetime.fromisoformat(value)

async def create_event(client: AsyncClient, headers: Dict[str, str], **overrides) -> dict:
    """Create an event as the given member and return the response body."""
    event_data = {
        "title": "Soccer practice",
        "description": "Bring shin guards",
        "location": "Riverside field",
        "start_time": "2024-01-01T09:00:00Z",
        "end_time": "2024-01-01T10:00:00Z",
        "recurrence_rule": "weekly"
    }
    event_data.update(overrides)

    response = await client.post("/api/v1/events/", json=event_data, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()

async def test_parent_creates_event(client: AsyncClient, parent, child, parent_headers):
    data = await create_event(client, parent_headers, assigned_members=[child.id])

    assert data["title"] == "Soccer practice"
    assert data["family_id"] == parent.family_id
    assert data["created_by_id"] == parent.id
    assert data["is_recurring"] is True
    assert data["recurrence_rule"] == "weekly"
    assert data["assigned_member_ids"] == [child.id]
    assert _dt(data["start_time"]) == datetime(2024, 1, 1, 9, tzinfo=UTC)

async def test_rule_none_is_not_recurring(client: AsyncClient, parent_headers):
    data = await create_event(client, parent_headers, recurrence_rule="none")

    assert data["is_recurring"] is False
    assert data["recurrence_rule"] is None

async def test_all_day_event_spans_whole_day(client: AsyncClient, parent_headers):
    data = await create_event(
        client,
        parent_headers,
        title="Field trip",
        start_time="2024-03-05T10:00:00Z",
        end_time="2024-03-05T11:00:00Z",
        is_all_day=True,
        recurrence_rule=None
    )

    assert _dt(data["start_time"]) == datetime(2024, 3, 5, 0, 0, 0, tzinfo=UTC)
    assert _dt(data["end_time"]) == datetime(2024, 3, 5, 23, 59, 59, tzinfo=UTC)

async def test_create_event_with_category(client: AsyncClient, parent_headers, category):
    data = await create_event(client, parent_headers, category_id=category.id)

    assert data["category"]["name"] == "Sports"
    assert data["category"]["color"] == "#22C55E"

async def test_child_cannot_create_event(client: AsyncClient, child_headers):
    response = await client.post(
        "/api/v1/events/",
        json={
            "title": "Sleepover",
            "start_time": "2024-01-05T18:00:00Z",
            "end_time": "2024-01-06T10:00:00Z"
        },
        headers=child_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_missing_member_header(client: AsyncClient, parent):
    response = await client.get("/api/v1/events/1")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

async def test_unknown_member(client: AsyncClient, parent):
    response = await client.get("/api/v1/events/1", headers={"X-Member-ID": "999"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

async def test_end_before_start_is_rejected(client: AsyncClient, parent_headers):
    response = await client.post(
        "/api/v1/events/",
        json={
            "title": "Backwards",
            "start_time": "2024-01-01T10:00:00Z",
            "end_time": "2024-01-01T09:00:00Z"
        },
        headers=parent_headers
    )
    assert response.status_code == 422

async def test_unknown_rule_is_rejected(client: AsyncClient, parent_headers):
    response = await client.post(
        "/api/v1/events/",
        json={
            "title": "Yearly",
            "start_time": "2024-01-01T09:00:00Z",
            "end_time": "2024-01-01T10:00:00Z",
            "recurrence_rule": "yearly"
        },
        headers=parent_headers
    )
    assert response.status_code == 422

async def test_unknown_member_assignment_is_rejected(client: AsyncClient, parent_headers):
    response = await client.post(
        "/api/v1/events/",
        json={
            "title": "Mystery",
            "start_time": "2024-01-01T09:00:00Z",
            "end_time": "2024-01-01T10:00:00Z",
            "assigned_members": [999]
        },
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "999" in response.json()["detail"]

async def test_get_event(client: AsyncClient, parent_headers):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.get(f"/api/v1/events/{event_id}", headers=parent_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == event_id

async def test_get_missing_event(client: AsyncClient, parent_headers):
    response = await client.get("/api/v1/events/12345", headers=parent_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_child_reads_only_assigned_events(
    client: AsyncClient, child, parent_headers, child_headers, other_child_headers
):
    event_id = (await create_event(client, parent_headers, assigned_members=[child.id]))["id"]

    response = await client.get(f"/api/v1/events/{event_id}", headers=child_headers)
    assert response.status_code == status.HTTP_200_OK

    response = await client.get(f"/api/v1/events/{event_id}", headers=other_child_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_update_event(client: AsyncClient, parent_headers):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.put(
        f"/api/v1/events/{event_id}",
        json={
            "title": "Soccer match",
            "start_time": "2024-01-02T14:00:00Z",
            "end_time": "2024-01-02T16:00:00Z",
            "recurrence_rule": "biweekly"
        },
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "Soccer match"
    assert data["recurrence_rule"] == "biweekly"
    assert _dt(data["start_time"]) == datetime(2024, 1, 2, 14, tzinfo=UTC)
    assert data["location"] == "Riverside field"

async def test_update_replaces_assignments(client: AsyncClient, child, other_child, parent_headers):
    event_id = (await create_event(client, parent_headers, assigned_members=[child.id]))["id"]

    response = await client.put(
        f"/api/v1/events/{event_id}",
        json={"assigned_members": [other_child.id]},
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["assigned_member_ids"] == [other_child.id]

async def test_update_end_before_stored_start_is_rejected(client: AsyncClient, parent_headers):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.put(
        f"/api/v1/events/{event_id}",
        json={"end_time": "2024-01-01T08:00:00Z"},
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await client.get(f"/api/v1/events/{event_id}", headers=parent_headers)
    assert _dt(response.json()["end_time"]) == datetime(2024, 1, 1, 10, tzinfo=UTC)

async def test_empty_update_is_rejected(client: AsyncClient, parent_headers):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.put(f"/api/v1/events/{event_id}", json={}, headers=parent_headers)
    assert response.status_code == 422

async def test_child_cannot_update_or_delete(client: AsyncClient, child, parent_headers, child_headers):
    event_id = (await create_event(client, parent_headers, assigned_members=[child.id]))["id"]

    response = await client.put(f"/api/v1/events/{event_id}", json={"title": "Mine now"}, headers=child_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await client.delete(f"/api/v1/events/{event_id}", headers=child_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_delete_event(client: AsyncClient, child, parent_headers):
    event_id = (await create_event(client, parent_headers, assigned_members=[child.id]))["id"]

    response = await client.delete(f"/api/v1/events/{event_id}", headers=parent_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = await client.get(f"/api/v1/events/{event_id}", headers=parent_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

async def test_categories(client: AsyncClient, parent_headers, child_headers):
    response = await client.post(
        "/api/v1/categories/",
        json={"name": "School", "color": "#3B82F6", "icon": "🎒"},
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    category_id = response.json()["id"]

    response = await client.get("/api/v1/categories/", headers=child_headers)
    assert response.status_code == status.HTTP_200_OK
    assert [c["id"] for c in response.json()] == [category_id]

async def test_child_cannot_create_category(client: AsyncClient, child_headers):
    response = await client.post("/api/v1/categories/", json={"name": "Games"}, headers=child_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

async def test_invalid_category_color(client: AsyncClient, parent_headers):
    response = await client.post(
        "/api/v1/categories/",
        json={"name": "Music", "color": "blue"},
        headers=parent_headers
    )
    assert response.status_code == 422

async def test_offset_times_are_stored_in_utc(client: AsyncClient, parent_headers):
    data = await create_event(
        client,
        parent_headers,
        start_time="2024-01-01T09:00:00+02:00",
        end_time="2024-01-01T10:00:00+02:00"
    )
    assert _dt(data["start_time"]) == datetime(2024, 1, 1, 7, tzinfo=UTC)

    response = await client.put(
        f"/api/v1/events/{data['id']}",
        json={"end_time": "2024-01-01T05:30:00-05:00"},
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert _dt(response.json()["end_time"]) == datetime(2024, 1, 1, 10, 30, tzinfo=UTC)

@pytest.mark.parametrize("field", ["title", "start_time", "end_time", "is_all_day"])
async def test_update_cannot_null_required_fields(client: AsyncClient, parent_headers, field):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.put(f"/api/v1/events/{event_id}", json={field: None}, headers=parent_headers)
    assert response.status_code == 422
    assert field in str(response.json()["detail"])

    response = await client.get(f"/api/v1/events/{event_id}", headers=parent_headers)
    assert response.json()["title"] == "Soccer practice"

async def test_update_can_clear_optional_fields(client: AsyncClient, parent_headers):
    event_id = (await create_event(client, parent_headers))["id"]

    response = await client.put(
        f"/api/v1/events/{event_id}",
        json={"location": None, "description": None},
        headers=parent_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["location"] is None
