"""Tests for the camp agenda endpoints."""

import pytest

from camp_agenda.db.models import AgendaSession


def _session_body(**overrides) -> dict:
    body = {
        "title": "Ball Handling",
        "startTime": "09:00",
        "endTime": "10:00",
        "day": 1,
        "sessionType": "drill",
        "status": "scheduled",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_agenda_days_follow_camp_date_range(http_client, seeded_camp):
    response = await http_client.get(f"/api/camps/{seeded_camp['camp_id']}/agenda")

    assert response.status_code == 200
    days = response.json()["data"]
    assert [(d["day"], d["date"], d["title"]) for d in days] == [
        (1, "2025-07-14", "Day 1"),
        (2, "2025-07-15", "Day 2"),
        (3, "2025-07-16", "Day 3"),
    ]
    assert all(d["items"] == [] for d in days)


@pytest.mark.asyncio
async def test_add_then_get_shows_item_once_on_its_day(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    created = await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body(day=2))
    assert created.status_code == 201
    session_id = created.json()["id"]

    days = (await http_client.get(f"/api/camps/{camp_id}/agenda")).json()["data"]

    placements = [(d["day"], item["id"]) for d in days for item in d["items"]]
    assert placements == [(2, session_id)]


@pytest.mark.asyncio
async def test_items_sorted_by_start_time(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body(title="A", startTime="09:00"))
    await http_client.post(
        f"/api/camps/{camp_id}/agenda", json=_session_body(title="B", startTime="08:00", endTime="08:30")
    )

    day_one = (await http_client.get(f"/api/camps/{camp_id}/agenda")).json()["data"][0]
    assert [item["title"] for item in day_one["items"]] == ["B", "A"]


@pytest.mark.asyncio
async def test_create_rejects_bad_time_range_with_field_detail(http_client, seeded_camp):
    response = await http_client.post(
        f"/api/camps/{seeded_camp['camp_id']}/agenda",
        json=_session_body(startTime="08:00", endTime="07:30"),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "endTime"


@pytest.mark.asyncio
async def test_create_rejects_day_outside_camp(http_client, seeded_camp):
    response = await http_client.post(f"/api/camps/{seeded_camp['camp_id']}/agenda", json=_session_body(day=4))
    assert response.status_code == 400
    assert response.json()["error"] == "Day 4 is outside the camp schedule (1-3)"


@pytest.mark.asyncio
async def test_staff_assignments_resolve_and_drop_missing(http_client, seeded_camp, db_session):
    camp_id = seeded_camp["camp_id"]
    staff_id = seeded_camp["staff_ids"][0]
    response = await http_client.post(
        f"/api/camps/{camp_id}/agenda",
        json=_session_body(staffAssignments=[{"id": staff_id, "name": "Sam Ortiz"}, {"id": 999}]),
    )

    assert response.status_code == 201
    assert [m["name"] for m in response.json()["staffAssignments"]] == ["Sam Ortiz"]
    stored = db_session.get(AgendaSession, response.json()["id"])
    assert stored.staff_ids == [staff_id, 999]


@pytest.mark.asyncio
async def test_partial_update_checks_stored_times(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    session_id = (await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body())).json()["id"]

    rejected = await http_client.put(f"/api/camps/{camp_id}/agenda/{session_id}", json={"endTime": "08:30"})
    assert rejected.status_code == 422
    assert rejected.json()["details"] == [{"field": "endTime", "message": "End time must be after start time"}]

    updated = await http_client.put(f"/api/camps/{camp_id}/agenda/{session_id}", json={"title": "Handles"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Handles"
    assert updated.json()["startTime"] == "09:00"


@pytest.mark.asyncio
async def test_update_is_idempotent(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    session_id = (await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body())).json()["id"]
    payload = {"title": "Handles", "endTime": "10:15"}

    first = await http_client.put(f"/api/camps/{camp_id}/agenda/{session_id}", json=payload)
    second = await http_client.put(f"/api/camps/{camp_id}/agenda/{session_id}", json=payload)

    assert first.json() == second.json()


@pytest.mark.asyncio
async def test_delete_then_delete_again_is_404(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    session_id = (await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body())).json()["id"]

    deleted = await http_client.delete(f"/api/camps/{camp_id}/agenda/{session_id}")
    assert deleted.json() == {"success": True, "message": "Agenda item deleted successfully"}

    missing = await http_client.delete(f"/api/camps/{camp_id}/agenda/{session_id}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Agenda item not found"


@pytest.mark.asyncio
async def test_copy_duplicates_content_into_each_day(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    source = (
        await http_client.post(
            f"/api/camps/{camp_id}/agenda",
            json=_session_body(clinicianId=seeded_camp["clinician_id"], notes="Bring cones"),
        )
    ).json()

    response = await http_client.post(f"/api/camps/{camp_id}/agenda/{source['id']}/copy", json={"days": [2, 3, 2]})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Session copied to 2 day(s)"
    copies = body["data"]
    assert [c["day"] for c in copies] == [2, 3]
    assert all(c["id"] != source["id"] for c in copies)
    assert all(
        (c["title"], c["startTime"], c["clinicianId"], c["notes"])
        == (source["title"], source["startTime"], source["clinicianId"], "Bring cones")
        for c in copies
    )


@pytest.mark.asyncio
async def test_copy_allows_overlap_on_target_day(http_client, seeded_camp):
    camp_id = seeded_camp["camp_id"]
    first = (await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body(day=1))).json()
    await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body(day=2))

    response = await http_client.post(f"/api/camps/{camp_id}/agenda/{first['id']}/copy", json={"days": [2]})

    assert response.status_code == 200
    day_two = (await http_client.get(f"/api/camps/{camp_id}/agenda")).json()["data"][1]
    assert len(day_two["items"]) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [[], [0], [4]])
async def test_copy_rejects_empty_or_out_of_range_days(http_client, seeded_camp, days):
    camp_id = seeded_camp["camp_id"]
    source = (await http_client.post(f"/api/camps/{camp_id}/agenda", json=_session_body())).json()

    response = await http_client.post(f"/api/camps/{camp_id}/agenda/{source['id']}/copy", json={"days": days})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_camp_is_404(http_client):
    response = await http_client.get("/api/camps/999/agenda")
    assert response.status_code == 404
    assert response.json() == {"error": "Camp not found"}
