import uuid
from datetime import datetime, timedelta, timezone

from surgiflow.core.checklist_definitions import SIGN_IN_ITEMS
from surgiflow.db.enums import SurgicalCaseStatus as S

ACTOR_ID = "user-nurse-1"  # matches the actor_client fixture


async def test_actor_headers_required(client, make_case):
    case = make_case(status=S.SCHEDULED)

    response = await client.post(f"/surgical-cases/{case.id}/transitions", json={"action": "IN_PREP"})

    assert response.status_code == 401


async def test_transition_endpoint(actor_client, make_case):
    case = make_case(status=S.SCHEDULED)

    response = await actor_client.post(
        f"/surgical-cases/{case.id}/transitions", json={"action": "IN_PREP", "reason": "Called"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["case_id"] == str(case.id)
    assert data["previous_status"] == "SCHEDULED"
    assert data["new_status"] == "IN_PREP"
    assert data["transitioned_by"] == ACTOR_ID


async def test_gate_failure_maps_to_conflict(actor_client, make_case):
    case = make_case(status=S.IN_PREP)

    response = await actor_client.post(
        f"/surgical-cases/{case.id}/transitions", json={"action": "IN_THEATER"}
    )

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "GATE_NOT_SATISFIED"
    assert data["gate"] == "SIGN_IN"
    assert len(data["missing_items"]) == len(SIGN_IN_ITEMS)


async def test_unknown_action_and_missing_case(actor_client, make_case):
    case = make_case(status=S.SCHEDULED)

    bad_action = await actor_client.post(
        f"/surgical-cases/{case.id}/transitions", json={"action": "DISCHARGE"}
    )
    missing = await actor_client.post(
        f"/surgical-cases/{uuid.uuid4()}/transitions", json={"action": "IN_PREP"}
    )

    assert bad_action.status_code == 400
    assert bad_action.json()["error"] == "INVALID_ACTION"
    assert missing.status_code == 404


async def test_illegal_transition_maps_to_conflict(actor_client, make_case):
    case = make_case(status=S.COMPLETED)

    response = await actor_client.post(
        f"/surgical-cases/{case.id}/transitions", json={"action": "IN_PREP"}
    )

    assert response.status_code == 409
    assert response.json()["from_status"] == "COMPLETED"


async def test_checklist_endpoints(actor_client, make_case):
    case = make_case(status=S.IN_PREP)
    base = f"/surgical-cases/{case.id}/checklist"
    items = [{"key": d.key, "label": d.label, "confirmed": True} for d in SIGN_IN_ITEMS]

    empty = await actor_client.get(base)
    assert empty.status_code == 200
    assert empty.json()["phases"]["SIGN_IN"]["completed"] is False

    draft = await actor_client.put(
        f"{base}/draft", json={"phase": "SIGN_IN", "items": items[:2]}
    )
    assert draft.status_code == 200
    assert len(draft.json()["phases"]["SIGN_IN"]["items"]) == 2

    incomplete = await actor_client.post(
        f"{base}/finalize", json={"phase": "SIGN_IN", "items": items[:2]}
    )
    assert incomplete.status_code == 422
    assert incomplete.json()["error"] == "CHECKLIST_INCOMPLETE"

    finalized = await actor_client.post(
        f"{base}/finalize", json={"phase": "SIGN_IN", "items": items}
    )
    assert finalized.status_code == 200
    sign_in = finalized.json()["phases"]["SIGN_IN"]
    assert sign_in["completed"] is True
    assert sign_in["completed_by_user_id"] == ACTOR_ID
    assert sign_in["completed_by_role"] == "NURSE"

    locked = await actor_client.put(f"{base}/draft", json={"phase": "SIGN_IN", "items": items[:1]})
    assert locked.status_code == 409

    theater = await actor_client.post(
        f"/surgical-cases/{case.id}/transitions", json={"action": "IN_THEATER"}
    )
    assert theater.status_code == 200


async def test_checklist_complete_rejects_unconfirmed(actor_client, make_case):
    case = make_case(status=S.IN_PREP)

    response = await actor_client.post(
        f"/surgical-cases/{case.id}/checklist/complete",
        json={
            "phase": "SIGN_IN",
            "items": [{"key": "site_marked", "label": "Site marked", "confirmed": False}],
        },
    )

    assert response.status_code == 422
    assert response.json()["unconfirmed_keys"] == ["site_marked"]


async def test_checklist_rejects_long_note(actor_client, make_case):
    case = make_case(status=S.IN_PREP)

    response = await actor_client.post(
        f"/surgical-cases/{case.id}/checklist/complete",
        json={
            "phase": "SIGN_IN",
            "items": [{"key": "k", "label": "K", "confirmed": True, "note": "x" * 501}],
        },
    )

    assert response.status_code == 422


async def test_timeline_endpoints(actor_client, make_case):
    case = make_case(status=S.IN_THEATER)
    base = f"/surgical-cases/{case.id}/timeline"
    wheels_in = datetime.now(timezone.utc) - timedelta(minutes=45)

    initial = await actor_client.get(base)
    assert initial.status_code == 200
    assert initial.json()["missing_items"] == ["wheels_in", "anesthesia_start", "incision_time"]

    updated = await actor_client.patch(base, json={"wheels_in": wheels_in.isoformat()})
    assert updated.status_code == 200
    body = updated.json()
    assert body["timeline"]["wheels_in"] is not None
    assert body["timeline"]["anesthesia_start"] is None
    assert body["missing_items"] == ["anesthesia_start", "incision_time"]

    invalid = await actor_client.patch(
        base, json={"incision_time": (wheels_in - timedelta(minutes=1)).isoformat()}
    )
    assert invalid.status_code == 422
    assert invalid.json()["errors"][0]["field"] == "incision_time"

    empty = await actor_client.patch(base, json={})
    assert empty.status_code == 422


async def test_timeline_rejects_naive_timestamps(actor_client, make_case):
    case = make_case(status=S.IN_THEATER)

    response = await actor_client.patch(
        f"/surgical-cases/{case.id}/timeline", json={"wheels_in": "2026-03-02T08:00:00"}
    )

    assert response.status_code == 422


async def test_dayboard_endpoint(actor_client, make_case, make_theater, make_booking):
    theater = make_theater("Theater A")
    case = make_case(status=S.SCHEDULED)
    make_booking(theater, case, datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc))

    response = await actor_client.get("/theater/dayboard", params={"date": "2026-03-02"})

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2026-03-02"
    assert data["theaters"][0]["name"] == "Theater A"
    assert data["theaters"][0]["cases"][0]["id"] == str(case.id)
    assert data["summary"]["total_cases"] == 1
    assert data["summary"]["avg_or_time_minutes"] is None


async def test_dayboard_requires_date(actor_client):
    response = await actor_client.get("/theater/dayboard")

    assert response.status_code == 422


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_cors_allows_configured_origin(client):
    response = await client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert "access-control-expose-headers" not in response.headers
