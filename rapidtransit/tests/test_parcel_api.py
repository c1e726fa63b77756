"""
HTTP tests for parcel booking, status updates, public tracking and the
customer dashboard.
"""

import re
import pytest

TRACKING_RE = re.compile(r"^RT-\d{4}-\d{6}$")


def auth(token):
    return {"Authorization": f"Bearer {token}"}


async def book_parcel(client, token, payload):
    response = await client.post("/v1/parcels", json=payload, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()


async def register_customer(client, username):
    response = await client.post("/v1/auth/register", json={
        "email": f"{username}@test.com",
        "username": username,
        "password": "password123",
    })
    assert response.status_code == 201
    return response.json()["access_token"]


# TEST 1: Booking assigns tracking number, cost and sender
@pytest.mark.asyncio
async def test_create_parcel(client, customer_token, parcel_payload):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    assert TRACKING_RE.match(parcel["tracking_number"])
    assert parcel["status"] == "pending"
    assert parcel["sender_name"] == "Sipho Dlamini"
    # medium (1.5) x express (1.5) x default distance (100km)
    assert parcel["estimated_cost"] == 56.25


@pytest.mark.asyncio
async def test_create_parcel_adds_in_app_notification(client, customer_token, parcel_payload):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    response = await client.get("/v1/notifications", headers=auth(customer_token))
    assert response.status_code == 200
    notifications = response.json()
    assert len(notifications) == 1
    assert notifications[0]["title"] == f"Parcel {parcel['tracking_number']} created"
    assert notifications[0]["type"] == "success"
    assert notifications[0]["parcel_id"] == parcel["id"]
    assert notifications[0]["is_read"] is False


@pytest.mark.asyncio
async def test_create_parcel_validation_error_envelope(client, customer_token, parcel_payload):
    payload = {**parcel_payload, "parcel_size": "huge"}
    del payload["recipient_phone"]

    response = await client.post("/v1/parcels", json=payload, headers=auth(customer_token))

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    failed_fields = {tuple(err["loc"])[-1] for err in body["details"]["errors"]}
    assert {"parcel_size", "recipient_phone"} <= failed_fields

    listing = await client.get("/v1/parcels", headers=auth(customer_token))
    assert listing.json() == []


@pytest.mark.asyncio
async def test_create_parcel_unknown_transport(client, customer_token, parcel_payload):
    response = await client.post(
        "/v1/parcels", json={**parcel_payload, "transport_id": 999}, headers=auth(customer_token)
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION_001"

    listing = await client.get("/v1/parcels", headers=auth(customer_token))
    assert listing.json() == []


@pytest.mark.asyncio
async def test_create_parcel_requires_auth(client, parcel_payload):
    response = await client.post("/v1/parcels", json=parcel_payload)
    assert response.status_code in (401, 403)


# TEST 2: Listing and ownership
@pytest.mark.asyncio
async def test_list_only_own_parcels(client, customer_token, parcel_payload):
    mine = await book_parcel(client, customer_token, parcel_payload)
    other_token = await register_customer(client, "someone_else")
    await book_parcel(client, other_token, parcel_payload)

    response = await client.get("/v1/parcels", headers=auth(customer_token))

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [mine["id"]]


@pytest.mark.asyncio
async def test_customer_cannot_view_another_customers_parcel(client, customer_token, parcel_payload):
    parcel = await book_parcel(client, customer_token, parcel_payload)
    other_token = await register_customer(client, "snooper")

    response = await client.get(f"/v1/parcels/{parcel['id']}", headers=auth(other_token))
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_FORBIDDEN"

    response = await client.get(f"/v1/parcels/{parcel['id']}/history", headers=auth(other_token))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_operator_can_view_any_parcel(client, customer_token, operator_token, parcel_payload):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    response = await client.get(f"/v1/parcels/{parcel['id']}", headers=auth(operator_token))

    assert response.status_code == 200
    assert response.json()["tracking_number"] == parcel["tracking_number"]


@pytest.mark.asyncio
async def test_get_missing_parcel_returns_not_found_envelope(client, customer_token):
    response = await client.get("/v1/parcels/424242", headers=auth(customer_token))

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "ERR_NOT_FOUND_001"
    assert body["details"] == {"resource": "Parcel", "id": 424242}


# TEST 3: Status updates
@pytest.mark.asyncio
async def test_customer_cannot_update_status(client, customer_token, parcel_payload, sms_sender):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/status",
        json={"status": "collected"},
        headers=auth(customer_token),
    )

    assert response.status_code == 403
    assert sms_sender.sent == []


@pytest.mark.asyncio
async def test_operator_updates_status_and_recipient_is_texted(
    client, customer_token, operator_token, parcel_payload, dispatcher, sms_sender
):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/status",
        json={"status": "in_transit", "location": "Bloemfontein depot"},
        headers=auth(operator_token),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "in_transit"

    await dispatcher.drain()
    assert len(sms_sender.sent) == 1
    to_phone, message = sms_sender.sent[0]
    assert to_phone == "082 123 4567"
    assert "in transit at Bloemfontein depot" in message
    assert parcel["tracking_number"] in message


@pytest.mark.asyncio
async def test_status_update_invalid_status(client, customer_token, operator_token, parcel_payload):
    parcel = await book_parcel(client, customer_token, parcel_payload)

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/status",
        json={"status": "teleported"},
        headers=auth(operator_token),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_status_update_missing_parcel(client, operator_token, sms_sender):
    response = await client.patch(
        "/v1/parcels/9999/status",
        json={"status": "delivered"},
        headers=auth(operator_token),
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"
    assert sms_sender.sent == []


# TEST 4: Public tracking and history
@pytest.mark.asyncio
async def test_track_parcel_returns_history_newest_first(
    client, customer_token, operator_token, parcel_payload
):
    parcel = await book_parcel(client, customer_token, parcel_payload)
    for new_status in ("collected", "in_transit", "delivered"):
        response = await client.patch(
            f"/v1/parcels/{parcel['id']}/status",
            json={"status": new_status},
            headers=auth(operator_token),
        )
        assert response.status_code == 200

    response = await client.get(f"/v1/track/{parcel['tracking_number']}")

    assert response.status_code == 200
    body = response.json()
    assert body["parcel"]["status"] == "delivered"
    assert body["parcel"]["delivered_at"] is not None
    assert [h["status"] for h in body["status_history"]] == [
        "delivered", "in_transit", "collected", "pending"
    ]

    history = await client.get(f"/v1/parcels/{parcel['id']}/history", headers=auth(customer_token))
    assert [h["id"] for h in history.json()] == [h["id"] for h in body["status_history"]]


@pytest.mark.asyncio
async def test_track_unknown_tracking_number(client):
    response = await client.get("/v1/track/RT-1999-000000")

    assert response.status_code == 404
    assert response.json()["details"]["id"] == "RT-1999-000000"


# TEST 5: Cost estimation
@pytest.mark.asyncio
async def test_estimate_cost_endpoint(client):
    response = await client.post("/v1/estimate-cost", json={
        "parcel_size": "large", "priority": "next_transport", "distance": 200
    })

    assert response.status_code == 200
    assert response.json() == {"estimated_cost": 250.0}


@pytest.mark.asyncio
async def test_estimate_cost_unknown_tier_is_baseline(client):
    response = await client.post("/v1/estimate-cost", json={
        "parcel_size": "gigantic", "priority": "whenever"
    })

    assert response.status_code == 200
    assert response.json()["estimated_cost"] == 25.0


@pytest.mark.asyncio
async def test_estimate_cost_without_tiers(client):
    response = await client.post("/v1/estimate-cost", json={"distance": 300})

    assert response.status_code == 200
    assert response.json()["estimated_cost"] == 75.0


# TEST 6: Dashboard and notifications
@pytest.mark.asyncio
async def test_dashboard_stats(client, customer_token, operator_token, parcel_payload):
    first = await book_parcel(client, customer_token, parcel_payload)
    second = await book_parcel(client, customer_token, parcel_payload)
    await book_parcel(client, customer_token, parcel_payload)

    await client.patch(
        f"/v1/parcels/{first['id']}/status", json={"status": "in_transit"}, headers=auth(operator_token)
    )
    await client.patch(
        f"/v1/parcels/{second['id']}/status", json={"status": "delivered"}, headers=auth(operator_token)
    )

    response = await client.get("/v1/dashboard/stats", headers=auth(customer_token))

    assert response.status_code == 200
    assert response.json() == {"total": 3, "in_transit": 1, "delivered": 1, "pending": 1}


@pytest.mark.asyncio
async def test_mark_notifications_read(client, customer_token, parcel_payload):
    await book_parcel(client, customer_token, parcel_payload)
    await book_parcel(client, customer_token, parcel_payload)

    notifications = (await client.get("/v1/notifications", headers=auth(customer_token))).json()
    first_id = notifications[0]["id"]

    response = await client.patch(f"/v1/notifications/{first_id}/read", headers=auth(customer_token))
    assert response.status_code == 200

    unread = await client.get("/v1/notifications?unread_only=true", headers=auth(customer_token))
    assert [n["id"] for n in unread.json()] == [notifications[1]["id"]]

    response = await client.patch("/v1/notifications/read-all", headers=auth(customer_token))
    assert response.json() == {"status": "success", "count": 1}

    unread = await client.get("/v1/notifications?unread_only=true", headers=auth(customer_token))
    assert unread.json() == []


@pytest.mark.asyncio
async def test_cannot_read_someone_elses_notification(client, customer_token, parcel_payload):
    await book_parcel(client, customer_token, parcel_payload)
    notification_id = (await client.get("/v1/notifications", headers=auth(customer_token))).json()[0]["id"]
    other_token = await register_customer(client, "curious")

    response = await client.patch(f"/v1/notifications/{notification_id}/read", headers=auth(other_token))

    assert response.status_code == 404
