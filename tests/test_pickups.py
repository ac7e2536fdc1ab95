import pytest
from fastapi.testclient import TestClient

from conftest import auth
from lost_found_api.app.core.errors import InvalidTransitionError
from lost_found_api.app.schemas.pickup import PickupStatus
from lost_found_api.app.services.pickup_service import validate_transition


@pytest.fixture
def parties(register, post_item):
    """A finder who posted a found item and the owner asking for it back."""
    finder_token, finder = register("finder@campus.edu", name="Finn")
    owner_token, owner = register("owner@campus.edu", name="Olive")
    item = post_item(finder_token, type="found", name="Wallet", category="wallet")
    return {
        "finder_token": finder_token,
        "finder": finder,
        "owner_token": owner_token,
        "owner": owner,
        "item": item,
    }


def create_pickup(client, token, item_id, owner_id, **extra):
    body = {"itemId": item_id, "ownerId": owner_id, "meetingSpot": "Library", "meetingTime": "14:00"}
    body.update(extra)
    return client.post("/api/pickup", json=body, headers=auth(token))


def item_status(client, item_id):
    return next(item["status"] for item in client.get("/api/items").json() if item["id"] == item_id)


def test_create_pickup_is_pending(client, parties):
    response = create_pickup(client, parties["owner_token"], parties["item"]["id"], parties["finder"]["id"])
    assert response.status_code == 200
    pickup = response.json()
    assert pickup["status"] == "pending"
    assert pickup["requesterId"] == parties["owner"]["id"]
    assert pickup["ownerId"] == parties["finder"]["id"]
    assert pickup["itemId"] == parties["item"]["id"]
    assert pickup["meetingSpot"] == "Library"
    assert pickup["meetingTime"] == "14:00"


def test_create_pickup_requires_token(client, parties):
    response = client.post("/api/pickup", json={"itemId": parties["item"]["id"], "ownerId": 1})
    assert response.status_code == 401


def test_create_pickup_with_unknown_references(client, parties):
    unknown_item = create_pickup(client, parties["owner_token"], 9999, parties["finder"]["id"])
    unknown_owner = create_pickup(client, parties["owner_token"], parties["item"]["id"], 9999)
    assert unknown_item.status_code == 404
    assert unknown_item.json() == {"msg": "Item not found"}
    assert unknown_owner.status_code == 404
    assert unknown_owner.json() == {"msg": "User not found"}


def test_two_pickups_for_same_item_are_allowed(client, parties):
    first = create_pickup(client, parties["owner_token"], parties["item"]["id"], parties["finder"]["id"])
    second = create_pickup(client, parties["owner_token"], parties["item"]["id"], parties["finder"]["id"])
    assert first.status_code == second.status_code == 200
    assert first.json()["id"] != second.json()["id"]


def test_list_returns_only_callers_pickups_expanded(client, register, post_item, parties):
    mine = create_pickup(client, parties["owner_token"], parties["item"]["id"], parties["finder"]["id"]).json()
    # Unrelated users exchanging another item.
    other_token, _ = register("x@campus.edu")
    _, other_owner = register("y@campus.edu")
    other_item = post_item(other_token, type="lost", name="Scarf")
    for _ in range(3):
        create_pickup(client, other_token, other_item["id"], other_owner["id"])

    for token in (parties["owner_token"], parties["finder_token"]):
        response = client.get("/api/pickup", headers=auth(token))
        assert response.status_code == 200
        pickups = response.json()
        assert [p["id"] for p in pickups] == [mine["id"]]

    pickup = pickups[0]
    assert pickup["itemId"]["id"] == parties["item"]["id"]
    assert pickup["itemId"]["name"] == "Wallet"
    assert pickup["requesterId"] == {"id": parties["owner"]["id"], "name": "Olive"}
    assert pickup["ownerId"] == {"id": parties["finder"]["id"], "name": "Finn"}

    _, stranger = register("z@campus.edu")
    stranger_token = client.post(
        "/api/auth/login", json={"email": "z@campus.edu", "password": "s3cret-pass"}
    ).json()["token"]
    assert client.get("/api/pickup", headers=auth(stranger_token)).json() == []


def test_accepting_leaves_item_open_completing_returns_it(client, parties):
    token = parties["owner_token"]
    item_id = parties["item"]["id"]
    pickup = create_pickup(client, token, item_id, parties["finder"]["id"]).json()

    accepted = client.put(f"/api/pickup/{pickup['id']}", json={"status": "accepted"}, headers=auth(token))
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert item_status(client, item_id) == "open"

    completed = client.put(f"/api/pickup/{pickup['id']}", json={"status": "completed"}, headers=auth(token))
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert item_status(client, item_id) == "returned"


def test_completed_pickup_cannot_be_reverted(client, parties):
    token = parties["owner_token"]
    pickup = create_pickup(client, token, parties["item"]["id"], parties["finder"]["id"]).json()
    for status in ("accepted", "completed"):
        client.put(f"/api/pickup/{pickup['id']}", json={"status": status}, headers=auth(token))

    response = client.put(f"/api/pickup/{pickup['id']}", json={"status": "pending"}, headers=auth(token))
    assert response.status_code == 409
    assert "completed" in response.json()["msg"]

    # Retrying the final state is harmless.
    retry = client.put(f"/api/pickup/{pickup['id']}", json={"status": "completed"}, headers=auth(token))
    assert retry.status_code == 200
    assert item_status(client, parties["item"]["id"]) == "returned"


def test_completing_pending_pickup_directly_returns_item(client, parties):
    token = parties["owner_token"]
    pickup = create_pickup(client, token, parties["item"]["id"], parties["finder"]["id"]).json()
    response = client.put(f"/api/pickup/{pickup['id']}", json={"status": "completed"}, headers=auth(token))
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert item_status(client, parties["item"]["id"]) == "returned"


def test_accepted_pickup_cannot_go_back_to_pending(client, parties):
    token = parties["owner_token"]
    pickup = create_pickup(client, token, parties["item"]["id"], parties["finder"]["id"]).json()
    client.put(f"/api/pickup/{pickup['id']}", json={"status": "accepted"}, headers=auth(token))
    response = client.put(f"/api/pickup/{pickup['id']}", json={"status": "pending"}, headers=auth(token))
    assert response.status_code == 409
    listed = client.get("/api/pickup", headers=auth(token)).json()
    assert listed[0]["status"] == "accepted"


def test_failed_item_update_rolls_back_pickup_status(app, client, parties, db):
    token = parties["owner_token"]
    item_id = parties["item"]["id"]
    pickup = create_pickup(client, token, item_id, parties["finder"]["id"]).json()
    with db.transaction() as cursor:
        cursor.execute(
            "CREATE TRIGGER reject_return BEFORE UPDATE OF status ON items "
            "BEGIN SELECT RAISE(ABORT, 'item locked'); END"
        )

    # No context manager: the app is already started by `client`.
    failing = TestClient(app, raise_server_exceptions=False)
    response = failing.put(f"/api/pickup/{pickup['id']}", json={"status": "completed"}, headers=auth(token))
    assert response.status_code == 500

    row = db.connection.execute("SELECT status FROM pickups WHERE id = ?", (pickup["id"],)).fetchone()
    assert row["status"] == "pending"
    assert item_status(client, item_id) == "open"


def test_update_unknown_pickup_is_not_found(client, parties):
    response = client.put("/api/pickup/9999", json={"status": "accepted"}, headers=auth(parties["owner_token"]))
    assert response.status_code == 404
    assert response.json() == {"msg": "Pickup not found"}


def test_update_with_unknown_status_is_rejected(client, parties):
    token = parties["owner_token"]
    pickup = create_pickup(client, token, parties["item"]["id"], parties["finder"]["id"]).json()
    response = client.put(f"/api/pickup/{pickup['id']}", json={"status": "lost"}, headers=auth(token))
    assert response.status_code == 422


def test_update_requires_token(client):
    assert client.put("/api/pickup/1", json={"status": "accepted"}).status_code == 401


@pytest.mark.parametrize(
    "current,new",
    [
        (PickupStatus.pending, PickupStatus.accepted),
        (PickupStatus.pending, PickupStatus.completed),
        (PickupStatus.accepted, PickupStatus.completed),
        (PickupStatus.pending, PickupStatus.pending),
        (PickupStatus.completed, PickupStatus.completed),
    ],
)
def test_legal_transitions(current, new):
    validate_transition(current, new)


@pytest.mark.parametrize(
    "current,new",
    [
        (PickupStatus.accepted, PickupStatus.pending),
        (PickupStatus.completed, PickupStatus.pending),
        (PickupStatus.completed, PickupStatus.accepted),
    ],
)
def test_illegal_transitions(current, new):
    with pytest.raises(InvalidTransitionError):
        validate_transition(current, new)
