import pytest

from conftest import auth
from lost_found_api.app.schemas.item import ItemRead, ItemType
from lost_found_api.app.services.match_service import is_candidate, search_terms


@pytest.fixture
def token(register):
    token, _ = register("ada@campus.edu")
    return token


def match_ids(client, token, item_id):
    response = client.get(f"/api/items/match/{item_id}", headers=auth(token))
    assert response.status_code == 200, response.text
    return {item["id"] for item in response.json()}


def test_match_requires_token(client, token, post_item):
    item = post_item(token, type="lost", name="Wallet")
    assert client.get(f"/api/items/match/{item['id']}").status_code == 401


def test_unknown_item_is_not_found(client, token):
    response = client.get("/api/items/match/9999", headers=auth(token))
    assert response.status_code == 404
    assert response.json() == {"msg": "Item not found"}


def test_wallet_scenario(client, register, post_item):
    token, _ = register("a@x.com")
    token = client.post("/api/auth/login", json={"email": "a@x.com", "password": "s3cret-pass"}).json()["token"]
    lost = post_item(token, type="lost", category="wallet")
    found = post_item(token, type="found", category="wallet")
    assert lost["status"] == found["status"] == "open"
    assert found["id"] in match_ids(client, token, lost["id"])


def test_shared_category_matches_only_open_opposite_items(client, token, post_item, db):
    source = post_item(token, type="lost", name="Backpack", category="bag", color="black", location="Library")
    open_found = post_item(token, type="found", name="Tote", category="bag")
    matched_found = post_item(token, type="found", name="Tote", category="bag")
    returned_found = post_item(token, type="found", name="Tote", category="bag")
    same_type = post_item(token, type="lost", name="Tote", category="bag")
    with db.transaction() as cursor:
        cursor.execute("UPDATE items SET status = 'matched' WHERE id = ?", (matched_found["id"],))
        cursor.execute("UPDATE items SET status = 'returned' WHERE id = ?", (returned_found["id"],))

    ids = match_ids(client, token, source["id"])
    assert ids == {open_found["id"]}
    assert same_type["id"] not in ids


@pytest.mark.parametrize(
    "candidate",
    [
        {"color": "black"},
        {"location": "Library"},
        {"description": "A Lenovo laptop in a grey sleeve"},
        {"name": "laptop charger"},
    ],
)
def test_each_criterion_alone_matches(client, token, post_item, candidate):
    source = post_item(token, type="found", name="Laptop", category="electronics", color="black", location="Library")
    other = post_item(token, type="lost", **candidate)
    assert match_ids(client, token, source["id"]) == {other["id"]}


def test_unrelated_items_do_not_match(client, token, post_item):
    source = post_item(token, type="lost", name="Blue umbrella", category="accessory", color="blue", location="Gym")
    post_item(token, type="found", name="Keys", category="keys", color="silver", location="Cafeteria")
    assert match_ids(client, token, source["id"]) == set()


def test_missing_attributes_never_match(client, token, post_item):
    source = post_item(token, type="lost", name=None)
    post_item(token, type="found")
    assert match_ids(client, token, source["id"]) == set()


def test_item_satisfying_several_criteria_is_returned_once(client, token, post_item):
    source = post_item(token, type="lost", name="Red scarf", category="clothing", color="red", location="Hall")
    other = post_item(token, type="found", name="scarf", category="clothing", color="red", location="Hall")
    response = client.get(f"/api/items/match/{source['id']}", headers=auth(token))
    assert [item["id"] for item in response.json()] == [other["id"]]


def test_short_name_words_do_not_match_inside_other_words(client, token, post_item):
    source = post_item(token, type="lost", name="A pen")
    post_item(token, type="found", name="Umbrella", category="accessory", color="blue")
    post_item(token, type="found", name="Opener", description="Left open on a bench")
    assert match_ids(client, token, source["id"]) == set()


def test_name_word_matches_whole_word_in_description(client, token, post_item):
    source = post_item(token, type="lost", name="A pen")
    other = post_item(token, type="found", name="Stationery", description="Blue pen, cap missing")
    assert match_ids(client, token, source["id"]) == {other["id"]}


def test_search_terms_drop_stop_words_and_single_characters():
    assert search_terms("Red red SCARF, wool") == ["red", "scarf", "wool"]
    assert search_terms("A pen of the dean") == ["pen", "dean"]
    assert search_terms(None) == []
    assert search_terms("") == []


def _item(**fields):
    fields.setdefault("id", 1)
    fields.setdefault("posted_by", 1)
    fields.setdefault("created_at", "now")
    return ItemRead(**fields)


def test_is_candidate_requires_open_opposite_item():
    source = _item(type=ItemType.lost, category="bag")
    assert is_candidate(source, _item(id=2, type=ItemType.found, category="bag"))
    assert not is_candidate(source, _item(id=3, type=ItemType.lost, category="bag"))
    assert not is_candidate(source, _item(id=4, type=ItemType.found, category="bag", status="returned"))


def test_is_candidate_ignores_missing_source_attributes():
    source = _item(type=ItemType.lost)
    assert not is_candidate(source, _item(id=2, type=ItemType.found))
