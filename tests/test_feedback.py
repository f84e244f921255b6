import sqlite3

import pytest

from conftest import API
from skill_swap_api.app.services.feedback_service import FeedbackService


@pytest.fixture
def accepted_swap(client, alice, bob, request_swap):
    swap = request_swap(alice, bob)
    resp = client.put(f"{API}/swaps/{swap['id']}/accept", headers=bob["headers"])
    assert resp.status_code == 200
    return swap


def test_participant_rates_the_other_side(client, alice, bob, accepted_swap):
    resp = client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback",
        json={"rating": 5, "comment": "  Great lessons!  "},
        headers=alice["headers"],
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["msg"] == "Feedback submitted successfully!"
    feedback = body["feedback"]
    assert feedback["giverId"] == alice["id"]
    assert feedback["receiverId"] == bob["id"]
    assert feedback["giver"]["username"] == "alice"
    assert feedback["receiver"]["username"] == "bob"
    assert feedback["swapRequestId"] == accepted_swap["id"]
    assert feedback["rating"] == 5
    assert feedback["comment"] == "Great lessons!"


def test_only_one_feedback_per_swap(client, alice, bob, accepted_swap):
    url = f"{API}/swaps/{accepted_swap['id']}/feedback"
    first = client.post(url, json={"rating": 4}, headers=bob["headers"])
    assert first.status_code == 201
    assert first.json()["feedback"]["receiverId"] == alice["id"]

    for user in (bob, alice):
        again = client.post(url, json={"rating": 1}, headers=user["headers"])
        assert again.status_code == 400
        assert again.json() == {"msg": "Feedback already submitted for this swap."}


def test_feedback_requires_accepted_swap(client, alice, bob, carol, request_swap):
    pending = request_swap(alice, bob)
    rejected = request_swap(alice, bob, offered="Piano")
    client.put(f"{API}/swaps/{rejected['id']}/reject", headers=bob["headers"])

    for swap in (pending, rejected):
        for user in (alice, bob, carol):
            resp = client.post(
                f"{API}/swaps/{swap['id']}/feedback", json={"rating": 3}, headers=user["headers"]
            )
            assert resp.status_code == 400
            assert resp.json() == {"msg": "Feedback can only be given for accepted swaps."}


def test_non_participant_cannot_rate(client, carol, accepted_swap):
    resp = client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback", json={"rating": 3}, headers=carol["headers"]
    )
    assert resp.status_code == 401


def test_unknown_swap_is_404(client, alice):
    for swap_id in ("9999", "nope"):
        resp = client.post(
            f"{API}/swaps/{swap_id}/feedback", json={"rating": 3}, headers=alice["headers"]
        )
        assert resp.status_code == 404


@pytest.mark.parametrize(
    "body",
    [
        {"rating": 0},
        {"rating": 6},
        {"rating": 4.5},
        {"rating": 4.0},
        {"rating": True},
        {"rating": "5"},
        {"comment": "hi"},
    ],
)
def test_rating_must_be_integer_between_one_and_five(client, alice, accepted_swap, body):
    resp = client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback", json=body, headers=alice["headers"]
    )
    assert resp.status_code == 400
    assert resp.json()["msg"]


def test_overlong_comment_is_rejected(client, alice, accepted_swap):
    resp = client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback",
        json={"rating": 3, "comment": "x" * 1001},
        headers=alice["headers"],
    )
    assert resp.status_code == 400


def test_feedback_received_listing(client, alice, bob, carol, request_swap, accepted_swap):
    client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback", json={"rating": 5}, headers=alice["headers"]
    )
    other = request_swap(carol, bob, offered="Chess", wanted="Cooking")
    client.put(f"{API}/swaps/{other['id']}/accept", headers=bob["headers"])
    client.post(f"{API}/swaps/{other['id']}/feedback", json={"rating": 3}, headers=carol["headers"])

    resp = client.get(f"{API}/swaps/user/{bob['id']}")
    assert resp.status_code == 200
    received = resp.json()
    assert sorted(f["rating"] for f in received) == [3, 5]
    assert {f["giver"]["username"] for f in received} == {"alice", "carol"}
    assert all(f["receiverId"] == bob["id"] for f in received)

    assert client.get(f"{API}/swaps/user/{alice['id']}").json() == []


def test_feedback_listing_for_unknown_user_is_404(client):
    assert client.get(f"{API}/swaps/user/9999").status_code == 404
    assert client.get(f"{API}/swaps/user/abc").status_code == 404


def test_store_rejects_second_feedback_row(db, alice, bob, accepted_swap):
    with db.cursor() as cursor:
        cursor.execute(
            "INSERT INTO feedback (swap_request_id, giver_id, receiver_id, rating) "
            "VALUES (?, ?, ?, ?)",
            (accepted_swap["id"], alice["id"], bob["id"], 5),
        )
    with pytest.raises(sqlite3.IntegrityError):
        with db.cursor() as cursor:
            cursor.execute(
                "INSERT INTO feedback (swap_request_id, giver_id, receiver_id, rating) "
                "VALUES (?, ?, ?, ?)",
                (accepted_swap["id"], bob["id"], alice["id"], 4),
            )


def test_concurrent_duplicate_is_reported_as_already_submitted(
    client, db, alice, bob, accepted_swap, monkeypatch
):
    # Another submission lands between the existence check and the insert.
    with db.cursor() as cursor:
        cursor.execute(
            "INSERT INTO feedback (swap_request_id, giver_id, receiver_id, rating) "
            "VALUES (?, ?, ?, ?)",
            (accepted_swap["id"], bob["id"], alice["id"], 5),
        )
    monkeypatch.setattr(
        FeedbackService, "_already_rated", staticmethod(lambda cursor, swap_id: False)
    )

    resp = client.post(
        f"{API}/swaps/{accepted_swap['id']}/feedback", json={"rating": 4}, headers=alice["headers"]
    )
    assert resp.status_code == 400
    assert resp.json() == {"msg": "Feedback already submitted for this swap."}
    received = client.get(f"{API}/swaps/user/{alice['id']}").json()
    assert [f["rating"] for f in received] == [5]
