"""Tests for the chat routes."""

from datetime import datetime, timedelta
from uuid import uuid4

from tests.fixtures.user_fixtures import auth_headers


def test_requires_caller_identity(client):
    r = client.get("/chat", headers={"X-User-Id": ""})
    assert r.status_code == 401
    r = client.get("/chat", headers={"X-User-Id": "not-a-uuid"})
    assert r.status_code == 401
    r = client.get("/chat", headers={"X-User-Id": str(uuid4())})
    assert r.status_code == 401


def test_get_or_create_conversation(client, setup_user, setup_other_user):
    r = client.get(f"/chat/{setup_other_user.id}")
    assert r.status_code == 200
    data = r.json()
    assert set(data["participant_ids"]) == {str(setup_user.id), str(setup_other_user.id)}
    assert data["messages"] == []

    r2 = client.get(f"/chat/{setup_user.id}", headers=auth_headers(setup_other_user))
    assert r2.status_code == 200
    assert r2.json()["id"] == data["id"]


def test_get_or_create_with_unknown_user(client):
    r = client.get(f"/chat/{uuid4()}")
    assert r.status_code == 404


def test_get_or_create_with_self(client, setup_user):
    r = client.get(f"/chat/{setup_user.id}")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_send_message_and_list(client, setup_conversation, setup_other_user):
    r = client.post(
        f"/chat/{setup_conversation.id}/message", json={"message": "See you at 6"}
    )
    assert r.status_code == 201
    sent = r.json()
    assert sent["body"] == "See you at 6"
    created_at = datetime.fromisoformat(sent["created_at"].replace("Z", "+00:00"))
    assert created_at.utcoffset() == timedelta(0)

    r = client.get("/chat", headers=auth_headers(setup_other_user))
    assert r.status_code == 200
    conversations = r.json()
    assert len(conversations) == 1
    assert conversations[0]["last_message"] == "See you at 6"
    assert conversations[0]["last_message_at"] == sent["created_at"]


def test_send_blank_message_rejected(client, setup_conversation):
    r = client.post(f"/chat/{setup_conversation.id}/message", json={"message": "   "})
    assert r.status_code == 422


def test_send_message_as_outsider_forbidden(client, setup_conversation, setup_third_user):
    r = client.post(
        f"/chat/{setup_conversation.id}/message",
        json={"message": "hi"},
        headers=auth_headers(setup_third_user),
    )
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"


def test_send_message_to_missing_conversation(client):
    r = client.post(f"/chat/{uuid4()}/message", json={"message": "hi"})
    assert r.status_code == 404


def test_message_history_paginated(client, setup_conversation, setup_other_user):
    for i in range(3):
        client.post(f"/chat/{setup_conversation.id}/message", json={"message": f"m{i}"})

    r = client.get(
        f"/chat/{setup_conversation.id}/messages",
        params={"page": 1, "size": 2},
        headers=auth_headers(setup_other_user),
    )
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 3
    assert [m["body"] for m in data["items"]] == ["m0", "m1"]


def test_message_history_hidden_from_outsiders(
    client, setup_conversation, setup_third_user
):
    r = client.get(
        f"/chat/{setup_conversation.id}/messages",
        headers=auth_headers(setup_third_user),
    )
    assert r.status_code == 403
