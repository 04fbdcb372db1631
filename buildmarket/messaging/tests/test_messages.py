def test_send_and_read_conversation(client, register):
    alice, alice_headers = register("alice")
    bob, bob_headers = register("bob")

    first = client.post("/api/messages", json={"receiver_id": bob["id"], "content": "Hi Bob"}, headers=alice_headers)
    assert first.status_code == 201
    client.post("/api/messages", json={"receiver_id": alice["id"], "content": "Hi Alice"}, headers=bob_headers)
    client.post("/api/messages", json={"receiver_id": bob["id"], "content": "When can you start?"}, headers=alice_headers)

    thread = client.get(f"/api/messages/{alice['id']}", headers=bob_headers).json()
    assert [m["content"] for m in thread] == ["Hi Bob", "Hi Alice", "When can you start?"]

    assert client.get("/api/messages/unread-count", headers=bob_headers).json() == {"count": 2}
    assert client.get("/api/messages/unread-count", headers=alice_headers).json() == {"count": 1}


def test_cannot_message_self_or_unknown_user(client, register):
    alice, headers = register("alice")
    response = client.post("/api/messages", json={"receiver_id": alice["id"], "content": "me"}, headers=headers)
    assert response.status_code == 400
    response = client.post("/api/messages", json={"receiver_id": 999, "content": "ghost"}, headers=headers)
    assert response.status_code == 404
    response = client.post("/api/messages", json={"receiver_id": 999, "content": ""}, headers=headers)
    assert response.status_code == 400


def test_mark_message_read_is_receiver_only_and_idempotent(client, register):
    _, alice_headers = register("alice")
    bob, bob_headers = register("bob")
    message = client.post(
        "/api/messages", json={"receiver_id": bob["id"], "content": "Hello"}, headers=alice_headers
    ).json()

    assert client.put(f"/api/messages/{message['id']}/read", headers=alice_headers).status_code == 403

    for _ in range(2):
        response = client.put(f"/api/messages/{message['id']}/read", headers=bob_headers)
        assert response.status_code == 200
        assert response.json()["is_read"] is True

    assert client.put("/api/messages/999/read", headers=bob_headers).status_code == 404
    assert client.get("/api/messages/unread-count", headers=bob_headers).json() == {"count": 0}


def test_mark_thread_read(client, register):
    alice, alice_headers = register("alice")
    bob, bob_headers = register("bob")
    for text in ("one", "two"):
        client.post("/api/messages", json={"receiver_id": bob["id"], "content": text}, headers=alice_headers)

    response = client.put(f"/api/messages/{alice['id']}/read-all", headers=bob_headers)
    assert response.json()["updated"] == 2
    assert client.get("/api/messages/unread-count", headers=bob_headers).json() == {"count": 0}


def test_conversations_list_latest_message(client, register):
    alice, alice_headers = register("alice")
    bob, bob_headers = register("bob")
    carol, carol_headers = register("carol")
    client.post("/api/messages", json={"receiver_id": alice["id"], "content": "from bob"}, headers=bob_headers)
    client.post("/api/messages", json={"receiver_id": alice["id"], "content": "from carol"}, headers=carol_headers)
    client.post("/api/messages", json={"receiver_id": bob["id"], "content": "reply to bob"}, headers=alice_headers)

    conversations = client.get("/api/messages/conversations", headers=alice_headers).json()
    by_user = {c["user"]["username"]: c for c in conversations}
    assert set(by_user) == {"bob", "carol"}
    assert by_user["bob"]["last_message"]["content"] == "reply to bob"
    assert by_user["bob"]["unread_count"] == 1
    assert by_user["carol"]["unread_count"] == 1

    mine = client.get("/api/messages", headers=alice_headers).json()
    assert len(mine) == 3
