import pytest

from buildmarket.client import ApiError, MarketplaceClient


class CountingTransport:
    """Wraps a TestClient and records every request method and path."""

    def __init__(self, http):
        self.http = http
        self.calls = []

    def get(self, path, **kwargs):
        self.calls.append(("GET", path))
        return self.http.get(path, **kwargs)

    def request(self, method, path, **kwargs):
        self.calls.append((method, path))
        return self.http.request(method, path, **kwargs)


def test_client_caches_and_invalidates(client, register, admin_headers, tender_payload):
    transport = CountingTransport(client)
    api = MarketplaceClient(http=transport)
    api.register("customer", "customer@example.com", "secret123")

    assert api.list_tenders() == []
    assert api.list_tenders() == []
    assert transport.calls.count(("GET", "/api/tenders")) == 1

    tender = api.create_tender(**tender_payload)
    client.post(f"/api/admin/moderation/tenders/{tender['id']}/approve", headers=admin_headers)

    # Creating a tender dropped the cached list
    assert [t["id"] for t in api.list_tenders()] == [tender["id"]]
    assert transport.calls.count(("GET", "/api/tenders")) == 2


def test_client_bid_flow_and_errors(client, register, admin_headers, tender_payload, bid_payload):
    customer = MarketplaceClient(http=client)
    contractor = MarketplaceClient(http=client)
    customer.register("customer", "customer@example.com", "secret123")
    contractor.register("contractor", "contractor@example.com", "secret123")

    tender = customer.create_tender(**tender_payload)
    client.post(f"/api/admin/moderation/tenders/{tender['id']}/approve", headers=admin_headers)

    with pytest.raises(ApiError) as excinfo:
        customer.submit_bid(tender["id"], **bid_payload)
    assert excinfo.value.status_code == 403

    bid = contractor.submit_bid(tender["id"], **bid_payload)
    rejected = customer.reject_bid(bid["id"], reason="Too expensive")
    assert rejected["status"] == "rejected"

    unread = contractor.notifications(unread_only=True)
    assert len(unread) == 1
    assert "Too expensive" in unread[0]["message"]


def test_client_marks_only_unread_incoming_messages(client):
    transport = CountingTransport(client)
    alice = MarketplaceClient(http=client)
    bob = MarketplaceClient(http=transport)
    alice.register("alice", "alice@example.com", "secret123")
    bob.register("bob", "bob@example.com", "secret123")

    alice.send_message(bob.user["id"], "First")
    alice.send_message(bob.user["id"], "Second")
    bob.send_message(alice.user["id"], "Reply")

    marked = bob.mark_conversation_read(alice.user["id"])
    assert len(marked) == 2
    assert all(m["is_read"] for m in marked)

    # Re-opening the thread sends no further writes
    writes_before = [c for c in transport.calls if c[0] == "PUT"]
    assert bob.mark_conversation_read(alice.user["id"]) == []
    writes_after = [c for c in transport.calls if c[0] == "PUT"]
    assert writes_after == writes_before


def test_client_login_and_logout(client, register):
    register("builder", password="secret123")
    api = MarketplaceClient(http=client)
    user = api.login("builder", "secret123")
    assert user["username"] == "builder"
    assert api.me()["username"] == "builder"

    api.logout()
    with pytest.raises(ApiError) as excinfo:
        api.me()
    assert excinfo.value.status_code == 401


def test_client_list_filters_are_cached(client, register, approved_tender):
    _, headers = register("customer")
    roof = approved_tender(headers)
    approved_tender(headers, required_professions=["mason"], title="Brick fence along the plot")

    transport = CountingTransport(client)
    api = MarketplaceClient(http=transport)

    found = api.list_tenders(required_professions=["roofer"])
    assert [t["id"] for t in found] == [roof["id"]]
    assert api.list_tenders(required_professions=["roofer"]) == found
    assert len([c for c in transport.calls if c == ("GET", "/api/tenders")]) == 1
    assert len(api.list_tenders(required_professions=["roofer", "mason"])) == 2
