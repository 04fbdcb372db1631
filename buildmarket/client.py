"""HTTP client for the marketplace API.

Keeps a small cache of GET responses keyed by path and query, and drops the
affected collections after every mutation, the way the web front end does.
"""
import logging

import httpx

logger = logging.getLogger(__name__)

# Collections whose cached pages go stale after a mutation on a path prefix
INVALIDATES = {
    "/api/tenders": ("/api/tenders", "/api/users/me/tenders", "/api/stats"),
    "/api/marketplace": ("/api/marketplace", "/api/users/me/marketplace", "/api/stats"),
    "/api/messages": ("/api/messages",),
    "/api/notifications": ("/api/notifications",),
    "/api/reviews": ("/api/users", "/api/specialists", "/api/crews"),
    "/api/specialists": ("/api/specialists",),
    "/api/crews": ("/api/crews",),
    "/api/users/me": ("/api/users",),
    "/api/admin": ("/api/admin", "/api/tenders", "/api/marketplace", "/api/specialists", "/api/crews", "/api/users"),
}


class ApiError(Exception):
    def __init__(self, status_code, detail):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class MarketplaceClient:
    def __init__(self, base_url="http://localhost:8000", token=None, http=None, timeout=10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token
        self.user = None
        self._cache = {}

    # ------- plumbing -------
    def _headers(self):
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @staticmethod
    def _raise_for_status(response):
        if response.status_code < 400:
            return
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = response.text
        raise ApiError(response.status_code, detail)

    @staticmethod
    def _flatten_params(params):
        # List filters travel as comma lists, e.g. required_professions=roofer,mason
        if not params:
            return None
        return {
            name: ",".join(str(item) for item in value) if isinstance(value, (list, tuple)) else value
            for name, value in params.items()
        }

    def _cache_key(self, path, params):
        return (path, tuple(sorted((params or {}).items())))

    def get(self, path, params=None, use_cache=True):
        params = self._flatten_params(params)
        key = self._cache_key(path, params)
        if use_cache and key in self._cache:
            return self._cache[key]
        response = self.http.get(path, params=params, headers=self._headers())
        self._raise_for_status(response)
        data = response.json()
        self._cache[key] = data
        return data

    def _mutate(self, method, path, json=None):
        response = self.http.request(method, path, json=json, headers=self._headers())
        self._raise_for_status(response)
        self.invalidate_for(path)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def post(self, path, json=None):
        return self._mutate("POST", path, json)

    def put(self, path, json=None):
        return self._mutate("PUT", path, json)

    def delete(self, path):
        return self._mutate("DELETE", path)

    def invalidate(self, *prefixes):
        stale = [key for key in self._cache if key[0].startswith(prefixes)]
        for key in stale:
            del self._cache[key]

    def invalidate_for(self, path):
        prefixes = []
        for mutated, affected in INVALIDATES.items():
            if path.startswith(mutated):
                prefixes.extend(affected)
        if prefixes:
            self.invalidate(*prefixes)

    def clear_cache(self):
        self._cache.clear()

    # ------- auth -------
    def _store_session(self, data):
        self.token = data["token"]
        self.user = data["user"]
        self.clear_cache()
        return self.user

    def register(self, username, email, password, **profile):
        payload = {"username": username, "email": email, "password": password, **profile}
        return self._store_session(self.post("/api/auth/register", payload))

    def login(self, username, password):
        return self._store_session(self.post("/api/auth/login", {"username": username, "password": password}))

    def logout(self):
        self.token = None
        self.user = None
        self.clear_cache()

    def me(self):
        return self.get("/api/users/me")

    # ------- tenders -------
    def list_tenders(self, **filters):
        return self.get("/api/tenders", params=filters or None)

    def get_tender(self, tender_id):
        # Detail fetches bump the view counter, so never serve them from cache
        return self.get(f"/api/tenders/{tender_id}", use_cache=False)

    def create_tender(self, **data):
        return self.post("/api/tenders", data)

    def list_bids(self, tender_id):
        return self.get(f"/api/tenders/{tender_id}/bids")

    def submit_bid(self, tender_id, amount, description, timeframe, documents):
        return self.post(f"/api/tenders/{tender_id}/bids", {
            "amount": amount,
            "description": description,
            "timeframe": timeframe,
            "documents": documents,
        })

    def approve_bid(self, bid_id):
        return self.post(f"/api/tenders/bids/{bid_id}/approve")

    def reject_bid(self, bid_id, reason=None):
        return self.post(f"/api/tenders/bids/{bid_id}/reject", {"reason": reason})

    # ------- marketplace -------
    def list_listings(self, **filters):
        return self.get("/api/marketplace", params=filters or None)

    def create_listing(self, **data):
        return self.post("/api/marketplace", data)

    # ------- notifications -------
    def notifications(self, unread_only=False):
        params = {"unread_only": "true"} if unread_only else None
        return self.get("/api/notifications", params=params, use_cache=False)

    def mark_notification_read(self, notification_id):
        return self.put(f"/api/notifications/{notification_id}/read")

    def mark_all_notifications_read(self):
        return self.put("/api/notifications/read-all")

    # ------- messages -------
    def conversation(self, user_id):
        return self.get(f"/api/messages/{user_id}")

    def send_message(self, receiver_id, content):
        return self.post("/api/messages", {"receiver_id": receiver_id, "content": content})

    def mark_conversation_read(self, user_id):
        """Mark unread messages from ``user_id`` as read.

        Only messages that are addressed to the current user and still unread
        are sent to the server, so reopening a read thread issues no writes.
        """
        if not self.user:
            return []
        marked = []
        for message in self.conversation(user_id):
            if message["receiver_id"] != self.user["id"] or message["is_read"]:
                continue
            marked.append(self.put(f"/api/messages/{message['id']}/read"))
        return marked

    # ------- uploads -------
    def upload_image(self, image_b64, filename):
        return self.post("/api/upload", {"image": image_b64, "filename": filename})["url"]
