import json

import httpx
import pytest
import pytest_asyncio

from bsky_list_manager.client import BlueskyClient
from bsky_list_manager.config import Settings

API_BASE = "https://bsky.test/xrpc"
MY_DID = "did:plc:me"
MY_HANDLE = "me.bsky.social"


def make_profiles(count, start=0):
    return [
        {"did": f"did:plc:user{i}", "handle": f"user{i}.bsky.social", "displayName": f"User {i}"}
        for i in range(start, start + count)
    ]


def paginate(profiles, page_size=100):
    """Split profiles into the pages a server returns for the given page size."""
    return [profiles[i:i + page_size] for i in range(0, len(profiles), page_size)] or [[]]


class FakeXrpc:
    """In-memory stand-in for the handful of XRPC endpoints the client uses."""

    def __init__(self):
        self.requests = []
        self.follow_pages = [[]]
        self.session_response = (200, {"accessJwt": "jwt-123", "did": MY_DID, "handle": MY_HANDLE})
        self.follows_error = None  # (page_index, status, body)
        self.list_response = None
        self.failing_subjects = set()
        self.items_created = []

    def requests_to(self, nsid):
        return [r for r in self.requests if r.url.path.endswith("/" + nsid)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        nsid = request.url.path.rsplit("/", 1)[-1]

        if nsid == "com.atproto.server.createSession":
            status, body = self.session_response
            return httpx.Response(status, json=body)

        if nsid == "app.bsky.graph.getFollows":
            cursor = request.url.params.get("cursor")
            index = int(cursor.split("-")[1]) if cursor else 0
            if self.follows_error and self.follows_error[0] == index:
                _, status, body = self.follows_error
                return httpx.Response(status, text=body)
            payload = {"follows": self.follow_pages[index]}
            if index + 1 < len(self.follow_pages):
                payload["cursor"] = f"page-{index + 1}"
            return httpx.Response(200, json=payload)

        if nsid == "com.atproto.repo.createRecord":
            body = json.loads(request.content)
            if body["collection"] == "app.bsky.graph.list":
                if self.list_response:
                    status, text = self.list_response
                    return httpx.Response(status, text=text)
                return httpx.Response(200, json={
                    "uri": f"at://{MY_DID}/app.bsky.graph.list/3kabc",
                    "cid": "bafylist",
                })
            subject = body["record"]["subject"]
            if subject in self.failing_subjects:
                return httpx.Response(400, json={"error": "InvalidRequest", "message": "Subject is blocked"})
            self.items_created.append(subject)
            return httpx.Response(200, json={
                "uri": f"at://{MY_DID}/app.bsky.graph.listitem/{len(self.items_created)}",
                "cid": "bafyitem",
            })

        return httpx.Response(404, json={"error": "MethodNotImplemented", "message": "Method Not Implemented"})


@pytest.fixture
def fake_api():
    """Provide a fresh fake XRPC server."""
    return FakeXrpc()


@pytest.fixture
def settings():
    return Settings(
        handle=MY_HANDLE,
        app_key="app-pass",
        api_base=API_BASE,
        member_delay_seconds=0,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def client(fake_api, settings):
    """Provide a client wired to the fake server, closed after the test."""
    client = BlueskyClient(settings, transport=httpx.MockTransport(fake_api.handler))
    yield client
    await client.aclose()
