import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from .config import Settings
from .errors import APIError, AddError, AuthError, BlueskyError, CreateError, FetchError
from .models import (
    LIST_COLLECTION, LIST_ITEM_COLLECTION,
    FollowedProfile, RecordRef, Session,
    list_item_record, list_record,
)

logger = logging.getLogger(__name__)

USER_AGENT = "bsky-list-copy/0.1.0"


class BlueskyClient:
    """Thin async client for the handful of XRPC calls the list copier needs."""

    def __init__(self, settings: Optional[Settings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.session: Optional[Session] = None
        self._http = httpx.AsyncClient(
            base_url=self.settings.api_base,
            timeout=httpx.Timeout(self.settings.http_timeout_seconds),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    async def __aenter__(self) -> "BlueskyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    @property
    def did(self) -> Optional[str]:
        return self.session.did if self.session else None

    async def _request(self, method: str, endpoint: str, *,
                       params: Optional[Dict[str, Any]] = None,
                       body: Optional[Dict[str, Any]] = None,
                       authenticated: bool = False) -> Dict[str, Any]:
        """Send one XRPC request and return the decoded JSON body.

        Raises APIError for transport failures, HTTP statuses >= 400 and
        bodies that are not a JSON object. Nothing is retried.
        """
        headers = {}
        if authenticated and self.session:
            headers["Authorization"] = f"Bearer {self.session.access_jwt}"

        logger.debug(f"{method} {endpoint} params={params}")
        try:
            response = await self._http.request(
                method, endpoint, params=params, json=body, headers=headers
            )
        except httpx.HTTPError as e:
            raise APIError(f"request failed: {e}") from e

        text = response.text
        if response.status_code >= 400:
            error_code = None
            message = None
            try:
                envelope = json.loads(text)
            except ValueError:
                envelope = None
            if isinstance(envelope, dict):
                error_code = envelope.get("error")
                message = envelope.get("message")
            logger.debug(f"{method} {endpoint} -> {response.status_code}: {text[:200]}")
            raise APIError(
                f"API error ({response.status_code}): {message or text}",
                status_code=response.status_code,
                error=error_code,
            )

        if not text:
            return {}
        try:
            data = json.loads(text)
        except ValueError as e:
            raise APIError(f"invalid JSON response: {e}",
                           status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise APIError("unexpected response shape", status_code=response.status_code)
        return data

    def _require_session(self, operation: str) -> Session:
        if self.session is None:
            raise AuthError(f"{operation}: not authenticated, call login() first")
        return self.session

    async def login(self, identifier: str, password: str) -> Session:
        """Exchange a handle and app password for a session."""
        self.session = None
        try:
            data = await self._request(
                "POST", "com.atproto.server.createSession",
                body={"identifier": identifier, "password": password},
            )
        except BlueskyError as e:
            raise AuthError.wrap("create session", e) from e

        try:
            session = Session(
                access_jwt=data["accessJwt"],
                did=data["did"],
                handle=data.get("handle", identifier),
            )
        except KeyError as e:
            raise AuthError(f"parse session response: missing {e}") from e

        self.session = session
        logger.debug(f"Authenticated as {session.handle} ({session.did})")
        return session

    async def iter_follow_pages(self, actor: str) -> AsyncIterator[List[FollowedProfile]]:
        """Yield each page of accounts `actor` follows, in server order."""
        self._require_session("get follows")
        cursor = None
        while True:
            params: Dict[str, Any] = {"actor": actor, "limit": self.settings.page_size}
            if cursor:
                params["cursor"] = cursor

            try:
                data = await self._request(
                    "GET", "app.bsky.graph.getFollows", params=params, authenticated=True
                )
            except BlueskyError as e:
                raise FetchError.wrap("get follows", e) from e

            try:
                page = [FollowedProfile.from_api(item) for item in data.get("follows") or []]
            except (KeyError, TypeError, AttributeError) as e:
                raise FetchError(f"parse follows response: {e!r}") from e

            yield page

            cursor = data.get("cursor")
            if not cursor:
                break

    async def get_follows(self, actor: str) -> List[FollowedProfile]:
        """Collect every account `actor` follows."""
        follows: List[FollowedProfile] = []
        async for page in self.iter_follow_pages(actor):
            follows.extend(page)
        return follows

    async def _create_record(self, collection: str, record: Dict[str, Any]) -> RecordRef:
        session = self._require_session(f"create {collection} record")
        data = await self._request(
            "POST", "com.atproto.repo.createRecord",
            body={"repo": session.did, "collection": collection, "record": record},
            authenticated=True,
        )
        try:
            return RecordRef(uri=data["uri"], cid=data["cid"])
        except KeyError as e:
            raise APIError(f"parse create record response: missing {e}") from e

    async def create_list(self, name: str, description: str = "") -> RecordRef:
        """Create a curated list on the authenticated account."""
        try:
            return await self._create_record(LIST_COLLECTION, list_record(name, description))
        except AuthError:
            raise
        except BlueskyError as e:
            raise CreateError.wrap("create list", e) from e

    async def add_list_member(self, list_uri: str, subject_did: str) -> RecordRef:
        """Add one account to a list. Each call is an independent request."""
        try:
            return await self._create_record(
                LIST_ITEM_COLLECTION, list_item_record(list_uri, subject_did)
            )
        except AuthError:
            raise
        except BlueskyError as e:
            raise AddError.wrap("add list item", e) from e
