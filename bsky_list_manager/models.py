from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LIST_COLLECTION = "app.bsky.graph.list"
LIST_ITEM_COLLECTION = "app.bsky.graph.listitem"
CURATE_LIST_PURPOSE = "app.bsky.graph.defs#curatelist"


@dataclass
class Session:
    access_jwt: str
    did: str
    handle: str


@dataclass
class FollowedProfile:
    did: str
    handle: str
    display_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FollowedProfile":
        """Build a profile from an `app.bsky.actor.defs#profileView` object."""
        return cls(
            did=data["did"],
            handle=data.get("handle", ""),
            display_name=data.get("displayName") or "",
        )


@dataclass
class RecordRef:
    """Locator and content hash the server assigns to a created record."""
    uri: str
    cid: str


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a UTC time as RFC 3339 with a `Z` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def list_record(name: str, description: str = "") -> Dict[str, Any]:
    return {
        "$type": LIST_COLLECTION,
        "purpose": CURATE_LIST_PURPOSE,
        "name": name,
        "description": description,
        "createdAt": utc_timestamp(),
    }


def list_item_record(list_uri: str, subject_did: str) -> Dict[str, Any]:
    return {
        "$type": LIST_ITEM_COLLECTION,
        "subject": subject_did,
        "list": list_uri,
        "createdAt": utc_timestamp(),
    }
