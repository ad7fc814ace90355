import time
from typing import List, Optional

from .client import BlueskyClient
from .config import Settings
from .errors import AddError
from .models import FollowedProfile, RecordRef, Session
from .rate_limiter import RateLimiter
from .utils import create_progress_bar, print_progress, print_status, print_warning

PROFILE_LISTS_URL = "https://bsky.app/profile/{handle}/lists"


class BlueskyListManager:
    """Copies the accounts one user follows into a new curated list."""

    def __init__(self, client: Optional[BlueskyClient] = None,
                 settings: Optional[Settings] = None):
        """Initialize the manager."""
        self.settings = settings or (client.settings if client else Settings())
        # A client passed in belongs to the caller and is left open
        self._owns_client = client is None
        self.client = client or BlueskyClient(self.settings)
        self.rate_limiter = RateLimiter(member_delay=self.settings.member_delay_seconds)
        self.stats = {
            "total": 0,
            "added_to_list": 0,
            "failed": 0,
            "elapsed": 0,
        }

    async def __aenter__(self) -> "BlueskyListManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self):
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            await self.client.aclose()

    async def login(self, handle: str, app_key: str) -> Session:
        """Authenticate with a handle and app password. Raises AuthError."""
        print("Authenticating...")
        return await self.client.login(handle, app_key)

    async def fetch_follows(self, actor: str) -> List[FollowedProfile]:
        """Fetch every account `actor` follows. Raises FetchError."""
        print(f"Fetching follows for {actor}...")
        follows: List[FollowedProfile] = []
        async for page in self.client.iter_follow_pages(actor):
            follows.extend(page)
            print_progress(f"Fetched {len(follows)} follows...")
        print()
        self.stats["total"] = len(follows)
        return follows

    async def create_list(self, name: str, description: str = "") -> RecordRef:
        """Create the destination list. Raises CreateError."""
        print(f'Creating list "{name}"...')
        return await self.client.create_list(name, description)

    async def add_members(self, list_uri: str, follows: List[FollowedProfile]):
        """Add each profile to the list, skipping the ones that fail."""
        print("Adding members to list...")
        total = len(follows)
        for i, profile in enumerate(follows, start=1):
            try:
                await self.client.add_list_member(list_uri, profile.did)
                self.stats["added_to_list"] += 1
                print_progress(f"{create_progress_bar(i, total)} Added {i}/{total} members...")
            except AddError as e:
                print_warning(f"failed to add {profile.handle}: {e}")
                self.stats["failed"] += 1

            await self.rate_limiter.wait("add_list_member")
        print()

    async def copy_follows(self, actor: str, list_name: str,
                           description: str = "") -> Optional[RecordRef]:
        """Run the whole copy for an authenticated client.

        Returns the created list, or None when `actor` follows nobody.
        AuthError, FetchError and CreateError propagate to the caller.
        """
        started = time.monotonic()
        follows = await self.fetch_follows(actor)
        if not follows:
            print("No follows found for this user.")
            return None

        print(f"Found {len(follows)} follows")
        list_ref = await self.create_list(list_name, description)
        await self.add_members(list_ref.uri, follows)

        self.stats["elapsed"] = time.monotonic() - started
        print_status(self.stats)
        print(f'Done! List "{list_name}" created with {self.stats["added_to_list"]} members.')
        print(f"View at: {PROFILE_LISTS_URL.format(handle=self.client.session.handle)}")
        return list_ref
