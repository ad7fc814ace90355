import asyncio
from dataclasses import dataclass
from typing import Dict


@dataclass
class Cooldown:
    delay: float  # in seconds
    waits: int = 0


class RateLimiter:
    """Fixed pauses between write requests to the Bluesky API.

    The delay is unconditional and does not look at response headers.
    """

    def __init__(self, member_delay: float = 0.05):
        self.cooldowns: Dict[str, Cooldown] = {
            'add_list_member': Cooldown(delay=member_delay),
        }

    async def wait(self, operation: str):
        """Sleep for the cooldown configured for `operation`, if any."""
        cooldown = self.cooldowns.get(operation)
        if cooldown is None:
            return
        cooldown.waits += 1
        if cooldown.delay > 0:
            await asyncio.sleep(cooldown.delay)
