"""In-memory cache for rendered certificate images.

One ImageCache is created per process with the app (see main) and
handed to the render path. Entries are keyed by participant id and are
never evicted or invalidated: a corrected name or date is not reflected in
the served PNG until the process restarts.

Note: Cache is per-worker/replica, not shared across instances.
"""

import math

from cachetools import Cache


class ImageCache:
    """Participant id -> PNG bytes, unbounded, process lifetime."""

    def __init__(self) -> None:
        self._entries: Cache[str, bytes] = Cache(maxsize=math.inf)

    def get(self, participant_id: str) -> bytes | None:
        return self._entries.get(participant_id)

    def set(self, participant_id: str, png: bytes) -> None:
        self._entries[participant_id] = png

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """For testing."""
        self._entries.clear()

    def stats(self) -> dict[str, int]:
        return {
            "current_size": len(self._entries),
            "total_bytes": sum(len(png) for png in self._entries.values()),
        }
