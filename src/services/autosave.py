"""
Autosave guard - advisory mutual exclusion with the reconciler.

While the reconciler drains scratch it holds the guard; writers that save
straight into the permanent cortex/corcode collections are expected to check
it (or try to acquire it) first. Nothing enforces this: a writer that ignores
the guard can still race the reconciler's read-modify-write of an archive.

All access happens on the event loop thread, so holder checks and updates
need no further locking.
"""

import asyncio
from datetime import datetime
from typing import Any

from src.utils.logger import get_logger

logger = get_logger(__name__)


class AutosaveGuard:
    """Advisory busy flag with an owner."""

    def __init__(self):
        self._holder: str | None = None
        self._acquired_at: datetime | None = None

    @property
    def in_progress(self) -> bool:
        """True while someone holds the guard."""
        return self._holder is not None

    @property
    def holder(self) -> str | None:
        return self._holder

    def try_acquire(self, owner: str) -> bool:
        """
        Take the guard if it is free (or already ours).

        Args:
            owner: Name of the acquiring party

        Returns:
            True if owner now holds the guard
        """
        if self._holder is not None and self._holder != owner:
            return False
        if self._holder is None:
            self._acquired_at = datetime.now()
        self._holder = owner
        return True

    async def acquire(self, owner: str, poll_interval: float = 0.5) -> None:
        """Wait until the guard can be taken."""
        while not self.try_acquire(owner):
            logger.debug(f"{owner} waiting for autosave guard held by {self._holder}")
            await asyncio.sleep(poll_interval)

    def release(self, owner: str) -> bool:
        """
        Give the guard back.

        Returns:
            False if owner wasn't the holder (nothing changes)
        """
        if self._holder is None:
            return True
        if self._holder != owner:
            logger.warning(
                f"{owner} tried to release autosave guard held by {self._holder}",
                extra={"owner": owner, "holder": self._holder},
            )
            return False
        self._holder = None
        self._acquired_at = None
        return True

    def force_release(self) -> None:
        """Clear the guard regardless of holder."""
        self._holder = None
        self._acquired_at = None

    def status(self) -> dict[str, Any]:
        return {
            "in_progress": self.in_progress,
            "holder": self._holder,
            "acquired_at": self._acquired_at.isoformat() if self._acquired_at else None,
        }


# Process-wide guard shared by the reconciler and direct writers
autosave_guard = AutosaveGuard()
