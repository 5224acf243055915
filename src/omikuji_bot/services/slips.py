"""Persistence interface for committed slips."""

from typing import Protocol

from omikuji_bot.domain.slips import SlipRecord


class SlipStoreError(RuntimeError):
    """Raised when the slip store cannot be reached or rejects a write."""


class SlipRepository(Protocol):
    """Persistence interface for slips and their vote counts."""

    def create_slip(
        self,
        message: str,
        author_id: int,
        author_name: str,
        photo: str | None = None,
    ) -> int:
        """Store a new slip with a zero vote count and return its id."""

    def get_slip(self, slip_id: int) -> SlipRecord | None:
        """Return a slip by id, if present."""

    def count_eligible(self, threshold: int) -> int:
        """Count slips whose vote count is above ``threshold``."""

    def get_eligible_at(self, threshold: int, offset: int) -> SlipRecord | None:
        """Return the eligible slip at ``offset`` when ordered by ascending id."""

    def adjust_score(self, slip_id: int, delta: int) -> int:
        """Add ``delta`` to a slip's vote count and return the new value."""
