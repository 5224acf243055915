"""In-memory store for drafts that are still being written."""

from dataclasses import dataclass
from typing import Protocol

from omikuji_bot.domain.omikuji import Draft


class DraftStore(Protocol):
    """Holds at most one in-progress draft per Telegram user id."""

    def get(self, identity: int) -> Draft | None:
        """Return the draft for a user, if present."""

    def create(self, identity: int) -> Draft | None:
        """Create an empty draft, or return None if one already exists."""

    def delete(self, identity: int) -> None:
        """Drop the draft for a user; no-op when absent."""


@dataclass
class InMemoryDraftStore(DraftStore):
    """Process-local draft store.

    Drafts do not survive a restart and never expire. Callers serialize access
    per identity (see ``services.locks``).
    """

    _drafts: dict[int, Draft]

    def __init__(self) -> None:
        self._drafts = {}

    def get(self, identity: int) -> Draft | None:
        """Return the live draft object so steps can mutate it in place."""
        return self._drafts.get(identity)

    def create(self, identity: int) -> Draft | None:
        """Create a draft unless the user already has one."""
        if identity in self._drafts:
            return None
        draft = Draft()
        self._drafts[identity] = draft
        return draft

    def delete(self, identity: int) -> None:
        """Remove a user's draft if there is one."""
        self._drafts.pop(identity, None)

    def __len__(self) -> int:
        return len(self._drafts)
