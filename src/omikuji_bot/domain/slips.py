"""Domain models for stored slips."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SlipRecord:
    """Represents a committed slip stored in the database."""

    id: int
    photo: str | None
    message: str
    vote_count: int
    author_id: int
    author_name: str
    created_at: datetime
    updated_at: datetime
