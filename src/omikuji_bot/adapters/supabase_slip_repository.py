"""Supabase-backed slip repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from omikuji_bot.domain.slips import SlipRecord
from omikuji_bot.services.slips import SlipRepository, SlipStoreError

_COLUMNS = "id, photo, message, vote_count, tg_id, tg_name, created_at, updated_at"


@dataclass
class SupabaseSlipRepository(SlipRepository):
    """Supabase implementation for slip persistence."""

    client: Client
    table: str = "omikujis"

    def create_slip(
        self,
        message: str,
        author_id: int,
        author_name: str,
        photo: str | None = None,
    ) -> int:
        """Insert a slip row with a zero vote count and return its id."""
        response = _execute(
            self.client.table(self.table).insert(
                {
                    "message": message,
                    "photo": photo,
                    "vote_count": 0,
                    "tg_id": author_id,
                    "tg_name": author_name,
                }
            ),
            "Failed to create slip",
        )
        if not response.data:
            raise SlipStoreError("Failed to create slip")
        return int(response.data[0]["id"])

    def get_slip(self, slip_id: int) -> SlipRecord | None:
        """Return a slip by id, if present."""
        response = _execute(
            self.client.table(self.table)
            .select(_COLUMNS)
            .eq("id", slip_id)
            .limit(1),
            f"Failed to load slip {slip_id}",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def count_eligible(self, threshold: int) -> int:
        """Count slips with a vote count above the threshold."""
        response = _execute(
            self.client.table(self.table)
            .select("id", count="exact")
            .gt("vote_count", threshold),
            "Failed to count slips",
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def get_eligible_at(self, threshold: int, offset: int) -> SlipRecord | None:
        """Return the eligible slip at an offset, ordered by id."""
        response = _execute(
            self.client.table(self.table)
            .select(_COLUMNS)
            .gt("vote_count", threshold)
            .order("id", desc=False)
            .range(offset, offset),
            f"Failed to load slip at offset {offset}",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def adjust_score(self, slip_id: int, delta: int) -> int:
        """Read the vote count, then write it back with ``delta`` applied.

        Not atomic: concurrent votes on the same slip may overwrite each other.
        """
        response = _execute(
            self.client.table(self.table)
            .select("vote_count")
            .eq("id", slip_id)
            .limit(1),
            f"Failed to load vote count for slip {slip_id}",
        )
        if not response.data:
            raise SlipStoreError(f"Slip {slip_id} disappeared while voting")
        vote_count = int(response.data[0].get("vote_count") or 0) + delta
        _execute(
            self.client.table(self.table)
            .update(
                {
                    "vote_count": vote_count,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", slip_id),
            f"Failed to update vote count for slip {slip_id}",
        )
        return vote_count


def _execute(query, failure: str):  # type: ignore[no-untyped-def]
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        raise SlipStoreError(failure) from exc


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.min.replace(tzinfo=UTC)


def _parse_row(row: dict[str, object]) -> SlipRecord:
    photo = row.get("photo")
    return SlipRecord(
        id=int(row["id"]),
        photo=str(photo) if photo else None,
        message=str(row.get("message", "")),
        vote_count=int(row.get("vote_count") or 0),
        author_id=int(row.get("tg_id") or 0),
        author_name=str(row.get("tg_name", "")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
