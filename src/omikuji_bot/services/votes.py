"""Up/down-voting of drawn slips."""

import logging
from dataclasses import dataclass
from enum import Enum

from omikuji_bot.services.slips import SlipRepository

logger = logging.getLogger(__name__)

# Slip ids are Postgres bigints.
MAX_SLIP_ID = 2**63 - 1


class VoteStatus(Enum):
    """Outcome of a vote request."""

    APPLIED = "APPLIED"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class VoteResult:
    """Result of applying a vote."""

    status: VoteStatus
    slip_id: int
    is_upvote: bool
    vote_count: int | None = None


@dataclass(frozen=True)
class VoteRequest:
    """Parsed ``<+|-><id>`` vote payload."""

    slip_id: int
    is_upvote: bool


def parse_vote_payload(payload: str) -> VoteRequest | None:
    """Parse payloads such as ``+7`` or ``-12``."""
    if len(payload) < 2 or payload[0] not in {"+", "-"}:  # noqa: PLR2004
        return None
    raw_id = payload[1:]
    if not raw_id.isascii() or not raw_id.isdigit():
        return None
    return VoteRequest(slip_id=int(raw_id), is_upvote=payload[0] == "+")


@dataclass
class VotingService:
    """Apply a +1/-1 adjustment to a slip's vote count.

    The count is unbounded in both directions; only drawing looks at the
    hide threshold.
    """

    repository: SlipRepository

    def vote(self, slip_id: int, is_upvote: bool) -> VoteResult:
        """Vote on a slip, reporting NOT_FOUND for unknown ids."""
        if slip_id > MAX_SLIP_ID or self.repository.get_slip(slip_id) is None:
            return VoteResult(
                status=VoteStatus.NOT_FOUND, slip_id=slip_id, is_upvote=is_upvote
            )
        vote_count = self.repository.adjust_score(slip_id, 1 if is_upvote else -1)
        logger.info(
            "Slip voted",
            extra={"slip_id": slip_id, "upvote": is_upvote, "vote_count": vote_count},
        )
        return VoteResult(
            status=VoteStatus.APPLIED,
            slip_id=slip_id,
            is_upvote=is_upvote,
            vote_count=vote_count,
        )
