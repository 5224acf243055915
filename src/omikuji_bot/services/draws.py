"""Random selection of slips for drawing."""

import logging
import random
from dataclasses import dataclass, field

from omikuji_bot.domain.messages import SlipMessage, decode_message
from omikuji_bot.domain.slips import SlipRecord
from omikuji_bot.services.slips import SlipRepository

logger = logging.getLogger(__name__)

DEFAULT_HIDE_THRESHOLD = -3


@dataclass(frozen=True)
class DrawnSlip:
    """A slip picked for a user together with its decoded contents."""

    record: SlipRecord
    message: SlipMessage


@dataclass
class DrawService:
    """Pick one slip uniformly at random among those not voted down."""

    repository: SlipRepository
    hide_threshold: int = DEFAULT_HIDE_THRESHOLD
    rng: random.Random = field(default_factory=random.Random)

    def draw_random(self) -> DrawnSlip | None:
        """Return a random eligible slip, or None when there is none.

        Slips with a vote count at or below ``hide_threshold`` are skipped. The
        offset covers the whole ``[0, count)`` range so every eligible slip has
        probability ``1 / count``.
        """
        record = self.draw_record()
        if record is None:
            return None
        return self.decode(record)

    @staticmethod
    def decode(record: SlipRecord) -> DrawnSlip:
        """Decode a stored slip; raises ``pydantic.ValidationError``."""
        return DrawnSlip(record=record, message=decode_message(record.message))

    def draw_record(self) -> SlipRecord | None:
        """Return a random eligible slip row without decoding it."""
        count = self.repository.count_eligible(self.hide_threshold)
        if count <= 0:
            return None
        offset = self.rng.randrange(count)
        record = self.repository.get_eligible_at(self.hide_threshold, offset)
        if record is None:
            # Rows were voted out between the count and the fetch.
            logger.info("Eligible slip vanished during draw", extra={"offset": offset})
        return record
