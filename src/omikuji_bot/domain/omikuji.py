"""Domain models for omikuji slips and in-progress drafts."""

from dataclasses import dataclass, field
from enum import Enum


class FortuneClass(Enum):
    """Fortune grades, ordered from the greatest blessing to the greatest curse."""

    GREAT_BLESSING = "GreatBlessing"
    MIDDLE_BLESSING = "MiddleBlessing"
    SMALL_BLESSING = "SmallBlessing"
    BLESSING = "Blessing"
    HALF_BLESSING = "HalfBlessing"
    FUTURE_BLESSING = "FutureBlessing"
    FUTURE_SMALL_BLESSING = "FutureSmallBlessing"
    CURSE = "Curse"
    SMALL_CURSE = "SmallCurse"
    HALF_CURSE = "HalfCurse"
    FUTURE_CURSE = "FutureCurse"
    GREAT_CURSE = "GreatCurse"

    @property
    def label(self) -> str:
        """Human-readable name with the kanji used on real slips."""
        return _CLASS_LABELS[self]


class SectionKind(Enum):
    """Life-domain categories a slip section can talk about."""

    FORTUNE_DIRECTION = "FortuneDirection"
    DESIRE = "Desire"
    PERSON_WAITED_FOR = "PersonWaitedFor"
    LOST_ARTICLE = "LostArticle"
    TRAVEL = "Travel"
    BUSINESS = "Business"
    STUDY = "Study"
    DISPUTE = "Dispute"
    LOVE = "Love"
    ILLNESS = "Illness"
    OTHER = "Other"

    @property
    def label(self) -> str:
        """Human-readable section title."""
        return _SECTION_LABELS[self]


_CLASS_LABELS = {
    FortuneClass.GREAT_BLESSING: "Great blessing (大吉)",
    FortuneClass.MIDDLE_BLESSING: "Middle blessing (中吉)",
    FortuneClass.SMALL_BLESSING: "Small blessing (小吉)",
    FortuneClass.BLESSING: "Blessing (吉)",
    FortuneClass.HALF_BLESSING: "Half-blessing (半吉)",
    FortuneClass.FUTURE_BLESSING: "Future blessing (末吉)",
    FortuneClass.FUTURE_SMALL_BLESSING: "Future small blessing (末小吉)",
    FortuneClass.CURSE: "Curse (凶)",
    FortuneClass.SMALL_CURSE: "Small curse (小凶)",
    FortuneClass.HALF_CURSE: "Half-curse (半凶)",
    FortuneClass.FUTURE_CURSE: "Future curse (末凶)",
    FortuneClass.GREAT_CURSE: "Great curse (大凶)",
}

_SECTION_LABELS = {
    SectionKind.FORTUNE_DIRECTION: "Direction",
    SectionKind.DESIRE: "Wish",
    SectionKind.PERSON_WAITED_FOR: "Person waited for",
    SectionKind.LOST_ARTICLE: "Lost article",
    SectionKind.TRAVEL: "Travel",
    SectionKind.BUSINESS: "Business",
    SectionKind.STUDY: "Study",
    SectionKind.DISPUTE: "Dispute",
    SectionKind.LOVE: "Love",
    SectionKind.ILLNESS: "Illness",
    SectionKind.OTHER: "Other",
}


def parse_fortune_class(token: str) -> FortuneClass | None:
    """Map a wire token such as ``GreatBlessing`` to a fortune class."""
    try:
        return FortuneClass(token)
    except ValueError:
        return None


def parse_section_kind(token: str) -> SectionKind | None:
    """Map a wire token such as ``Travel`` to a section kind."""
    try:
        return SectionKind(token)
    except ValueError:
        return None


class DraftStage(Enum):
    """Steps of the slip authoring conversation."""

    AWAITING_CLASS = "AWAITING_CLASS"
    AWAITING_DESCRIPTION = "AWAITING_DESCRIPTION"
    AWAITING_SECTION_CHOICE = "AWAITING_SECTION_CHOICE"
    AWAITING_SECTION_DESCRIPTION = "AWAITING_SECTION_DESCRIPTION"
    AWAITING_PHOTO_DECISION = "AWAITING_PHOTO_DECISION"


@dataclass
class DraftSection:
    """A section of a slip; ``text`` stays empty until the author types it."""

    kind: SectionKind
    text: str = ""

    @property
    def is_open(self) -> bool:
        return self.text == ""


@dataclass
class Draft:
    """A slip that is still being written by its author."""

    fortune_class: FortuneClass | None = None
    description: str | None = None
    sections: list[DraftSection] = field(default_factory=list)
    photo: str | None = None
    photo_requested: bool = False

    @property
    def last_section(self) -> DraftSection | None:
        return self.sections[-1] if self.sections else None

    @property
    def open_section(self) -> DraftSection | None:
        """Return the last section while it is still waiting for its text."""
        last = self.last_section
        if last is not None and last.is_open:
            return last
        return None

    @property
    def is_complete(self) -> bool:
        """A draft can be saved once its last section has text."""
        last = self.last_section
        return (
            self.fortune_class is not None
            and self.description is not None
            and last is not None
            and not last.is_open
        )

    @property
    def stage(self) -> DraftStage:
        if self.fortune_class is None:
            return DraftStage.AWAITING_CLASS
        if self.description is None:
            return DraftStage.AWAITING_DESCRIPTION
        if self.photo_requested:
            return DraftStage.AWAITING_PHOTO_DECISION
        if self.open_section is not None:
            return DraftStage.AWAITING_SECTION_DESCRIPTION
        return DraftStage.AWAITING_SECTION_CHOICE


def render_slip(
    fortune_class: FortuneClass | None,
    description: str | None,
    sections: list[DraftSection],
) -> str:
    """Render slip contents as plain text for chat messages."""
    lines: list[str] = []
    if fortune_class is not None:
        lines.append(fortune_class.label)
    if description is not None:
        lines.append(description)
    if sections:
        lines.append("")
    for section in sections:
        lines.append(f"{section.kind.label}: {section.text}")
    return "\n".join(lines)
