"""Inline button actions understood by the bot."""

from enum import Enum


class Action(Enum):
    """Enum of callback actions (single source of truth for button tokens)."""

    NEW = "new"
    DRAW = "draw"
    CHOOSE_CLASS = "choose-class"
    CHOOSE_SECTION = "choose-section"
    SAVE = "save"
    ATTACH_PHOTO = "attach-photo"
    SKIP_PHOTO = "skip-photo"
    VOTE = "vote"
    CANCEL = "cancel"

    def token(self, payload: str | None = None) -> str:
        """Build callback data such as ``choose-class/GreatBlessing``."""
        if payload is None:
            return self.value
        return f"{self.value}/{payload}"


def parse_action(data: str) -> tuple[Action, str | None] | None:
    """Split callback data into an action and its optional payload."""
    name, separator, payload = data.partition("/")
    try:
        action = Action(name)
    except ValueError:
        return None
    return action, (payload if separator else None)
