"""Conversation state machine for writing a new omikuji slip."""

import logging
from dataclasses import dataclass

from omikuji_bot.actions import Action
from omikuji_bot.domain.messages import encode_draft
from omikuji_bot.domain.omikuji import (
    Draft,
    DraftSection,
    DraftStage,
    FortuneClass,
    SectionKind,
    parse_fortune_class,
    parse_section_kind,
    render_slip,
)
from omikuji_bot.services.drafts import DraftStore
from omikuji_bot.services.slips import SlipRepository, SlipStoreError

logger = logging.getLogger(__name__)

MALFORMED_REQUEST = "Malformed callback request."
INCOMPLETE_SLIP = "You have to have a complete omikuji slip before saving."


@dataclass(frozen=True)
class BotReply:
    """Represents the next user-facing message.

    ``buttons`` holds ``(label, callback token)`` pairs for the transport to
    render; ``photo`` is a Telegram file id to send before the text.
    """

    text: str
    buttons: list[tuple[str, str]] | None = None
    photo: str | None = None


@dataclass
class SubmissionService:
    """Guide a user from an empty draft to a stored slip.

    Steps: class, description, one or more sections, optional photo, commit.
    The stage is derived from what the draft already holds.
    """

    draft_store: DraftStore
    repository: SlipRepository

    def start_new(self, identity: int) -> BotReply:
        """Create an empty draft and offer the fortune classes."""
        if self.draft_store.create(identity) is None:
            return BotReply(
                text=(
                    "You have to complete your previous slip before creating a new "
                    "one. Send /cancel to drop it."
                )
            )
        return BotReply(text="Ok. Select a class from below!", buttons=class_buttons())

    def choose_class(self, identity: int, token: str | None) -> BotReply:
        """Set the fortune class of the draft once."""
        draft = self.draft_store.get(identity)
        if draft is None:
            return BotReply(
                text="You have to create a new omikuji slip before choosing a class."
            )
        if draft.fortune_class is not None:
            return BotReply(text="You have already set the class of this slip.")
        fortune_class = parse_fortune_class(token or "")
        if fortune_class is None:
            return BotReply(text=MALFORMED_REQUEST)
        draft.fortune_class = fortune_class
        return BotReply(text="Sure! Can you write a brief description for it?")

    def choose_section(self, identity: int, token: str | None) -> BotReply:
        """Open a new section once the previous one has its text."""
        draft = self.draft_store.get(identity)
        if draft is None:
            return BotReply(
                text="You have to create a new omikuji slip before adding a section."
            )
        if draft.fortune_class is None:
            return BotReply(
                text="You have to choose a class before creating a new section!"
            )
        if draft.description is None:
            return BotReply(
                text=(
                    "You have to enter a brief description before creating a new "
                    "section!"
                )
            )
        if draft.open_section is not None:
            return BotReply(
                text="You have to type the description for the previous section first."
            )
        kind = parse_section_kind(token or "")
        if kind is None:
            return BotReply(text=MALFORMED_REQUEST)
        draft.sections.append(DraftSection(kind=kind))
        draft.photo_requested = False
        return BotReply(
            text=f"OK. Type your description for section {kind.label} below!"
        )

    def handle_text(self, identity: int, text: str) -> BotReply | None:
        """Handle free text for the active draft.

        Returns None when the text does not belong to any step so the caller
        can answer with its default message.
        """
        draft = self.draft_store.get(identity)
        if draft is None:
            return None

        stage = draft.stage
        if stage is DraftStage.AWAITING_CLASS:
            return BotReply(
                text="Please select a class for your slip first.",
                buttons=class_buttons(),
            )
        if stage is DraftStage.AWAITING_DESCRIPTION:
            draft.description = text
            return BotReply(
                text="Nice. Now, select the first section below.",
                buttons=section_buttons(with_save=False),
            )
        if stage is DraftStage.AWAITING_SECTION_DESCRIPTION:
            section = draft.open_section
            if section is not None:
                section.text = text
            return BotReply(
                text="Sure. Do you want to add a new section or just save?",
                buttons=section_buttons(with_save=True),
            )
        if stage is DraftStage.AWAITING_SECTION_CHOICE and not draft.sections:
            return BotReply(
                text=(
                    "You will need to select a section type before entering any "
                    "description!"
                ),
                buttons=section_buttons(with_save=False),
            )
        return None

    def request_save(self, identity: int) -> BotReply:
        """Move a completed draft to the photo question."""
        draft = self.draft_store.get(identity)
        if draft is None or not draft.is_complete:
            return BotReply(text=INCOMPLETE_SLIP)
        draft.photo_requested = True
        return BotReply(
            text=(
                "Do you want to upload an image of your omikuji slip? "
                "Just send me a photo if you want to!"
            ),
            buttons=[("No, just save it!", Action.SKIP_PHOTO.token())],
        )

    def attach_photo(
        self, identity: int, author_name: str, photo: str | None
    ) -> BotReply | None:
        """Attach an uploaded photo and commit the slip.

        Returns None outside the photo step so the upload is treated as
        unrelated input.
        """
        draft = self.draft_store.get(identity)
        if draft is None or draft.stage is not DraftStage.AWAITING_PHOTO_DECISION:
            return None
        if not photo:
            return BotReply(text="Send me the photo as a picture message.")
        draft.photo = photo
        try:
            return self._commit(identity, author_name, draft)
        except SlipStoreError:
            draft.photo = None
            raise

    def skip_photo(self, identity: int, author_name: str) -> BotReply:
        """Commit a draft without a photo once "save" has been pressed."""
        draft = self.draft_store.get(identity)
        if draft is None or draft.stage is not DraftStage.AWAITING_PHOTO_DECISION:
            return BotReply(text=INCOMPLETE_SLIP)
        return self._commit(identity, author_name, draft)

    def cancel(self, identity: int) -> BotReply:
        """Drop the user's draft, whether or not there is one."""
        self.draft_store.delete(identity)
        return BotReply(
            text=(
                "Fine. I have deleted your work-in-progress omikuji. "
                "You can start a new one with /start!"
            )
        )

    def current(self, identity: int) -> BotReply:
        """Show what the user has written so far."""
        draft = self.draft_store.get(identity)
        if draft is None:
            return BotReply(
                text="You don't have an omikuji you are currently working on."
            )
        rendered = render_slip(draft.fortune_class, draft.description, draft.sections)
        return BotReply(
            text=f"This is what you are currently working on:\n\n{rendered}".rstrip()
        )

    def debug(self, identity: int) -> BotReply:
        """Dump the raw draft state."""
        draft = self.draft_store.get(identity)
        if draft is None:
            return BotReply(text="No omikuji slip stored.")
        return BotReply(text=f"{draft.stage.value}: {draft!r}")

    def _commit(self, identity: int, author_name: str, draft: Draft) -> BotReply:
        if not draft.is_complete:
            return BotReply(text=INCOMPLETE_SLIP)
        message = encode_draft(draft)
        slip_id = self.repository.create_slip(
            message=message,
            author_id=identity,
            author_name=author_name,
            photo=draft.photo,
        )
        self.draft_store.delete(identity)
        logger.info(
            "Slip saved",
            extra={
                "slip_id": slip_id,
                "author_id": identity,
                "has_photo": draft.photo is not None,
            },
        )
        return BotReply(
            text="Nice! Your omikuji slip has been saved into our database."
        )


def class_buttons() -> list[tuple[str, str]]:
    """Buttons for every fortune class, in grade order."""
    return [
        (fortune_class.label, Action.CHOOSE_CLASS.token(fortune_class.value))
        for fortune_class in FortuneClass
    ]


def section_buttons(with_save: bool) -> list[tuple[str, str]]:
    """Buttons for every section kind, plus "save" once a section is done."""
    buttons = [
        (kind.label, Action.CHOOSE_SECTION.token(kind.value)) for kind in SectionKind
    ]
    if with_save:
        buttons.append(("Just save what is done!", Action.SAVE.token()))
    return buttons
