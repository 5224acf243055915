"""Routing of user input to the submission, draw and voting services."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError

from omikuji_bot.actions import Action, parse_action
from omikuji_bot.domain.omikuji import render_slip
from omikuji_bot.services.draws import DrawService
from omikuji_bot.services.submissions import (
    MALFORMED_REQUEST,
    BotReply,
    SubmissionService,
)
from omikuji_bot.services.votes import VoteStatus, VotingService, parse_vote_payload
from omikuji_bot.telegram_commands import BotCommand, parse_command

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to use the Omikuji Bot!\nTo start, simply type /start"
DEFAULT_ABOUT_TEXT = "This is a bot used for storing and drawing omikuji slips."


@dataclass
class BotDispatcher:
    """Entry points the Telegram webhook calls for each update.

    Callers must serialize calls for the same identity.
    """

    submission_service: SubmissionService
    draw_service: DrawService
    voting_service: VotingService
    about_text: str = DEFAULT_ABOUT_TEXT

    def handle_text(self, identity: int, author_name: str, text: str) -> BotReply:
        """Handle a text message: commands first, then the active draft step."""
        if text.startswith("/"):
            command = parse_command(text)
            if command is None:
                return BotReply(text=f"Command {text} is not recognized.")
            return self._command_handlers()[command](identity)
        reply = self.submission_service.handle_text(identity, text)
        return reply or BotReply(text=WELCOME_TEXT)

    def handle_action(
        self,
        identity: int,
        author_name: str,
        token: str,
        payload: str | None = None,
    ) -> BotReply:
        """Handle an inline button press.

        ``payload`` carries out-of-band data such as the photo for
        ``attach-photo``; the token's own ``/`` suffix is its argument.
        """
        parsed = parse_action(token)
        if parsed is None:
            return BotReply(text=f"Callback query {token} is not recognized!")
        action, argument = parsed
        submissions = self.submission_service
        if action is Action.NEW:
            return submissions.start_new(identity)
        if action is Action.DRAW:
            return self.draw()
        if action is Action.CHOOSE_CLASS:
            return submissions.choose_class(identity, argument)
        if action is Action.CHOOSE_SECTION:
            return submissions.choose_section(identity, argument)
        if action is Action.SAVE:
            return submissions.request_save(identity)
        if action is Action.ATTACH_PHOTO:
            reply = submissions.attach_photo(identity, author_name, payload)
            return reply or BotReply(text=WELCOME_TEXT)
        if action is Action.SKIP_PHOTO:
            return submissions.skip_photo(identity, author_name)
        if action is Action.VOTE:
            return self.vote(argument or "")
        if action is Action.CANCEL:
            return submissions.cancel(identity)
        return BotReply(text=f"Callback query {token} is not recognized!")

    def handle_photo(self, identity: int, author_name: str, photo: str) -> BotReply:
        """Handle an uploaded photo; only the photo step accepts one."""
        reply = self.submission_service.attach_photo(identity, author_name, photo)
        return reply or BotReply(text=WELCOME_TEXT)

    def start(self, identity: int) -> BotReply:
        return BotReply(
            text="Welcome to use the Omikuji Bot! Pick what you want to do!",
            buttons=[
                ("Create new Omikuji", Action.NEW.token()),
                ("Draw an Omikuji slip", Action.DRAW.token()),
            ],
        )

    def about(self, identity: int) -> BotReply:
        return BotReply(text=self.about_text)

    def draw(self) -> BotReply:
        """Draw a random slip and offer vote buttons for it."""
        record = self.draw_service.draw_record()
        if record is None:
            return BotReply(text="Oops! Our omikuji library is empty.")
        try:
            drawn = self.draw_service.decode(record)
        except ValidationError:
            logger.exception("Stored slip is unreadable", extra={"slip_id": record.id})
            return BotReply(text="Sorry, the slip I drew could not be read.")
        message = drawn.message
        rendered = render_slip(
            message.fortune_class, message.description, message.draft_sections()
        )
        logger.info("Slip drawn", extra={"slip_id": record.id})
        return BotReply(
            text=f"You draw an omikuji slip:\n\n{rendered}",
            buttons=[
                ("This slip is well written", Action.VOTE.token(f"+{record.id}")),
                ("I feel insulted :(", Action.VOTE.token(f"-{record.id}")),
            ],
            photo=message.photo or record.photo,
        )

    def vote(self, payload: str) -> BotReply:
        """Apply a ``+<id>`` or ``-<id>`` vote."""
        request = parse_vote_payload(payload)
        if request is None:
            return BotReply(text=MALFORMED_REQUEST)
        result = self.voting_service.vote(request.slip_id, request.is_upvote)
        if result.status is VoteStatus.NOT_FOUND:
            return BotReply(text="Requested omikuji cannot be found.")
        verb = "upvoted" if result.is_upvote else "downvoted"
        return BotReply(text=f"Successfully {verb} the omikuji slip!")

    def _command_handlers(self) -> dict[BotCommand, Callable[[int], BotReply]]:
        submissions = self.submission_service
        return {
            BotCommand.START: self.start,
            BotCommand.CURRENT: submissions.current,
            BotCommand.CANCEL: submissions.cancel,
            BotCommand.ABOUT: self.about,
            BotCommand.DEBUG: submissions.debug,
        }
