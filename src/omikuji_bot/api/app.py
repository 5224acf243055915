"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool

from omikuji_bot.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from omikuji_bot.app_logging import configure_logging
from omikuji_bot.containers import AppContainer
from omikuji_bot.services.slips import SlipStoreError
from omikuji_bot.services.submissions import BotReply
from omikuji_bot.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

BUTTONS_PER_ROW = 2


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        try:
            if update.callback_query:
                await _handle_callback(state_container, update.callback_query)
            elif update.message:
                await _handle_message(state_container, update.message)
        except httpx.HTTPError:
            logger.exception(
                "Failed to deliver Telegram reply",
                extra={"update_id": update.update_id},
            )
        return {"status": "ok"}

    async def _handle_callback(
        state_container: AppContainer, callback: TelegramCallbackQuery
    ) -> None:
        client = state_container.telegram_client
        user = callback.from_user
        chat_id = callback.message.chat.id if callback.message else user.id
        await client.answer_callback_query(callback.id)
        if not callback.data:
            await client.send_message(
                chat_id=chat_id,
                text="Callback query has empty body - probably your client is lousy!",
            )
            return
        if callback.message:
            # Drop the pressed keyboard so the same button cannot be used twice.
            try:
                await client.edit_message_reply_markup(
                    chat_id=chat_id, message_id=callback.message.message_id
                )
            except httpx.HTTPError as exc:
                logger.warning("Failed to remove inline keyboard: %s", exc)
        async with state_container.identity_locks.hold(user.id):
            try:
                reply = await run_in_threadpool(
                    state_container.dispatcher.handle_action,
                    user.id,
                    user.display_name,
                    callback.data,
                )
            except SlipStoreError as exc:
                logger.exception("Slip store failure", extra={"user_id": user.id})
                reply = BotReply(text=_format_store_error(state_container, exc))
        await _send_reply(state_container, chat_id, reply)

    async def _handle_message(
        state_container: AppContainer, message: TelegramMessage
    ) -> None:
        user = message.from_user
        if user is None:
            return
        dispatcher = state_container.dispatcher
        async with state_container.identity_locks.hold(user.id):
            try:
                if message.text:
                    reply = await run_in_threadpool(
                        dispatcher.handle_text, user.id, user.display_name, message.text
                    )
                elif message.photo:
                    photo = _select_largest_photo(message.photo)
                    reply = await run_in_threadpool(
                        dispatcher.handle_photo,
                        user.id,
                        user.display_name,
                        photo.file_id,
                    )
                elif message.photo is not None:
                    reply = BotReply(text="Malformed image")
                else:
                    reply = BotReply(
                        text="Sorry, this kind of message is yet to be supported."
                    )
            except SlipStoreError as exc:
                logger.exception("Slip store failure", extra={"user_id": user.id})
                reply = BotReply(text=_format_store_error(state_container, exc))
        await _send_reply(state_container, message.chat.id, reply)

    return app


async def _send_reply(
    state_container: AppContainer, chat_id: int, reply: BotReply
) -> None:
    """Deliver a reply: optional photo first, then the text and buttons."""
    client = state_container.telegram_client
    if reply.photo:
        await client.send_photo(chat_id=chat_id, photo=reply.photo)
    await client.send_message(
        chat_id=chat_id,
        text=reply.text,
        reply_markup=_inline_keyboard(reply.buttons),
    )


def _inline_keyboard(buttons: list[tuple[str, str]] | None) -> dict | None:
    """Build a Telegram inline keyboard payload, two buttons per row."""
    if not buttons:
        return None
    rows = [
        [
            {"text": label, "callback_data": callback}
            for label, callback in buttons[index : index + BUTTONS_PER_ROW]
        ]
        for index in range(0, len(buttons), BUTTONS_PER_ROW)
    ]
    return {"inline_keyboard": rows}


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _format_store_error(state_container: AppContainer, exc: Exception) -> str:
    """Return a user-facing store error message with local debug info."""
    fallback = "Sorry, I couldn't reach the omikuji library. Please try again."
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
