"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from omikuji_bot.adapters.supabase_slip_repository import SupabaseSlipRepository
from omikuji_bot.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from omikuji_bot.config import Settings
from omikuji_bot.services.dispatcher import BotDispatcher
from omikuji_bot.services.draws import DrawService
from omikuji_bot.services.drafts import InMemoryDraftStore
from omikuji_bot.services.locks import IdentityLocks
from omikuji_bot.services.submissions import SubmissionService
from omikuji_bot.services.votes import VotingService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    submission_service: SubmissionService
    draw_service: DrawService
    voting_service: VotingService
    dispatcher: BotDispatcher
    identity_locks: IdentityLocks
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    slip_repository = SupabaseSlipRepository(
        supabase_client, table=resolved_settings.slips_table
    )
    submission_service = SubmissionService(
        draft_store=InMemoryDraftStore(),
        repository=slip_repository,
    )
    draw_service = DrawService(
        slip_repository, hide_threshold=resolved_settings.vote_hide_threshold
    )
    voting_service = VotingService(slip_repository)
    dispatcher = BotDispatcher(
        submission_service=submission_service,
        draw_service=draw_service,
        voting_service=voting_service,
        about_text=resolved_settings.about_text,
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        submission_service=submission_service,
        draw_service=draw_service,
        voting_service=voting_service,
        dispatcher=dispatcher,
        identity_locks=IdentityLocks(),
        close_resources=close_resources,
    )
