"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from omikuji_bot.adapters.telegram_client import TelegramClient
from omikuji_bot.config import Settings
from omikuji_bot.containers import AppContainer
from omikuji_bot.domain.slips import SlipRecord
from omikuji_bot.services.dispatcher import BotDispatcher
from omikuji_bot.services.drafts import InMemoryDraftStore
from omikuji_bot.services.draws import DrawService
from omikuji_bot.services.locks import IdentityLocks
from omikuji_bot.services.slips import SlipRepository, SlipStoreError
from omikuji_bot.services.submissions import SubmissionService
from omikuji_bot.services.votes import VotingService

SAMPLE_MESSAGE = (
    '{"version":1,"class":"Blessing","description":"calm days",'
    '"sections":[{"kind":"Love","text":"be patient"}],"photo":null}'
)


@dataclass
class InMemorySlipRepository(SlipRepository):
    """In-memory slip repository for tests."""

    slips: dict[int, SlipRecord] = field(default_factory=dict)
    next_id: int = 1
    unreachable: bool = False

    def create_slip(
        self,
        message: str,
        author_id: int,
        author_name: str,
        photo: str | None = None,
    ) -> int:
        if self.unreachable:
            raise SlipStoreError("store unreachable")
        now = datetime.now(tz=UTC)
        slip = SlipRecord(
            id=self.next_id,
            photo=photo,
            message=message,
            vote_count=0,
            author_id=author_id,
            author_name=author_name,
            created_at=now,
            updated_at=now,
        )
        self.slips[slip.id] = slip
        self.next_id += 1
        return slip.id

    def add_slip(self, vote_count: int = 0, message: str = SAMPLE_MESSAGE) -> int:
        slip_id = self.create_slip(message, author_id=1, author_name="Tester")
        self.slips[slip_id] = replace(self.slips[slip_id], vote_count=vote_count)
        return slip_id

    def get_slip(self, slip_id: int) -> SlipRecord | None:
        if self.unreachable:
            raise SlipStoreError("store unreachable")
        return self.slips.get(slip_id)

    def count_eligible(self, threshold: int) -> int:
        return len(self._eligible(threshold))

    def get_eligible_at(self, threshold: int, offset: int) -> SlipRecord | None:
        eligible = self._eligible(threshold)
        if 0 <= offset < len(eligible):
            return eligible[offset]
        return None

    def adjust_score(self, slip_id: int, delta: int) -> int:
        current = self.slips[slip_id]
        updated = replace(
            current,
            vote_count=current.vote_count + delta,
            updated_at=datetime.now(tz=UTC),
        )
        self.slips[slip_id] = updated
        return updated.vote_count

    def _eligible(self, threshold: int) -> list[SlipRecord]:
        return sorted(
            (slip for slip in self.slips.values() if slip.vote_count > threshold),
            key=lambda slip: slip.id,
        )


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    markups: list[dict | None] = field(default_factory=list)
    photos: list[tuple[int, str]] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    edited: list[tuple[int, int]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None

    async def send_message(
        self, chat_id: int, text: str, reply_markup: dict | None = None
    ) -> None:
        self.messages.append((chat_id, text))
        self.markups.append(reply_markup)

    async def send_photo(self, chat_id: int, photo: str) -> None:
        self.photos.append((chat_id, photo))

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def edit_message_reply_markup(
        self, chat_id: int, message_id: int, reply_markup: dict | None = None
    ) -> None:
        self.edited.append((chat_id, message_id))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        environment="test",
    )


@pytest.fixture
def slip_repository() -> InMemorySlipRepository:
    return InMemorySlipRepository()


@pytest.fixture
def submission_service(slip_repository: InMemorySlipRepository) -> SubmissionService:
    return SubmissionService(
        draft_store=InMemoryDraftStore(), repository=slip_repository
    )


@pytest.fixture
def dispatcher(
    submission_service: SubmissionService, slip_repository: InMemorySlipRepository
) -> BotDispatcher:
    return BotDispatcher(
        submission_service=submission_service,
        draw_service=DrawService(slip_repository),
        voting_service=VotingService(slip_repository),
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings,
    dispatcher: BotDispatcher,
    telegram_client: FakeTelegramClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        submission_service=dispatcher.submission_service,
        draw_service=dispatcher.draw_service,
        voting_service=dispatcher.voting_service,
        dispatcher=dispatcher,
        identity_locks=IdentityLocks(),
        close_resources=close_resources,
    )
