"""Tests for container wiring."""

import asyncio

from omikuji_bot.adapters.supabase_slip_repository import SupabaseSlipRepository
from omikuji_bot.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.dispatcher.submission_service is container.submission_service
    assert isinstance(container.draw_service.repository, SupabaseSlipRepository)
    assert container.draw_service.hide_threshold == -3
    asyncio.run(container.close_resources())
