"""Tests for the in-memory draft store."""

from omikuji_bot.domain.omikuji import FortuneClass
from omikuji_bot.services.drafts import InMemoryDraftStore


def test_create_then_get_returns_same_draft() -> None:
    store = InMemoryDraftStore()

    created = store.create(1)

    assert created is not None
    assert store.get(1) is created
    assert created.fortune_class is None
    assert created.sections == []


def test_create_twice_keeps_existing_draft() -> None:
    store = InMemoryDraftStore()
    first = store.create(1)
    first.fortune_class = FortuneClass.CURSE

    assert store.create(1) is None
    assert store.get(1) is first
    assert len(store) == 1


def test_delete_is_noop_when_absent() -> None:
    store = InMemoryDraftStore()
    store.create(1)

    store.delete(1)
    store.delete(1)
    store.delete(2)

    assert store.get(1) is None
    assert len(store) == 0
