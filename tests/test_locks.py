"""Tests for per-identity locking."""

import asyncio

from omikuji_bot.services.locks import IdentityLocks


def test_same_identity_is_serialized() -> None:
    locks = IdentityLocks()
    events: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold(1):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    async def main() -> None:
        await asyncio.gather(worker("a"), worker("b"))

    asyncio.run(main())

    assert events in (
        ["a-start", "a-end", "b-start", "b-end"],
        ["b-start", "b-end", "a-start", "a-end"],
    )
    assert len(locks) == 0


def test_different_identities_run_concurrently() -> None:
    locks = IdentityLocks()
    inside: set[int] = set()
    overlapped: list[bool] = []

    async def worker(identity: int) -> None:
        async with locks.hold(identity):
            inside.add(identity)
            await asyncio.sleep(0.01)
            overlapped.append(len(inside) == 2)  # noqa: PLR2004
            inside.discard(identity)

    async def main() -> None:
        await asyncio.gather(worker(1), worker(2))

    asyncio.run(main())

    assert any(overlapped)
    assert len(locks) == 0
