"""Tests for slip voting."""

import pytest

from omikuji_bot.services.draws import DrawService
from omikuji_bot.services.votes import (
    VoteRequest,
    VoteStatus,
    VotingService,
    parse_vote_payload,
)
from tests.conftest import InMemorySlipRepository


def test_upvote_then_downvote_returns_to_zero() -> None:
    repository = InMemorySlipRepository()
    slip_id = repository.add_slip()
    service = VotingService(repository)

    up = service.vote(slip_id, is_upvote=True)
    assert up.status is VoteStatus.APPLIED
    assert up.vote_count == 1

    down = service.vote(slip_id, is_upvote=False)
    assert down.vote_count == 0
    assert repository.slips[slip_id].vote_count == 0


def test_vote_refreshes_updated_at() -> None:
    repository = InMemorySlipRepository()
    slip_id = repository.add_slip()
    before = repository.slips[slip_id].updated_at

    VotingService(repository).vote(slip_id, is_upvote=True)

    assert repository.slips[slip_id].updated_at >= before


def test_vote_on_unknown_slip_is_not_found() -> None:
    repository = InMemorySlipRepository()
    other = repository.add_slip()

    result = VotingService(repository).vote(7, is_upvote=True)

    assert result.status is VoteStatus.NOT_FOUND
    assert result.vote_count is None
    assert repository.slips[other].vote_count == 0


def test_vote_on_id_beyond_bigint_is_not_found_without_store_call() -> None:
    repository = InMemorySlipRepository()
    repository.unreachable = True
    request = parse_vote_payload("+99999999999999999999")
    assert request is not None

    result = VotingService(repository).vote(request.slip_id, request.is_upvote)

    assert result.status is VoteStatus.NOT_FOUND
    assert VotingService(repository).vote(2**63, is_upvote=False).status is (
        VoteStatus.NOT_FOUND
    )


def test_downvotes_hide_slip_from_draws_without_deleting() -> None:
    repository = InMemorySlipRepository()
    slip_id = repository.add_slip()
    voting = VotingService(repository)
    draws = DrawService(repository)

    voting.vote(slip_id, is_upvote=False)
    voting.vote(slip_id, is_upvote=False)
    assert draws.draw_random() is not None

    voting.vote(slip_id, is_upvote=False)
    assert draws.draw_random() is None

    voting.vote(slip_id, is_upvote=False)
    assert repository.slips[slip_id].vote_count == -4


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("+7", VoteRequest(slip_id=7, is_upvote=True)),
        ("-12", VoteRequest(slip_id=12, is_upvote=False)),
        ("+007", VoteRequest(slip_id=7, is_upvote=True)),
    ],
)
def test_parse_vote_payload(payload: str, expected: VoteRequest) -> None:
    assert parse_vote_payload(payload) == expected


@pytest.mark.parametrize("payload", ["", "+", "7", "*7", "+-7", "+7a", "+ 7", "-٣"])
def test_parse_vote_payload_rejects_malformed(payload: str) -> None:
    assert parse_vote_payload(payload) is None
