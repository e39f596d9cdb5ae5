"""Tests for per-client request spacing."""

import pytest

from itinerary_resolver.adapters.ratelimit.client_rate_limiter import (
    ClientRateLimiter,
    client_id_from_headers,
)
from itinerary_resolver.domain.errors import RateLimitExceededError


@pytest.fixture
def limiter(clock):
    return ClientRateLimiter(min_interval_seconds=1.1, clock=clock)


@pytest.mark.parametrize(
    "forwarded, remote, expected",
    [
        ("203.0.113.9, 10.0.0.1", "10.0.0.2", "203.0.113.9"),
        (None, "10.0.0.2", "10.0.0.2"),
        (" , ", "10.0.0.2", "10.0.0.2"),
        (None, None, "unknown"),
    ],
)
def test_client_id_from_headers(forwarded, remote, expected):
    assert client_id_from_headers(forwarded, remote) == expected


def test_first_request_is_allowed(limiter):
    limiter.check("a")
    assert limiter.tracked_clients() == 1


def test_second_request_too_soon_is_rejected(limiter, clock):
    limiter.check("a")
    clock.advance(1.0)

    with pytest.raises(RateLimitExceededError) as info:
        limiter.check("a")

    assert info.value.client_id == "a"
    assert info.value.retry_after_seconds == pytest.approx(0.1)
    assert info.value.message == "Too many requests. Please wait a moment."


def test_rejection_does_not_reset_window(limiter, clock):
    limiter.check("a")
    clock.advance(0.6)
    with pytest.raises(RateLimitExceededError):
        limiter.check("a")

    clock.advance(0.6)
    limiter.check("a")


def test_clients_are_independent(limiter):
    limiter.check("a")
    limiter.check("b")
    assert limiter.tracked_clients() == 2
