"""
Root conftest.py — shared fixtures and helpers for the entire test suite.

Provides:
- Oracle lookup result / failure factories
- Mock gateway fixture (for use-case tests)
- A fake clock for pacing tests
"""

from typing import Optional
from unittest.mock import AsyncMock

import pytest

from emailgate.domain.interfaces.i_email_verification_gateway import (
    Deliverability,
    FailureKind,
    LookupFailure,
    RemoteLookupResult,
)
from emailgate.infrastructure.pacer import RequestPacer


# ─────────────────────────────────────────────────────────────────────────────
# Lookup factories
# ─────────────────────────────────────────────────────────────────────────────


def make_lookup_result(
    email: str = "jane.smith@acme.com",
    deliverability: Deliverability = Deliverability.DELIVERABLE,
    quality_score: float = 0.9,
    is_disposable: bool = False,
    is_role: bool = False,
    autocorrect: Optional[str] = None,
) -> RemoteLookupResult:
    """Create a RemoteLookupResult with sensible test defaults (a good address)."""
    return RemoteLookupResult(
        email=email,
        deliverability=deliverability,
        quality_score=quality_score,
        is_disposable=is_disposable,
        is_role=is_role,
        autocorrect=autocorrect,
    )


def make_failure(
    email: str = "jane.smith@acme.com",
    kind: FailureKind = FailureKind.TRANSPORT,
    message: str = "connection refused",
    status_code: Optional[int] = None,
) -> LookupFailure:
    return LookupFailure(email=email, kind=kind, message=message, status_code=status_code)


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_email_verifier():
    """AsyncMock for IEmailVerificationGateway. Defaults to a high-quality deliverable answer."""
    mock = AsyncMock()
    mock.lookup.side_effect = lambda email: make_lookup_result(email=email)
    return mock


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def instant_pacer():
    """Pacer with no interval, so tests run without waiting."""
    return RequestPacer(min_interval=0.0)
