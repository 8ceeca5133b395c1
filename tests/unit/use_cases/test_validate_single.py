"""
Tests for ValidateSingleUseCase and the shared lookup helpers.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from emailgate.domain.classifier import (
    REASON_HIGH_CONFIDENCE,
    REASON_INVALID_FORMAT,
    REASON_SERVICE_UNAVAILABLE,
    REASON_UNDELIVERABLE,
    evaluate,
)
from emailgate.domain.entities.validation_result import ValidationStatus
from emailgate.domain.errors import EmptyInput
from emailgate.domain.interfaces.i_email_verification_gateway import (
    Deliverability,
    FailureKind,
    LookupFailure,
)
from emailgate.use_cases.validate_single import (
    ValidateSingleUseCase,
    lookup_with_timeout,
    precheck_syntax,
)
from tests.conftest import make_failure, make_lookup_result


@pytest.fixture
def single_use_case(mock_email_verifier):
    return ValidateSingleUseCase(email_verifier=mock_email_verifier, lookup_timeout=1.0)


# ─────────────────────────────────────────────────────────────────────────────
# Syntax pre-check
# ─────────────────────────────────────────────────────────────────────────────


class TestPrecheckSyntax:
    @pytest.mark.parametrize("email", ["a@x.com", "jane.smith@acme.com", "first+tag@sub.acme.org"])
    def test_valid_syntax_passes(self, email):
        assert precheck_syntax(email) is None

    @pytest.mark.parametrize("email", ["plainaddress", "@x.com", "a@", "a..b@x.com", "a@x@y.com"])
    def test_invalid_syntax_rejected(self, email):
        result = precheck_syntax(email)
        assert result is not None
        assert result.reason == REASON_INVALID_FORMAT
        assert result.status == ValidationStatus.REJECTED


# ─────────────────────────────────────────────────────────────────────────────
# lookup_with_timeout
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestLookupWithTimeout:
    async def test_returns_gateway_answer(self, mock_email_verifier):
        outcome = await lookup_with_timeout(mock_email_verifier, "a@x.com", timeout=1.0)
        assert outcome.email == "a@x.com"

    async def test_hanging_lookup_becomes_timeout_failure(self):
        async def hang(email):
            await asyncio.sleep(10)

        gateway = AsyncMock()
        gateway.lookup.side_effect = hang
        outcome = await lookup_with_timeout(gateway, "a@x.com", timeout=0.01)
        assert isinstance(outcome, LookupFailure)
        assert outcome.kind == FailureKind.TIMEOUT

    async def test_raising_gateway_becomes_unexpected_failure(self):
        gateway = AsyncMock()
        gateway.lookup.side_effect = RuntimeError("boom")
        outcome = await lookup_with_timeout(gateway, "a@x.com", timeout=1.0)
        assert isinstance(outcome, LookupFailure)
        assert outcome.kind == FailureKind.UNEXPECTED
        assert "boom" in outcome.message


# ─────────────────────────────────────────────────────────────────────────────
# Use case
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestValidateSingle:
    async def test_accepts_good_address(self, single_use_case, mock_email_verifier):
        result = await single_use_case.execute("jane@acme.com")
        assert result.accepted is True
        assert result.reason == REASON_HIGH_CONFIDENCE
        mock_email_verifier.lookup.assert_called_once_with("jane@acme.com")

    async def test_trims_input(self, single_use_case, mock_email_verifier):
        result = await single_use_case.execute("  jane@acme.com \n")
        assert result.email == "jane@acme.com"
        mock_email_verifier.lookup.assert_called_once_with("jane@acme.com")

    @pytest.mark.parametrize("email", ["", "   ", None])
    async def test_empty_input_raises(self, single_use_case, email):
        with pytest.raises(EmptyInput):
            await single_use_case.execute(email)

    async def test_invalid_syntax_never_reaches_oracle(self, single_use_case, mock_email_verifier):
        result = await single_use_case.execute("not-an-email")
        assert result.reason == REASON_INVALID_FORMAT
        mock_email_verifier.lookup.assert_not_called()

    async def test_precheck_can_be_disabled(self, mock_email_verifier):
        use_case = ValidateSingleUseCase(email_verifier=mock_email_verifier, syntax_precheck=False)
        await use_case.execute("not-an-email")
        mock_email_verifier.lookup.assert_called_once_with("not-an-email")

    async def test_failure_fails_closed(self, single_use_case, mock_email_verifier):
        mock_email_verifier.lookup.side_effect = None
        mock_email_verifier.lookup.return_value = make_failure(email="jane@acme.com")
        result = await single_use_case.execute("jane@acme.com")
        assert result.accepted is False
        assert result.reason == REASON_SERVICE_UNAVAILABLE
        assert result.status == ValidationStatus.ERROR

    async def test_matches_evaluate_for_same_outcome(self, single_use_case, mock_email_verifier):
        outcome = make_lookup_result(
            email="jane@acme.com", deliverability=Deliverability.UNDELIVERABLE
        )
        mock_email_verifier.lookup.side_effect = None
        mock_email_verifier.lookup.return_value = outcome
        result = await single_use_case.execute("jane@acme.com")
        assert result == evaluate("jane@acme.com", outcome)
        assert result.reason == REASON_UNDELIVERABLE
