"""
ValidateSingleUseCase - validate one address without batch pacing.

Shares the syntax pre-check, the bounded lookup and the classifier with the
batch coordinator, so the same oracle answer always yields the same decision.
"""

import asyncio
import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from ..domain.classifier import evaluate, invalid_format
from ..domain.entities.validation_result import ValidationResult
from ..domain.errors import EmptyInput
from ..domain.interfaces.i_email_verification_gateway import (
    FailureKind,
    IEmailVerificationGateway,
    LookupFailure,
    LookupOutcome,
)

logger = logging.getLogger(__name__)


def precheck_syntax(email: str) -> Optional[ValidationResult]:
    """Returns a rejection if `email` is not syntactically valid, else None."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        logger.info(f"[Precheck] {email!r} rejected: {e}")
        return invalid_format(email)
    return None


async def lookup_with_timeout(
    gateway: IEmailVerificationGateway,
    email: str,
    timeout: float,
) -> LookupOutcome:
    """
    One oracle lookup that always comes back.
    Hanging or misbehaving gateways are converted into LookupFailure.
    """
    try:
        return await asyncio.wait_for(gateway.lookup(email), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"[Lookup] {email} exceeded {timeout:.1f}s, treating as failure")
        return LookupFailure(
            email=email,
            kind=FailureKind.TIMEOUT,
            message=f"Lookup exceeded {timeout:.1f}s",
        )
    except Exception as exc:
        logger.error(f"[Lookup] Gateway raised for {email}: {exc!r}", exc_info=True)
        return LookupFailure(email=email, kind=FailureKind.UNEXPECTED, message=str(exc))


class ValidateSingleUseCase:
    def __init__(
        self,
        email_verifier: IEmailVerificationGateway,
        lookup_timeout: float = 30.0,
        syntax_precheck: bool = True,
    ):
        self.email_verifier = email_verifier
        self.lookup_timeout = lookup_timeout
        self.syntax_precheck = syntax_precheck

    async def execute(self, email: str) -> ValidationResult:
        email = (email or "").strip()
        if not email:
            raise EmptyInput()

        logger.info(f"[Single] Validating {email}")

        if self.syntax_precheck:
            rejected = precheck_syntax(email)
            if rejected is not None:
                return rejected

        outcome = await lookup_with_timeout(self.email_verifier, email, self.lookup_timeout)
        result = evaluate(email, outcome)

        logger.info(
            f"[Single] {email} → accepted={result.accepted} | "
            f"status={result.status.value} | reason={result.reason!r}"
        )
        return result
