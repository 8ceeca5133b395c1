"""
Classifier - the accept/reject policy for one oracle lookup.

Pure functions, no I/O. The rules are evaluated in order and the first match
wins. A lookup that failed is never accepted.
"""

from dataclasses import dataclass

from .entities.validation_result import ValidationResult, ValidationStatus
from .interfaces.i_email_verification_gateway import (
    Deliverability,
    LookupFailure,
    LookupOutcome,
)

REASON_SERVICE_UNAVAILABLE = "validation service unavailable"
REASON_UNDELIVERABLE = "undeliverable"
REASON_DISPOSABLE = "disposable email provider"
REASON_ROLE_ACCOUNT = "role-based address"
REASON_LOW_QUALITY = "low quality score"
REASON_MEDIUM_CONFIDENCE = "medium confidence, accepted"
REASON_HIGH_CONFIDENCE = "high confidence, deliverable"
REASON_INSUFFICIENT_CONFIDENCE = "insufficient confidence"
REASON_INVALID_FORMAT = "invalid email format"

LOW_QUALITY_THRESHOLD = 0.5
HIGH_QUALITY_THRESHOLD = 0.7


@dataclass(frozen=True)
class Classification:
    accepted: bool
    reason: str
    status: ValidationStatus


def _reject(reason: str) -> Classification:
    return Classification(accepted=False, reason=reason, status=ValidationStatus.REJECTED)


def _accept(reason: str) -> Classification:
    return Classification(accepted=True, reason=reason, status=ValidationStatus.OK)


def classify(outcome: LookupOutcome) -> Classification:
    if isinstance(outcome, LookupFailure):
        return Classification(
            accepted=False,
            reason=REASON_SERVICE_UNAVAILABLE,
            status=ValidationStatus.ERROR,
        )

    if outcome.deliverability == Deliverability.UNDELIVERABLE:
        return _reject(REASON_UNDELIVERABLE)
    if outcome.is_disposable:
        return _reject(REASON_DISPOSABLE)
    if outcome.is_role:
        return _reject(REASON_ROLE_ACCOUNT)

    score = outcome.quality_score
    if score < LOW_QUALITY_THRESHOLD:
        return _reject(REASON_LOW_QUALITY)

    if outcome.deliverability == Deliverability.DELIVERABLE:
        if score < HIGH_QUALITY_THRESHOLD:
            return _accept(REASON_MEDIUM_CONFIDENCE)
        return _accept(REASON_HIGH_CONFIDENCE)

    return _reject(REASON_INSUFFICIENT_CONFIDENCE)


def evaluate(email: str, outcome: LookupOutcome) -> ValidationResult:
    """
    Classify a lookup and package it as a ValidationResult for `email`.

    The oracle's auto-correction suggestion is attached whatever the decision;
    it never influences it.
    """
    decision = classify(outcome)

    if isinstance(outcome, LookupFailure):
        return ValidationResult(
            email=email,
            accepted=False,
            status=decision.status,
            reason=decision.reason,
            error=outcome.describe(),
        )

    return ValidationResult(
        email=email,
        accepted=decision.accepted,
        status=decision.status,
        reason=decision.reason,
        suggestion=outcome.autocorrect or None,
    )


def invalid_format(email: str) -> ValidationResult:
    """Rejection for an address that failed the local syntax check."""
    return ValidationResult(
        email=email,
        accepted=False,
        status=ValidationStatus.REJECTED,
        reason=REASON_INVALID_FORMAT,
    )
