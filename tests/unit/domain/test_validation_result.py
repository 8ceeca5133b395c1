"""
Tests for the ValidationResult / BatchValidationResult entities and LookupFailure.
"""

import dataclasses

import pytest

from emailgate.domain.entities.validation_result import (
    BatchValidationResult,
    ValidationResult,
    ValidationStatus,
)
from emailgate.domain.interfaces.i_email_verification_gateway import FailureKind
from tests.conftest import make_failure


def make_rejected(email: str, status: ValidationStatus = ValidationStatus.REJECTED) -> ValidationResult:
    return ValidationResult(email=email, accepted=False, status=status, reason="undeliverable")


class TestValidationResult:
    def test_is_immutable(self):
        result = make_rejected("a@x.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.accepted = True  # type: ignore

    def test_to_dict_serializes_status_value(self):
        data = make_rejected("a@x.com").to_dict()
        assert data["status"] == "rejected"
        assert data["email"] == "a@x.com"
        assert data["suggestion"] is None


class TestBatchCounts:
    def test_counts_follow_lists(self):
        report = BatchValidationResult(
            batch_id="b1",
            valid_emails=["a@x.com", "b@x.com"],
            invalid_emails=[make_rejected("c@x.com")],
            total_submitted=3,
        )
        assert report.valid_count == 2
        assert report.invalid_count == 1
        assert report.total_processed == 3
        assert report.valid_count + report.invalid_count == report.total_processed

    def test_unverified_count_only_counts_errors(self):
        report = BatchValidationResult(
            batch_id="b1",
            invalid_emails=[
                make_rejected("a@x.com"),
                make_rejected("b@x.com", status=ValidationStatus.ERROR),
            ],
            total_submitted=2,
        )
        assert report.unverified_count == 1

    def test_empty_report(self):
        report = BatchValidationResult(batch_id="b1")
        assert report.total_processed == 0
        assert report.complete is True

    def test_to_dict_includes_counts_and_completeness(self):
        report = BatchValidationResult(
            batch_id="b1",
            valid_emails=["a@x.com"],
            total_submitted=2,
            complete=False,
        )
        data = report.to_dict()
        assert data["valid_count"] == 1
        assert data["invalid_count"] == 0
        assert data["total_processed"] == 1
        assert data["total_submitted"] == 2
        assert data["complete"] is False

    def test_summary_marks_incomplete(self):
        report = BatchValidationResult(batch_id="abcdef0123", total_submitted=2, complete=False)
        assert "INCOMPLETE" in report.format_summary()


class TestLookupFailureDescribe:
    @pytest.mark.parametrize("kind,fragment", [
        (FailureKind.AUTH,         "API key is invalid"),
        (FailureKind.QUOTA,        "quota reached"),
        (FailureKind.RATE_LIMITED, "Too many requests"),
        (FailureKind.TIMEOUT,      "took too long"),
        (FailureKind.TRANSPORT,    "Network connection error"),
        (FailureKind.BAD_REQUEST,  "Invalid request format"),
        (FailureKind.SERVER,       "experiencing issues"),
    ])
    def test_known_kinds_have_friendly_messages(self, kind, fragment):
        assert fragment in make_failure(kind=kind).describe()

    def test_other_kinds_include_raw_message(self):
        failure = make_failure(kind=FailureKind.MALFORMED, message="Missing deliverability")
        assert failure.describe() == "Validation service error: Missing deliverability"
