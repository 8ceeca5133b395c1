"""
ValidationResult / BatchValidationResult - Outputs of the validation use cases.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ValidationStatus(str, Enum):
    OK = "ok"
    REJECTED = "rejected"  # Rejected by policy
    ERROR = "error"  # Could not be verified


@dataclass(frozen=True)
class ValidationResult:
    """Decision for a single candidate address."""

    email: str
    accepted: bool
    status: ValidationStatus
    reason: str
    suggestion: Optional[str] = None  # Oracle auto-correction, display only
    error: Optional[str] = None  # Failure description when status=ERROR

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "accepted": self.accepted,
            "status": self.status.value,
            "reason": self.reason,
            "suggestion": self.suggestion,
            "error": self.error,
        }


@dataclass
class BatchValidationResult:
    """
    Aggregated report for one batch run.
    Counts are derived from the two lists so they can never disagree with them.
    """

    batch_id: str
    valid_emails: List[str] = field(default_factory=list)
    invalid_emails: List[ValidationResult] = field(default_factory=list)
    total_submitted: int = 0
    complete: bool = True

    @property
    def valid_count(self) -> int:
        return len(self.valid_emails)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid_emails)

    @property
    def total_processed(self) -> int:
        return self.valid_count + self.invalid_count

    @property
    def unverified_count(self) -> int:
        return sum(1 for r in self.invalid_emails if r.status == ValidationStatus.ERROR)

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "valid_emails": list(self.valid_emails),
            "invalid_emails": [r.to_dict() for r in self.invalid_emails],
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "total_processed": self.total_processed,
            "total_submitted": self.total_submitted,
            "complete": self.complete,
        }

    def format_summary(self) -> str:
        state = "complete" if self.complete else "INCOMPLETE (cancelled)"
        return (
            f"Batch {self.batch_id[:8]} {state}: "
            f"{self.valid_count} valid, {self.invalid_count} invalid "
            f"({self.unverified_count} unverified), "
            f"{self.total_processed}/{self.total_submitted} processed"
        )
