"""
Plain-text exports of a batch report, for download or the CLI --export flag.
"""

from typing import List

from ..domain.entities.validation_result import BatchValidationResult

EXPORT_FILENAMES = {
    "valid": "valid_emails.txt",
    "invalid": "invalid_emails.txt",
    "all": "email_validation_results.txt",
}


def invalid_lines(report: BatchValidationResult) -> List[str]:
    return [f"{r.email} - {r.reason}" for r in report.invalid_emails]


def format_results(report: BatchValidationResult, kind: str = "all") -> str:
    if kind == "valid":
        lines = list(report.valid_emails)
    elif kind == "invalid":
        lines = invalid_lines(report)
    elif kind == "all":
        lines = [
            "=== VALID EMAILS ===",
            *report.valid_emails,
            "",
            "=== INVALID EMAILS ===",
            *invalid_lines(report),
        ]
    else:
        raise ValueError(f"Unknown export kind: {kind!r} (expected valid, invalid or all)")
    return "\n".join(lines)
