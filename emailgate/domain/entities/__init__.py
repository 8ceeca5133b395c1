from .validation_result import (
    BatchValidationResult,
    ValidationResult,
    ValidationStatus,
)

__all__ = [
    "BatchValidationResult",
    "ValidationResult",
    "ValidationStatus",
]
