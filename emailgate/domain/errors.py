"""
Domain errors.

Only input-level and configuration-level problems are raised to the caller.
Per-address lookup problems are values (LookupFailure), never exceptions.
"""


class EmailGateError(Exception):
    """Base exception for the email validation engine."""
    pass


class InputError(EmailGateError):
    """The submitted candidate list cannot be processed. Raised before any lookup."""
    pass


class EmptyInput(InputError):
    def __init__(self, message: str = "Please enter at least one email address"):
        super().__init__(message)


class TooManyCandidates(InputError):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"Batch size cannot exceed {limit} emails (got {count}). "
            f"Please split your list into smaller batches."
        )


class ConfigurationError(EmailGateError):
    """Oracle credentials or settings are missing or invalid."""
    pass
