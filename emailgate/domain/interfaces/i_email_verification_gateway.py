"""
IEmailVerificationGateway - Port: remote email verification oracle.
Implementations call a hosted verification API (Abstract API by default).

A lookup never raises: every transport, protocol or payload problem comes
back as a LookupFailure so the coordinator can contain it per address.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Deliverability(str, Enum):
    DELIVERABLE = "DELIVERABLE"
    UNDELIVERABLE = "UNDELIVERABLE"
    UNKNOWN = "UNKNOWN"


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    AUTH = "auth"
    QUOTA = "quota"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    SERVER = "server"
    MALFORMED = "malformed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class RemoteLookupResult:
    email: str
    deliverability: Deliverability
    quality_score: float  # 0..1
    is_disposable: bool = False
    is_role: bool = False
    autocorrect: Optional[str] = None

    # Informational only; the decision policy does not look at these
    is_valid_format: Optional[bool] = None
    is_free: Optional[bool] = None
    is_catchall: Optional[bool] = None
    is_mx_found: Optional[bool] = None
    is_smtp_valid: Optional[bool] = None


_FAILURE_MESSAGES = {
    FailureKind.AUTH: "Verification API key is invalid. Please contact the administrator to update the API key.",
    FailureKind.QUOTA: "Verification API quota reached. Please upgrade the plan or wait for the quota reset.",
    FailureKind.RATE_LIMITED: "Too many requests sent to the verification API. Please wait a moment before trying again.",
    FailureKind.TIMEOUT: "The validation request took too long. Please try again.",
    FailureKind.TRANSPORT: "Network connection error. Please check your internet connection and try again.",
    FailureKind.BAD_REQUEST: "Invalid request format. Please check the email address format.",
    FailureKind.SERVER: "Verification API servers are experiencing issues. Please try again in a few minutes.",
}


@dataclass(frozen=True)
class LookupFailure:
    email: str
    kind: FailureKind
    message: str = ""
    status_code: Optional[int] = None

    def describe(self) -> str:
        """User-facing explanation of why the address could not be verified."""
        known = _FAILURE_MESSAGES.get(self.kind)
        if known:
            return known
        return f"Validation service error: {self.message or self.kind.value}"


LookupOutcome = Union[RemoteLookupResult, LookupFailure]


class IEmailVerificationGateway(ABC):
    """Port for per-address deliverability lookups."""

    @abstractmethod
    async def lookup(self, email: str) -> LookupOutcome:
        """
        Looks up a single address at the oracle.
        Returns a RemoteLookupResult, or a LookupFailure carrying the cause.
        """
        pass
