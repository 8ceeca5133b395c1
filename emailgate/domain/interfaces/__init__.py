from .i_email_verification_gateway import (
    Deliverability,
    FailureKind,
    IEmailVerificationGateway,
    LookupFailure,
    LookupOutcome,
    RemoteLookupResult,
)

__all__ = [
    "Deliverability",
    "FailureKind",
    "IEmailVerificationGateway",
    "LookupFailure",
    "LookupOutcome",
    "RemoteLookupResult",
]
