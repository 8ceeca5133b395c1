"""
AbstractApiAdapter - Implements IEmailVerificationGateway.
Email validation via the Abstract API REST endpoint.
Free plan: 1 request per second. No batch endpoint, one GET per address.
"""

import logging
from typing import Any, Optional

import httpx

from ..domain.errors import ConfigurationError
from ..domain.interfaces.i_email_verification_gateway import (
    Deliverability,
    FailureKind,
    IEmailVerificationGateway,
    LookupFailure,
    LookupOutcome,
    RemoteLookupResult,
)

logger = logging.getLogger(__name__)

ABSTRACT_API_URL = "https://emailvalidation.abstractapi.com/v1/"
USER_AGENT = "EmailGate-Validator/1.0"


def mask_key(api_key: str) -> str:
    if not api_key:
        return "Not configured"
    return f"{api_key[:8]}..."


class AbstractApiAdapter(IEmailVerificationGateway):
    """
    Email verification adapter using Abstract API.
    Abstract API provides:
    - Deliverability verdict and quality score
    - Disposable / role / free / catch-all detection
    - MX and SMTP checks
    - Typo auto-correction
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = ABSTRACT_API_URL,
        timeout: float = 30.0,
        auto_correct: bool = True,
    ):
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "Abstract API key is not configured. Set ABSTRACT_API_KEY in your .env file."
            )
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.auto_correct = auto_correct
        self.request_count = 0

    async def lookup(self, email: str) -> LookupOutcome:
        params = {"api_key": self.api_key, "email": email}
        if self.auto_correct:
            params["auto_correct"] = "true"

        self.request_count += 1
        logger.debug(f"[Abstract] GET {self.api_url} email={email!r} key={mask_key(self.api_key)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.api_url,
                    params=params,
                    headers={"Accept": "application/json", "User-Agent": USER_AGENT},
                )
        except httpx.TimeoutException:
            logger.warning(f"[Abstract] Timeout verifying {email}")
            return LookupFailure(email=email, kind=FailureKind.TIMEOUT, message="Request timeout")
        except httpx.HTTPError as e:
            logger.warning(f"[Abstract] Network error verifying {email}: {e!r}")
            return LookupFailure(email=email, kind=FailureKind.TRANSPORT, message=str(e))

        logger.debug(f"[Abstract] Response status {response.status_code} for {email}")

        if response.status_code != 200:
            return self._http_failure(email, response)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"[Abstract] Non-JSON body for {email}: {e}")
            return LookupFailure(email=email, kind=FailureKind.MALFORMED, message="Response is not JSON")

        return self._parse(email, data)

    def usage_info(self) -> dict:
        return {
            "request_count": self.request_count,
            "api_endpoint": self.api_url,
            "api_key": mask_key(self.api_key),
            "is_configured": True,
        }

    # ── Response handling ─────────────────────────────────────────────────

    def _http_failure(self, email: str, response: httpx.Response) -> LookupFailure:
        code = response.status_code
        body = response.text[:200]
        if code == 401:
            kind = FailureKind.AUTH
        elif code == 422:
            kind = FailureKind.QUOTA
        elif code == 429:
            kind = FailureKind.RATE_LIMITED
        elif code == 400:
            kind = FailureKind.BAD_REQUEST
        elif code >= 500:
            kind = FailureKind.SERVER
        else:
            kind = FailureKind.UNEXPECTED

        logger.error(f"[Abstract] HTTP {code} for {email}: {body}")
        return LookupFailure(email=email, kind=kind, message=f"HTTP {code}: {body}", status_code=code)

    def _parse(self, email: str, data: Any) -> LookupOutcome:
        if not isinstance(data, dict):
            return LookupFailure(email=email, kind=FailureKind.MALFORMED, message="Response is not an object")

        if data.get("error"):
            error = data["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.error(f"[Abstract] API returned error for {email}: {message}")
            return LookupFailure(email=email, kind=FailureKind.UNEXPECTED, message=message)

        raw_verdict = data.get("deliverability")
        if not isinstance(raw_verdict, str):
            return LookupFailure(email=email, kind=FailureKind.MALFORMED, message="Missing deliverability")

        score = self._parse_score(data.get("quality_score"))
        if score is None:
            return LookupFailure(
                email=email,
                kind=FailureKind.MALFORMED,
                message=f"Invalid quality_score: {data.get('quality_score')!r}",
            )

        result = RemoteLookupResult(
            email=email,
            deliverability=self._map_deliverability(raw_verdict),
            quality_score=score,
            is_disposable=bool(self._flag(data, "is_disposable_email")),
            is_role=bool(self._flag(data, "is_role_email")),
            autocorrect=data.get("autocorrect") or None,
            is_valid_format=self._flag(data, "is_valid_format"),
            is_free=self._flag(data, "is_free_email"),
            is_catchall=self._flag(data, "is_catchall_email"),
            is_mx_found=self._flag(data, "is_mx_found"),
            is_smtp_valid=self._flag(data, "is_smtp_valid"),
        )
        logger.debug(
            f"[Abstract] {email}: deliverability={result.deliverability.value} "
            f"score={result.quality_score} disposable={result.is_disposable} "
            f"role={result.is_role} autocorrect={result.autocorrect!r}"
        )
        return result

    def _map_deliverability(self, raw: str) -> Deliverability:
        mapping = {
            "DELIVERABLE": Deliverability.DELIVERABLE,
            "UNDELIVERABLE": Deliverability.UNDELIVERABLE,
            "UNKNOWN": Deliverability.UNKNOWN,
        }
        return mapping.get(raw.strip().upper(), Deliverability.UNKNOWN)

    def _parse_score(self, raw: Any) -> Optional[float]:
        if raw is None or isinstance(raw, bool):
            return None
        try:
            score = float(raw)
        except (TypeError, ValueError):
            return None
        if not 0.0 <= score <= 1.0:
            return None
        return score

    def _flag(self, data: dict, key: str) -> Optional[bool]:
        """Flags arrive either as bare booleans or as {"value": bool, "text": str}."""
        raw = data.get(key)
        if isinstance(raw, dict):
            raw = raw.get("value")
        if raw is None:
            return None
        return bool(raw)
