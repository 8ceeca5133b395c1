"""
ValidateBatchUseCase - the batch coordinator.

Normalizes the caller's input, dispatches one paced lookup per candidate,
classifies every answer and aggregates the decisions into a single report.
One candidate's failure never affects its siblings, and the report lists
are always in input order, whatever order the lookups finish in.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Union

from ..domain.classifier import evaluate
from ..domain.entities.validation_result import BatchValidationResult, ValidationResult
from ..domain.interfaces.i_email_verification_gateway import (
    FailureKind,
    IEmailVerificationGateway,
    LookupFailure,
)
from ..infrastructure.pacer import RequestPacer
from .normalize_input import MAX_CANDIDATES, normalize_candidates
from .validate_single import lookup_with_timeout, precheck_syntax

logger = logging.getLogger(__name__)

_SEP = "=" * 70


class BatchPhase(str, Enum):
    """Reported in the final progress event as `phase`."""
    NORMALIZING = "normalizing"
    DISPATCHING = "dispatching"
    AGGREGATED = "aggregated"
    CANCELLED = "cancelled"


@dataclass
class ValidateBatchRequest:
    emails: Union[str, Iterable[str]]
    batch_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    cancel_event: Optional[asyncio.Event] = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


class ValidateBatchUseCase:
    """
    Orchestrates a batch validation run.
    - Normalizes and deduplicates the input (input errors raise before any lookup)
    - Paces dispatches through the shared RequestPacer
    - Bounds in-flight lookups with a semaphore (1 = strictly sequential)
    - Stops dispatching once the request's cancel_event is set
    """

    def __init__(
        self,
        email_verifier: IEmailVerificationGateway,
        pacer: RequestPacer,
        max_batch_size: int = MAX_CANDIDATES,
        concurrency: int = 1,
        lookup_timeout: float = 30.0,
        rate_limit_penalty: float = 60.0,
        syntax_precheck: bool = True,
    ):
        self.email_verifier = email_verifier
        self.pacer = pacer
        self.max_batch_size = max_batch_size
        self.concurrency = max(1, concurrency)
        self.lookup_timeout = lookup_timeout
        self.rate_limit_penalty = rate_limit_penalty
        self.syntax_precheck = syntax_precheck

    async def execute(
        self,
        request: ValidateBatchRequest,
        event_callback: Optional[Callable] = None,
    ) -> BatchValidationResult:
        batch_id = request.batch_id
        tag = f"[Batch:{batch_id[:8]}]"
        wall_start = time.time()

        async def emit(event: dict) -> None:
            if event_callback:
                try:
                    await event_callback(event)
                except Exception as exc:
                    logger.debug(f"{tag} event callback failed: {exc!r}")

        logger.debug(f"{tag} phase={BatchPhase.NORMALIZING.value}")
        candidates = normalize_candidates(request.emails, max_candidates=self.max_batch_size)
        total = len(candidates)

        logger.info(_SEP)
        logger.info(f"{tag} *** BATCH VALIDATION STARTING ***")
        logger.info(
            f"{tag} candidates={total} | concurrency={self.concurrency} | "
            f"interval={self.pacer.min_interval}s | timeout={self.lookup_timeout}s"
        )
        logger.info(_SEP)

        await emit({"type": "batch_start", "batch_id": batch_id, "total": total})

        # ── Paced dispatch ────────────────────────────────────────────────
        slots: List[Optional[ValidationResult]] = [None] * total
        semaphore = asyncio.Semaphore(self.concurrency)
        done_count = 0

        async def validate_one(idx: int, email: str) -> None:
            nonlocal done_count
            async with semaphore:
                if request.cancelled:
                    return

                result = precheck_syntax(email) if self.syntax_precheck else None
                if result is None:
                    if not await self.pacer.wait_turn(request.cancel_event):
                        return
                    logger.debug(f"{tag} phase={BatchPhase.DISPATCHING.value}({idx})")
                    outcome = await lookup_with_timeout(
                        self.email_verifier, email, self.lookup_timeout
                    )
                    if (
                        isinstance(outcome, LookupFailure)
                        and outcome.kind == FailureKind.RATE_LIMITED
                    ):
                        self.pacer.penalize(self.rate_limit_penalty)
                    result = evaluate(email, outcome)

                slots[idx] = result
                done_count += 1
                logger.info(
                    f"{tag} [{done_count}/{total}] {email} → "
                    f"{'VALID' if result.accepted else 'INVALID'} | "
                    f"status={result.status.value} | reason={result.reason!r}"
                )
                await emit({
                    "type": "email_done",
                    "index": idx + 1,
                    "done": done_count,
                    "total": total,
                    "email": email,
                    "accepted": result.accepted,
                    "status": result.status.value,
                    "reason": result.reason,
                })

        await asyncio.gather(*[validate_one(i, e) for i, e in enumerate(candidates)])

        # ── Aggregate ──────────────────────────────────────────────────────
        report = BatchValidationResult(
            batch_id=batch_id,
            total_submitted=total,
            complete=all(slot is not None for slot in slots),
        )
        for slot in slots:
            if slot is None:
                continue
            if slot.accepted:
                report.valid_emails.append(slot.email)
            else:
                report.invalid_emails.append(slot)

        phase = BatchPhase.AGGREGATED if report.complete else BatchPhase.CANCELLED
        elapsed = time.time() - wall_start

        logger.info(_SEP)
        if report.complete:
            logger.info(f"{tag} *** BATCH VALIDATION COMPLETE ***")
        else:
            logger.warning(
                f"{tag} *** BATCH VALIDATION CANCELLED *** "
                f"{total - report.total_processed} candidate(s) not processed"
            )
        logger.info(f"{tag} {report.format_summary()} | elapsed={elapsed:.2f}s")
        logger.info(_SEP)

        await emit({
            "type": "batch_complete" if report.complete else "batch_cancelled",
            "batch_id": batch_id,
            "phase": phase.value,
            "valid": report.valid_count,
            "invalid": report.invalid_count,
            "processed": report.total_processed,
            "total": total,
            "elapsed": round(elapsed, 1),
        })
        return report
