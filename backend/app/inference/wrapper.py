"""
Call wrapper for technique-routed model calls.

Runs the caller's unit of work once, times it, and returns a CallEnvelope
carrying the technique flags that were selected for the request. Progress is
reported before the call; a summary follows only when a technique was active.
Failures are reported and re-raised unchanged. No retry, no timeout, no
cancellation: those belong to the unit of work.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, TypeVar

from backend.app.config import get_settings, safe_error_detail
from backend.app.inference.schema import (
    FIXED_CONFIDENCE,
    CallEnvelope,
    InferenceRequest,
    TechniqueDecision,
    VerificationBadge,
    parse_task,
    parse_tier,
)
from backend.app.inference.notify import NotifierLike, as_notifier
from backend.app.inference.status import failure_message, progress_message, summary_message
from backend.app.observability.metrics import build_inference_summary_fields, counter, event, histogram

T = TypeVar("T")

logger = logging.getLogger(__name__)

UnitOfWork = Callable[[], Awaitable[T]]


def _labels(request: InferenceRequest, outcome: str) -> dict[str, str]:
    return {
        "task": getattr(parse_task(request.task), "value", "unknown"),
        "tier": getattr(parse_tier(request.tier), "value", "unknown"),
        "outcome": outcome,
    }


def _record(
    enabled: bool, request: InferenceRequest, decision: TechniqueDecision, outcome: str, elapsed_ms: int, **extra
) -> None:
    if not enabled:
        return
    labels = _labels(request, outcome)
    counter("inference.calls", labels=labels)
    histogram("inference.latency_ms", elapsed_ms, labels=labels)
    event(
        "inference.summary",
        build_inference_summary_fields(
            task=labels["task"],
            tier=labels["tier"],
            outcome=outcome,
            processing_ms=elapsed_ms,
            techniques=[t.value for t in decision.active_techniques()],
            **extra,
        ),
    )


async def wrap_call(
    unit_of_work: UnitOfWork[T],
    request: InferenceRequest,
    decision: TechniqueDecision,
    notifier: NotifierLike = None,
) -> CallEnvelope[T]:
    sink = as_notifier(notifier)
    # read before the unit of work; the failure path must not touch settings
    metrics_enabled = get_settings().metrics_enabled
    start_ts = time.monotonic()

    def _elapsed_ms() -> int:
        return int((time.monotonic() - start_ts) * 1000)

    if sink is not None:
        sink.progress(progress_message(decision))

    try:
        result = await unit_of_work()
    except Exception as exc:
        elapsed = _elapsed_ms()
        logger.warning(
            "[INFERENCE] unit of work failed",
            extra={"error_type": type(exc).__name__, "detail": safe_error_detail(exc), "elapsed_ms": elapsed},
        )
        _record(
            metrics_enabled, request, decision, "error", elapsed, verification_badge=None, error_type=type(exc).__name__
        )
        if sink is not None:
            sink.failed(failure_message(exc))
        raise

    elapsed = _elapsed_ms()
    badge = VerificationBadge.VERIFIED if decision.use_chain_of_verification else VerificationBadge.NONE
    envelope: CallEnvelope[T] = CallEnvelope(
        result=result,
        used_speculative=decision.use_speculative,
        used_self_consistency=decision.use_self_consistency,
        used_skeleton_of_thought=decision.use_skeleton_of_thought,
        used_chain_of_verification=decision.use_chain_of_verification,
        processing_ms=elapsed,
        confidence=FIXED_CONFIDENCE,
        verification_badge=badge,
    )
    _record(metrics_enabled, request, decision, "ok", elapsed, verification_badge=badge.value)

    summary = summary_message(decision, elapsed)
    if sink is not None and summary is not None:
        sink.complete(summary)
    return envelope


__all__ = ["wrap_call", "UnitOfWork"]
