from __future__ import annotations

from typing import Any, Dict

from backend.app.observability.logging import safe_redact, structured_log


def counter(name: str, value: int = 1, labels: dict[str, str] | None = None) -> None:
    payload = {"type": "metric", "metric_type": "counter", "name": name, "value": int(value), "labels": labels or {}}
    structured_log(payload)


def histogram(name: str, value: float, labels: dict[str, str] | None = None) -> None:
    payload = {"type": "metric", "metric_type": "histogram", "name": name, "value": float(value), "labels": labels or {}}
    structured_log(payload)


def event(name: str, fields: Dict[str, Any]) -> None:
    payload = {"type": "event", "name": name, "fields": safe_redact(fields)}
    structured_log(payload)


def build_inference_summary_fields(
    *,
    task: str,
    tier: str,
    outcome: str,
    processing_ms: int,
    techniques: list[str],
    verification_badge: str | None,
    error_type: str | None = None,
) -> Dict[str, Any]:
    return {
        "task": task,
        "tier": tier,
        "outcome": outcome,
        "processing_ms": int(processing_ms),
        "techniques": list(techniques),
        "technique_count": len(techniques),
        "verification_badge": verification_badge or "none",
        "error_type": error_type,
    }


__all__ = [
    "counter",
    "histogram",
    "event",
    "build_inference_summary_fields",
]
