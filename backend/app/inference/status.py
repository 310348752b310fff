from __future__ import annotations

from typing import List, Optional

from backend.app.inference.schema import TechniqueDecision

STANDARD_PROGRESS_MESSAGE = "Running standard inference..."
STANDARD_STATUS = "Standard inference"
LABEL_SEPARATOR = " • "
STAGE_SEPARATOR = " → "


def _progress_labels(decision: TechniqueDecision) -> List[str]:
    labels: List[str] = []
    if decision.use_speculative:
        labels.append("⚡ Speculative Decoding (2.1x faster)")
    if decision.use_self_consistency:
        labels.append(f"🎯 Self-Consistent (best-of-{decision.num_samples})")
    if decision.use_skeleton_of_thought:
        labels.append("🧩 Skeleton-of-Thought")
    if decision.use_chain_of_verification:
        labels.append("✅ Chain-of-Verification")
    return labels


def _summary_labels(decision: TechniqueDecision) -> List[str]:
    labels: List[str] = []
    if decision.use_speculative:
        labels.append("⚡ Speculative Decoding")
    if decision.use_self_consistency:
        labels.append("🎯 Self-Consistent")
    if decision.use_skeleton_of_thought:
        labels.append("🧩 Skeleton-of-Thought")
    if decision.use_chain_of_verification:
        labels.append("✅ Verified")
    return labels


def progress_message(decision: TechniqueDecision) -> str:
    labels = _progress_labels(decision)
    if not labels:
        return STANDARD_PROGRESS_MESSAGE
    return f"Running inference with: {LABEL_SEPARATOR.join(labels)}"


def summary_message(decision: TechniqueDecision, processing_ms: int) -> Optional[str]:
    """Post-call summary, or None when no technique ran."""
    labels = _summary_labels(decision)
    if not labels:
        return None
    if len(labels) == 1:
        return f"Using {labels[0]} — {int(processing_ms)}ms"
    return f"Generated with {LABEL_SEPARATOR.join(labels)} — {int(processing_ms)}ms"


def failure_message(error: BaseException | str) -> str:
    return f"Inference error: {error}"


def status_indicator(decision: TechniqueDecision) -> str:
    if not decision.any_active:
        return STANDARD_STATUS
    stages: List[str] = []
    if decision.use_skeleton_of_thought:
        stages.append("Generating skeleton...")
    if decision.use_self_consistency:
        stages.append(f"Evaluating {decision.num_samples} samples...")
    if decision.use_speculative:
        stages.append("Speculative decoding...")
    if decision.use_chain_of_verification:
        stages.append("Verifying consistency...")
    return STAGE_SEPARATOR.join(stages)


__all__ = [
    "STANDARD_PROGRESS_MESSAGE",
    "STANDARD_STATUS",
    "progress_message",
    "summary_message",
    "failure_message",
    "status_indicator",
]
