from __future__ import annotations

from backend.app.inference.schema import TechniqueDecision

SKELETON_BLOCK = (
    "[INFERENCE: Skeleton-of-Thought]\n"
    "First, provide a skeleton outline of your reasoning with key points. "
    "Then expand each point with detailed analysis."
)

SELF_CONSISTENCY_BLOCK = (
    "[INFERENCE: Self-Consistency]\n"
    "Provide your response. This will be cross-validated against {num_samples} "
    "independent samples for accuracy."
)

VERIFICATION_BLOCK = (
    "[INFERENCE: Chain-of-Verification]\n"
    "After providing your answer, you will internally verify:\n"
    "1. Cross-check with source data\n"
    "2. Flag any inconsistencies\n"
    "3. Re-verify math and logic\n"
    "\n"
    "Provide confidence level at end."
)


def build_inference_prompt(prompt: str, decision: TechniqueDecision) -> str:
    """Append one instruction block per active technique. Speculative decoding adds no text."""
    blocks = [prompt or ""]
    if decision.use_skeleton_of_thought:
        blocks.append(SKELETON_BLOCK)
    if decision.use_self_consistency:
        blocks.append(SELF_CONSISTENCY_BLOCK.format(num_samples=decision.num_samples))
    if decision.use_chain_of_verification:
        blocks.append(VERIFICATION_BLOCK)
    return "\n\n".join(blocks)


__all__ = [
    "SKELETON_BLOCK",
    "SELF_CONSISTENCY_BLOCK",
    "VERIFICATION_BLOCK",
    "build_inference_prompt",
]
