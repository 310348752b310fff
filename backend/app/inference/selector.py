"""
Deterministic technique selector.

Decides which prompting augmentations apply to one inference request:
- speculative decoding
- self-consistency (best-of-N sampling)
- skeleton-of-thought
- chain-of-verification

Each technique needs its global ``enabled`` flag, tier access from the fixed
matrix, and the per-task opt-in flag for the request's task. Chain-of-verification
is the exception: it has no per-task flags and blankets every paid request for a
recognized task when ``auto_verify_all_paid_outputs`` is set.

Pure function of its inputs. Missing or malformed configuration, unknown tiers
and unknown tasks never raise; they resolve to "nothing applies".
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from backend.app.inference.access import tier_features
from backend.app.inference.schema import (
    DEFAULT_NUM_SAMPLES,
    UNCONFIGURED_NUM_SAMPLES,
    InferenceRequest,
    Task,
    Technique,
    TechniqueConfig,
    TechniqueDecision,
    Tier,
    parse_task,
    parse_tier,
)

logger = logging.getLogger(__name__)

ConfigInput = Union[TechniqueConfig, Mapping[str, Any], None]

# Task -> opt-in flag on the technique's config record. Tasks absent from a
# table never trigger that technique.
SPECULATIVE_TASK_FLAGS: Dict[Task, str] = {
    Task.CAMPAIGN_GEN: "auto_activate_on_campaigns",
    Task.WEBSITE_GEN: "auto_activate_on_website_gen",
    Task.RLM_ANALYSIS: "auto_activate_on_rlm",
}

SELF_CONSISTENCY_TASK_FLAGS: Dict[Task, str] = {
    Task.CONSISTENCY_SCORE: "use_on_consistency_score",
    Task.DNA_EXTRACTION: "use_on_dna_extraction",
    Task.CLOSER_REPLY: "use_on_closer_replies",
}

SKELETON_TASK_FLAGS: Dict[Task, str] = {
    Task.BATTLE_MODE: "use_on_battle_mode",
    Task.CAMPAIGN_GEN: "use_on_campaign_planning",
    Task.RLM_ANALYSIS: "use_on_rlm_analysis",
}

UNCONFIGURED_DECISION = TechniqueDecision(
    use_speculative=False,
    use_self_consistency=False,
    use_skeleton_of_thought=False,
    use_chain_of_verification=False,
    num_samples=UNCONFIGURED_NUM_SAMPLES,
)


def coerce_technique_config(raw: ConfigInput) -> Optional[TechniqueConfig]:
    """
    Normalize caller-supplied configuration.

    Accepts a TechniqueConfig, a mapping in snake_case or camelCase form, or None.
    Anything that fails validation is treated as absent.
    """
    if raw is None:
        return None
    if isinstance(raw, TechniqueConfig):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=False)
    if not isinstance(raw, Mapping):
        logger.warning("[INFERENCE] ignoring config of type %s", type(raw).__name__)
        return None
    try:
        return TechniqueConfig.model_validate(dict(raw))
    except ValidationError as exc:
        logger.warning("[INFERENCE] ignoring malformed config", extra={"errors": exc.error_count()})
        return None


def _task_opt_in(record: Any, flags: Dict[Task, str], task: Optional[Task]) -> bool:
    if task is None:
        return False
    attr = flags.get(task)
    if attr is None:
        return False
    return bool(getattr(record, attr, False))


def select_techniques(
    request: InferenceRequest,
    config: ConfigInput,
    tier: Union[Tier, str, None],
) -> TechniqueDecision:
    """
    Decide which techniques apply to ``request``.

    ``tier`` drives the access matrix. The chain-of-verification paid check reads
    ``request.tier``. ``num_samples`` is reported from config (default 3) even
    when self-consistency itself does not apply.
    """
    cfg = coerce_technique_config(config)
    if cfg is None:
        return UNCONFIGURED_DECISION

    access = tier_features(tier)
    task = parse_task(request.task)

    sd_cfg = cfg.speculative_decoding
    use_speculative = (
        sd_cfg.enabled
        and access[Technique.SPECULATIVE_DECODING]
        and _task_opt_in(sd_cfg, SPECULATIVE_TASK_FLAGS, task)
    )

    sc_cfg = cfg.self_consistency
    use_self_consistency = (
        sc_cfg.enabled
        and access[Technique.SELF_CONSISTENCY]
        and _task_opt_in(sc_cfg, SELF_CONSISTENCY_TASK_FLAGS, task)
    )

    sot_cfg = cfg.skeleton_of_thought
    use_skeleton = (
        sot_cfg.enabled
        and access[Technique.SKELETON_OF_THOUGHT]
        and _task_opt_in(sot_cfg, SKELETON_TASK_FLAGS, task)
    )

    # Same for every recognized task; gated on the request's own tier being paid.
    cov_cfg = cfg.chain_of_verification
    request_tier = parse_tier(request.tier)
    use_verification = (
        task is not None
        and cov_cfg.enabled
        and access[Technique.CHAIN_OF_VERIFICATION]
        and cov_cfg.auto_verify_all_paid_outputs
        and request_tier is not None
        and request_tier != Tier.FREE
    )

    decision = TechniqueDecision(
        use_speculative=bool(use_speculative),
        use_self_consistency=bool(use_self_consistency),
        use_skeleton_of_thought=bool(use_skeleton),
        use_chain_of_verification=bool(use_verification),
        num_samples=sc_cfg.num_samples or DEFAULT_NUM_SAMPLES,
    )
    logger.debug(
        "[INFERENCE] techniques selected",
        extra={
            "task": task.value if task else "unknown",
            "tier": getattr(parse_tier(tier), "value", "unknown"),
            "techniques": [t.value for t in decision.active_techniques()],
        },
    )
    return decision


__all__ = [
    "SPECULATIVE_TASK_FLAGS",
    "SELF_CONSISTENCY_TASK_FLAGS",
    "SKELETON_TASK_FLAGS",
    "UNCONFIGURED_DECISION",
    "coerce_technique_config",
    "select_techniques",
]
