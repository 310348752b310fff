"""
Value types for the inference-technique router.

Tier, Task and Technique are closed enums. TechniqueConfig is the per-account
opt-in record, validated with pydantic from either snake_case keys or the
camelCase settings JSON the web client stores. Decisions, requests and
envelopes are frozen dataclasses recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

MIN_NUM_SAMPLES = 1
MAX_NUM_SAMPLES = 5
DEFAULT_NUM_SAMPLES = 3
UNCONFIGURED_NUM_SAMPLES = 1
FIXED_CONFIDENCE = 0.95


class Tier(str, Enum):
    FREE = "free"
    CORE = "core"
    PRO = "pro"
    HUNTER = "hunter"


class Task(str, Enum):
    CAMPAIGN_GEN = "campaign_gen"
    WEBSITE_GEN = "website_gen"
    RLM_ANALYSIS = "rlm_analysis"
    BATTLE_MODE = "battle_mode"
    DNA_EXTRACTION = "dna_extraction"
    CONSISTENCY_SCORE = "consistency_score"
    CLOSER_REPLY = "closer_reply"
    GENERAL = "general"


class Technique(str, Enum):
    SPECULATIVE_DECODING = "speculative_decoding"
    SELF_CONSISTENCY = "self_consistency"
    SKELETON_OF_THOUGHT = "skeleton_of_thought"
    CHAIN_OF_VERIFICATION = "chain_of_verification"


class VerificationBadge(str, Enum):
    VERIFIED = "verified"
    NONE = "none"


def parse_tier(value: Union[Tier, str, None]) -> Optional[Tier]:
    if isinstance(value, Tier):
        return value
    if isinstance(value, str) and value.strip().lower() in Tier._value2member_map_:
        return Tier(value.strip().lower())
    return None


def parse_task(value: Union[Task, str, None]) -> Optional[Task]:
    if isinstance(value, Task):
        return value
    if isinstance(value, str) and value.strip().lower() in Task._value2member_map_:
        return Task(value.strip().lower())
    return None


class _ConfigRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class SpeculativeDecodingConfig(_ConfigRecord):
    enabled: bool = False
    auto_activate_on_campaigns: bool = Field(False, alias="autoActivateOnCampaigns")
    auto_activate_on_website_gen: bool = Field(False, alias="autoActivateOnWebsiteGen")
    auto_activate_on_rlm: bool = Field(False, alias="autoActivateOnRLM")


class SelfConsistencyConfig(_ConfigRecord):
    enabled: bool = False
    num_samples: Optional[int] = Field(None, alias="numSamples")
    use_on_consistency_score: bool = Field(False, alias="useOnConsistencyScore")
    use_on_dna_extraction: bool = Field(False, alias="useOnDNAExtraction")
    use_on_closer_replies: bool = Field(False, alias="useOnCloserReplies")

    @field_validator("num_samples", mode="before")
    @classmethod
    def clamp_num_samples(cls, v: Any) -> Optional[int]:
        # 0 / missing means "not set"; callers fall back to the default
        if v is None or isinstance(v, bool):
            return None
        if not isinstance(v, (int, float, str)):
            raise ValueError("num_samples must be a number")
        try:
            count = int(v)
        except (TypeError, OverflowError) as exc:
            raise ValueError("num_samples must be a finite number") from exc
        if count <= 0:
            return None
        return min(MAX_NUM_SAMPLES, max(MIN_NUM_SAMPLES, count))


class SkeletonOfThoughtConfig(_ConfigRecord):
    enabled: bool = False
    live_ui_enabled: bool = Field(False, alias="liveUIEnabled")
    use_on_battle_mode: bool = Field(False, alias="useOnBattleMode")
    use_on_campaign_planning: bool = Field(False, alias="useOnCampaignPlanning")
    use_on_rlm_analysis: bool = Field(False, alias="useOnRLMAnalysis")


class ChainOfVerificationConfig(_ConfigRecord):
    enabled: bool = False
    auto_verify_all_paid_outputs: bool = Field(False, alias="autoVerifyAllPaidOutputs")
    check_cross_references: bool = Field(False, alias="checkCrossReferences")
    flag_inconsistencies: bool = Field(False, alias="flagInconsistencies")
    reverify_math_logic: bool = Field(False, alias="reverifyMathLogic")


class TechniqueConfig(_ConfigRecord):
    speculative_decoding: SpeculativeDecodingConfig = Field(
        default_factory=SpeculativeDecodingConfig, alias="speculativeDecoding"
    )
    self_consistency: SelfConsistencyConfig = Field(default_factory=SelfConsistencyConfig, alias="selfConsistency")
    skeleton_of_thought: SkeletonOfThoughtConfig = Field(
        default_factory=SkeletonOfThoughtConfig, alias="skeletonOfThought"
    )
    chain_of_verification: ChainOfVerificationConfig = Field(
        default_factory=ChainOfVerificationConfig, alias="chainOfVerification"
    )


@dataclass(frozen=True)
class InferenceRequest:
    """A single routing request. ``task`` and ``tier`` may be unknown strings."""

    task: Union[Task, str]
    tier: Union[Tier, str]
    prompt: str = ""
    context: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class TechniqueDecision:
    use_speculative: bool = False
    use_self_consistency: bool = False
    use_skeleton_of_thought: bool = False
    use_chain_of_verification: bool = False
    num_samples: int = UNCONFIGURED_NUM_SAMPLES

    def active_techniques(self) -> List[Technique]:
        active: List[Technique] = []
        if self.use_speculative:
            active.append(Technique.SPECULATIVE_DECODING)
        if self.use_self_consistency:
            active.append(Technique.SELF_CONSISTENCY)
        if self.use_skeleton_of_thought:
            active.append(Technique.SKELETON_OF_THOUGHT)
        if self.use_chain_of_verification:
            active.append(Technique.CHAIN_OF_VERIFICATION)
        return active

    @property
    def any_active(self) -> bool:
        return bool(self.active_techniques())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "use_speculative": self.use_speculative,
            "use_self_consistency": self.use_self_consistency,
            "use_skeleton_of_thought": self.use_skeleton_of_thought,
            "use_chain_of_verification": self.use_chain_of_verification,
            "num_samples": self.num_samples,
        }


@dataclass(frozen=True)
class CallEnvelope(Generic[T]):
    """
    Result of a wrapped model call plus technique metadata.

    The caller's result is carried untouched in ``result``; metadata is never
    merged into it.
    """

    result: T
    used_speculative: bool
    used_self_consistency: bool
    used_skeleton_of_thought: bool
    used_chain_of_verification: bool
    processing_ms: int
    confidence: float = FIXED_CONFIDENCE
    verification_badge: VerificationBadge = VerificationBadge.NONE

    def metadata(self) -> Dict[str, Any]:
        return {
            "used_speculative": self.used_speculative,
            "used_self_consistency": self.used_self_consistency,
            "used_skeleton_of_thought": self.used_skeleton_of_thought,
            "used_chain_of_verification": self.used_chain_of_verification,
            "processing_ms": self.processing_ms,
            "confidence": self.confidence,
            "verification_badge": self.verification_badge.value,
        }


__all__ = [
    "Tier",
    "Task",
    "Technique",
    "VerificationBadge",
    "parse_tier",
    "parse_task",
    "SpeculativeDecodingConfig",
    "SelfConsistencyConfig",
    "SkeletonOfThoughtConfig",
    "ChainOfVerificationConfig",
    "TechniqueConfig",
    "InferenceRequest",
    "TechniqueDecision",
    "CallEnvelope",
    "MIN_NUM_SAMPLES",
    "MAX_NUM_SAMPLES",
    "DEFAULT_NUM_SAMPLES",
    "UNCONFIGURED_NUM_SAMPLES",
    "FIXED_CONFIDENCE",
]
