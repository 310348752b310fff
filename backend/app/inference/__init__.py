from .schema import (
    CallEnvelope,
    ChainOfVerificationConfig,
    InferenceRequest,
    SelfConsistencyConfig,
    SkeletonOfThoughtConfig,
    SpeculativeDecodingConfig,
    Task,
    Technique,
    TechniqueConfig,
    TechniqueDecision,
    Tier,
    VerificationBadge,
)
from .access import TIER_ACCESS, is_feature_available, tier_features
from .selector import coerce_technique_config, select_techniques
from .augmenter import build_inference_prompt
from .status import failure_message, progress_message, status_indicator, summary_message
from .notify import CallbackNotifier, LogNotifier, Notifier, as_notifier
from .wrapper import wrap_call
from .runner import inference_status, run_inference

__all__ = [
    "CallEnvelope",
    "ChainOfVerificationConfig",
    "InferenceRequest",
    "SelfConsistencyConfig",
    "SkeletonOfThoughtConfig",
    "SpeculativeDecodingConfig",
    "Task",
    "Technique",
    "TechniqueConfig",
    "TechniqueDecision",
    "Tier",
    "VerificationBadge",
    "TIER_ACCESS",
    "is_feature_available",
    "tier_features",
    "coerce_technique_config",
    "select_techniques",
    "build_inference_prompt",
    "failure_message",
    "progress_message",
    "status_indicator",
    "summary_message",
    "CallbackNotifier",
    "LogNotifier",
    "Notifier",
    "as_notifier",
    "wrap_call",
    "inference_status",
    "run_inference",
]
