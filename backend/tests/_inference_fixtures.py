"""Config builders and a recording notifier shared by the inference tests."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from backend.app.inference.schema import TechniqueConfig


def all_on_config(num_samples: int | None = 3, auto_verify: bool = True) -> TechniqueConfig:
    return TechniqueConfig.model_validate(
        {
            "speculative_decoding": {
                "enabled": True,
                "auto_activate_on_campaigns": True,
                "auto_activate_on_website_gen": True,
                "auto_activate_on_rlm": True,
            },
            "self_consistency": {
                "enabled": True,
                "num_samples": num_samples,
                "use_on_consistency_score": True,
                "use_on_dna_extraction": True,
                "use_on_closer_replies": True,
            },
            "skeleton_of_thought": {
                "enabled": True,
                "live_ui_enabled": True,
                "use_on_battle_mode": True,
                "use_on_campaign_planning": True,
                "use_on_rlm_analysis": True,
            },
            "chain_of_verification": {
                "enabled": True,
                "auto_verify_all_paid_outputs": auto_verify,
                "check_cross_references": True,
                "flag_inconsistencies": True,
                "reverify_math_logic": True,
            },
        }
    )


def camel_case_settings() -> Dict[str, Any]:
    """Shape stored by the web client under GlobalSettings.inference."""
    return {
        "speculativeDecoding": {
            "enabled": True,
            "autoActivateOnCampaigns": True,
            "autoActivateOnWebsiteGen": False,
            "autoActivateOnRLM": False,
        },
        "selfConsistency": {
            "enabled": True,
            "numSamples": 4,
            "useOnConsistencyScore": True,
            "useOnDNAExtraction": False,
            "useOnCloserReplies": False,
        },
        "skeletonOfThought": {
            "enabled": True,
            "liveUIEnabled": True,
            "useOnBattleMode": True,
            "useOnCampaignPlanning": False,
            "useOnRLMAnalysis": False,
        },
        "chainOfVerification": {
            "enabled": True,
            "autoVerifyAllPaidOutputs": True,
            "checkCrossReferences": True,
            "flagInconsistencies": True,
            "reverifyMathLogic": False,
        },
    }


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    def progress(self, message: str) -> None:
        self.calls.append(("progress", message))

    def complete(self, message: str) -> None:
        self.calls.append(("complete", message))

    def failed(self, message: str) -> None:
        self.calls.append(("failed", message))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.calls]

    def messages(self, kind: str) -> List[str]:
        return [message for k, message in self.calls if k == kind]
