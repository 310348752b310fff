from __future__ import annotations

from typing import Dict, Union

from backend.app.inference.schema import Technique, Tier, parse_tier

# Fixed tier access matrix. Every tier defines every technique.
TIER_ACCESS: Dict[Tier, Dict[Technique, bool]] = {
    Tier.FREE: {
        Technique.SPECULATIVE_DECODING: False,
        Technique.SELF_CONSISTENCY: False,
        Technique.SKELETON_OF_THOUGHT: False,
        Technique.CHAIN_OF_VERIFICATION: False,
    },
    Tier.CORE: {
        Technique.SPECULATIVE_DECODING: False,
        Technique.SELF_CONSISTENCY: True,  # quality mode
        Technique.SKELETON_OF_THOUGHT: False,
        Technique.CHAIN_OF_VERIFICATION: False,
    },
    Tier.PRO: {
        Technique.SPECULATIVE_DECODING: True,
        Technique.SELF_CONSISTENCY: True,
        Technique.SKELETON_OF_THOUGHT: True,
        Technique.CHAIN_OF_VERIFICATION: True,
    },
    Tier.HUNTER: {
        Technique.SPECULATIVE_DECODING: True,
        Technique.SELF_CONSISTENCY: True,
        Technique.SKELETON_OF_THOUGHT: True,
        Technique.CHAIN_OF_VERIFICATION: True,
    },
}

_NO_ACCESS: Dict[Technique, bool] = {technique: False for technique in Technique}


def tier_features(tier: Union[Tier, str, None]) -> Dict[Technique, bool]:
    """Access flags for ``tier``; unknown tiers get nothing."""
    parsed = parse_tier(tier)
    if parsed is None:
        return dict(_NO_ACCESS)
    return dict(TIER_ACCESS[parsed])


def is_feature_available(tier: Union[Tier, str, None], technique: Technique) -> bool:
    return tier_features(tier).get(technique, False) is True


__all__ = ["TIER_ACCESS", "tier_features", "is_feature_available"]
