"""Inference-technique preview endpoints."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from backend.app.config import get_settings
from backend.app.inference import (
    InferenceRequest,
    build_inference_prompt,
    progress_message,
    select_techniques,
    status_indicator,
    tier_features,
)
from backend.app.inference.schema import parse_tier
from backend.app.observability.request_id import get_request_id

router = APIRouter(prefix="/api/inference", tags=["inference"])
logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 32_000


class TechniquePreviewRequest(BaseModel):
    task: StrictStr
    tier: Optional[StrictStr] = None
    prompt: StrictStr = Field("", max_length=MAX_PROMPT_CHARS)
    context: Optional[Dict[str, Any]] = None
    config: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


class DecisionPayload(BaseModel):
    use_speculative: bool
    use_self_consistency: bool
    use_skeleton_of_thought: bool
    use_chain_of_verification: bool
    num_samples: int


class TechniquePreviewResponse(BaseModel):
    tier: str
    decision: DecisionPayload
    status: str
    progress_message: str
    augmented_prompt: str


class TierFeaturesResponse(BaseModel):
    tier: str
    features: Dict[str, bool]


@router.post("/techniques", response_model=TechniquePreviewResponse)
async def preview_techniques(payload: TechniquePreviewRequest, request: Request) -> TechniquePreviewResponse:
    tier = payload.tier or get_settings().default_tier_value()
    inference_request = InferenceRequest(
        task=payload.task,
        tier=tier,
        prompt=payload.prompt,
        context=payload.context,
    )
    decision = select_techniques(inference_request, payload.config, tier)
    logger.info(
        "[API] technique preview",
        extra={
            "request_id": getattr(request.state, "request_id", None) or get_request_id(request),
            "task": payload.task,
            "tier": tier,
            "configured": payload.config is not None,
            "techniques": [t.value for t in decision.active_techniques()],
        },
    )
    return TechniquePreviewResponse(
        tier=tier,
        decision=DecisionPayload(**decision.as_dict()),
        status=status_indicator(decision),
        progress_message=progress_message(decision),
        augmented_prompt=build_inference_prompt(payload.prompt, decision),
    )


@router.get("/tiers/{tier}", response_model=TierFeaturesResponse)
async def get_tier_features(tier: str) -> TierFeaturesResponse:
    parsed = parse_tier(tier)
    if parsed is None:
        raise HTTPException(status_code=404, detail=f"unknown tier: {tier[:32]}")
    features = tier_features(parsed)
    return TierFeaturesResponse(
        tier=parsed.value,
        features={technique.value: allowed for technique, allowed in features.items()},
    )


__all__ = ["router"]
