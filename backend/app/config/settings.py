from __future__ import annotations

import functools
import json
from typing import Annotated, Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_KNOWN_TIERS = ("free", "core", "pro", "hunter")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    request_id_header: str = Field("x-request-id", alias="REQUEST_ID_HEADER")
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=list, alias="CORS_ORIGINS")

    # Inference routing
    default_tier: str = Field("free", alias="INFERENCE_DEFAULT_TIER")
    emit_metrics: int = Field(1, alias="INFERENCE_EMIT_METRICS")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        if isinstance(v, str):
            text = v.strip()
            if not text:
                return []
            if text == "*":
                return ["*"]
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
            return [item.strip() for item in text.split(",") if item.strip()]
        return []

    @field_validator("emit_metrics")
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(0, v)

    @field_validator("app_env", "default_tier")
    @classmethod
    def normalize_lower(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    def default_tier_value(self) -> str:
        """Configured default tier, falling back to free for unknown values."""
        return self.default_tier if self.default_tier in _KNOWN_TIERS else "free"

    @property
    def metrics_enabled(self) -> bool:
        return bool(self.emit_metrics)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def settings_public_summary(settings: Settings | None = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "log_level": s.log_level,
        "default_tier": s.default_tier_value(),
        "metrics_enabled": s.metrics_enabled,
        "cors_origins": len(s.cors_origins),
    }


__all__ = ["Settings", "get_settings", "settings_public_summary"]
