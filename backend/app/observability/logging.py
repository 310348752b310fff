from __future__ import annotations

import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Keys that may carry prompt text or caller-supplied context values
_REDACTED_KEYS = ("prompt", "augmented_prompt", "context", "user_text", "result", "payload", "body")


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    # Shallow redact known risky keys
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in _REDACTED_KEYS:
        if key in redacted:
            redacted.pop(key)
    return redacted


def structured_log(event: Dict[str, Any]) -> None:
    try:
        safe_event = safe_redact(event)
        logger.info(json.dumps(safe_event, separators=(",", ":"), ensure_ascii=False, default=str))
    except Exception:
        # logging must never break the request path
        return


__all__ = ["structured_log", "safe_redact"]
