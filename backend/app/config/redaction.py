from __future__ import annotations

import re

# OpenAI / Anthropic style keys and Google AI Studio keys
_API_KEY_PATTERN = re.compile(r"(sk-[A-Za-z0-9_\-]{8,}|AIza[0-9A-Za-z_\-]{20,})")


def redact_secrets(s: str) -> str:
    if not s:
        return s
    redacted = _API_KEY_PATTERN.sub("[redacted]", s)
    redacted = re.sub(r"(Authorization:\s*Bearer\s+)[^\s]+", r"\1[redacted]", redacted, flags=re.IGNORECASE)
    return redacted


def safe_error_detail(exc: BaseException) -> str:
    text = str(exc)
    text = redact_secrets(text)
    return text[:200]


__all__ = ["redact_secrets", "safe_error_detail"]
