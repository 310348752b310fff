from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Request

from backend.app.config import get_settings


def get_request_id(request: Optional[Request]) -> str:
    if request is None:
        return str(uuid.uuid4())
    header = get_settings().request_id_header
    rid = request.headers.get(header) or request.headers.get("x-request-id")
    if rid and rid.strip():
        return rid.strip()[:128]
    return str(uuid.uuid4())


__all__ = ["get_request_id"]
