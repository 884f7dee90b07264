"""Error response schema: 401 and 500 bodies carry ``message`` and, for upstream failures, ``detail``."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ErrorMessage(BaseModel):
    message: str
    detail: Optional[str] = None
