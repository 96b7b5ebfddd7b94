from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    total: int
    correct: int
    duration_ms: int | None = None
    session_id: str | None = None
    # per-item tagging results; usually excluded in list views
    items: list[Any] | dict | None = None


class ErrorPatternOut(BaseModel):
    tag: str
    count: int
    examples: List[dict]


class AttemptSummaryOut(BaseModel):
    attempt_id: int
    incorrect: int
    feedback: str
    patterns: List[ErrorPatternOut]
