# services/scoring/schemas/tagging.py
from __future__ import annotations

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from tagging import TAG_VOCABULARY

# Answers are whole numbers a K-1 student can type.
Answer = Annotated[int, Field(ge=0, le=20)]

SeverityLevel = Literal["critical", "moderate", "minor"]

# ---------- Classify (free text) ----------


class ClassifyRequest(BaseModel):
    question: str = Field(min_length=1, max_length=100)
    user_answer: Answer
    correct_answer: Answer


class ClassifyResponse(BaseModel):
    ok: bool
    correct: bool
    tags: List[str]
    severity: SeverityLevel
    strategy: str
    feedback: str


class StrategyResponse(BaseModel):
    question: str
    strategy: str


class SeverityRequest(BaseModel):
    tags: List[str]

    @field_validator("tags")
    @classmethod
    def _known_tags(cls, v: List[str]) -> List[str]:
        unknown = [t for t in v if t not in TAG_VOCABULARY]
        if unknown:
            raise ValueError(f"unknown tags: {unknown}")
        return v


class SeverityResponse(BaseModel):
    severity: SeverityLevel


# ---------- Tag single (bank question) ----------


class TagRequest(BaseModel):
    id: str
    answer: Answer


class TagResponse(BaseModel):
    ok: bool
    correct: bool
    tags: List[str] = []
    severity: Optional[SeverityLevel] = None
    strategy: Optional[str] = None
    feedback: str
    question: Optional[str] = None
    user_answer: Optional[int] = None
    correct_answer: Optional[int] = None


# ---------- Tag batch ----------


class TagBatchItem(BaseModel):
    id: str
    response: TagResponse


class TagBatchRequest(BaseModel):
    items: List[TagRequest]
    # Client-measured duration wins; the server timing is used only when omitted.
    duration_ms: Optional[int] = None
    session_id: Optional[str] = Field(default=None, max_length=64)


class TagBatchResponse(BaseModel):
    ok: bool
    total: int
    correct: int
    results: List[TagBatchItem]
    attempt_id: Optional[int] = None
    duration_ms: Optional[int] = None
