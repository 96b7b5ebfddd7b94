# scoring/routers/attempts.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from db import SessionLocal
from deps.auth import require_client
from feedback import FeedbackProvider, analyze_error_patterns, pattern_summary
from models import Attempt
from routers.tagging import get_feedback_provider
from schemas.attempts import AttemptOut, AttemptSummaryOut

logger = logging.getLogger("mathtutor-scoring.attempts")

router = APIRouter(prefix="/attempts", tags=["attempts"])


@router.get("/recent-list", dependencies=[Depends(require_client)])
def attempts_recent(limit: int = 20, session_id: Optional[str] = None):
    limit = max(1, min(limit, 100))

    with SessionLocal() as db:
        query = db.query(Attempt)
        if session_id:
            query = query.filter(Attempt.session_id == session_id)
        items = query.order_by(Attempt.created_at.desc()).limit(limit).all()

    # Reuse schema; exclude potentially large JSON "items"
    rows = [AttemptOut.model_validate(a).model_dump(exclude={"items"}) for a in items]
    return {"ok": True, "items": rows, "count": len(rows)}


def _load_attempt(attempt_id: int) -> Attempt:
    with SessionLocal() as db:
        a = db.get(Attempt, attempt_id)
        if not a:
            raise HTTPException(status_code=404, detail="Attempt not found")
        return a


@router.get("/{attempt_id}", response_model=AttemptOut)
def get_attempt(attempt_id: int):
    # Public endpoint: no admin token required
    return AttemptOut.model_validate(_load_attempt(attempt_id))


@router.get("/{attempt_id}/summary", response_model=AttemptSummaryOut)
def get_attempt_summary(
    attempt_id: int,
    lesson_id: Optional[str] = Query(default=None, max_length=64),
    provider: FeedbackProvider = Depends(get_feedback_provider),
):
    incorrect = _load_attempt(attempt_id).incorrect_items()
    patterns = analyze_error_patterns(incorrect)
    if patterns:
        logger.info("attempt %s error patterns: %s", attempt_id, pattern_summary(patterns))
    return {
        "attempt_id": attempt_id,
        "incorrect": len(incorrect),
        "feedback": provider.summary(incorrect, lesson_id=lesson_id),
        "patterns": [
            {"tag": p.tag, "count": p.count, "examples": p.examples} for p in patterns
        ],
    }
