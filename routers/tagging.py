from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from bank import find_question, get_questions
from feedback import CORRECT_FEEDBACK, FeedbackCache, FeedbackProvider
from schemas.tagging import (
    ClassifyRequest,
    ClassifyResponse,
    SeverityRequest,
    SeverityResponse,
    StrategyResponse,
    TagBatchRequest,
    TagBatchResponse,
    TagRequest,
    TagResponse,
)
from tagging import classify as classify_answer
from tagging import severity as severity_of
from tagging import strategy_tag

logger = logging.getLogger("mathtutor-scoring.tagging")

router = APIRouter(tags=["tagging"])

# --- Feedback provider ------------------------------------------------------------
# One cache per process, owned here and handed to the provider.
feedback_cache = FeedbackCache()
_provider: Optional[FeedbackProvider] = None


def get_feedback_provider() -> FeedbackProvider:
    global _provider
    if _provider is None:
        _provider = FeedbackProvider(cache=feedback_cache)
    return _provider


# --- Core -------------------------------------------------------------------------


def _tag_one(
    question: str, user_answer: int, correct_answer: int, provider: FeedbackProvider
) -> Dict[str, Any]:
    correct = user_answer == correct_answer
    tags = [] if correct else classify_answer(question, user_answer, correct_answer)
    if correct:
        text = CORRECT_FEEDBACK
    else:
        text = provider.feedback(question, user_answer, correct_answer, tags)
    return {
        "ok": True,
        "correct": correct,
        "tags": tags,
        "severity": severity_of(tags),
        "strategy": strategy_tag(question),
        "feedback": text,
        "question": question,
        "user_answer": user_answer,
        "correct_answer": correct_answer,
    }


def _unknown_question() -> Dict[str, Any]:
    return {"ok": False, "correct": False, "tags": [], "feedback": "unknown question id"}


# --- Endpoints --------------------------------------------------------------------


@router.post("/classify", response_model=ClassifyResponse)
def classify(req: ClassifyRequest, provider: FeedbackProvider = Depends(get_feedback_provider)):
    return _tag_one(req.question, req.user_answer, req.correct_answer, provider)


@router.get("/strategy", response_model=StrategyResponse)
def strategy(question: str = Query(min_length=1, max_length=100)):
    return {"question": question, "strategy": strategy_tag(question)}


@router.post("/severity", response_model=SeverityResponse)
def severity(req: SeverityRequest):
    return {"severity": severity_of(req.tags)}


@router.post("/tag", response_model=TagResponse)
def tag(req: TagRequest, provider: FeedbackProvider = Depends(get_feedback_provider)):
    q = find_question(req.id)
    if not q:
        return _unknown_question()
    return _tag_one(q["prompt"], req.answer, q["answer"], provider)


@router.post("/tag-batch", response_model=TagBatchResponse)
def tag_batch(req: TagBatchRequest, provider: FeedbackProvider = Depends(get_feedback_provider)):
    t0 = time.perf_counter()

    questions_by_id = {q["id"]: q for q in get_questions()}
    results: List[Dict[str, Any]] = []
    correct_count = 0

    for it in req.items:
        q = questions_by_id.get(it.id)
        if not q:
            res = _unknown_question()
        else:
            res = _tag_one(q["prompt"], it.answer, q["answer"], provider)
            res["strategy"] = q.get("strategy_tag") or res["strategy"]
        results.append({"id": it.id, "response": res})
        if res.get("correct"):
            correct_count += 1

    total = len(results)
    measured_ms = int(round((time.perf_counter() - t0) * 1000))
    duration_ms = req.duration_ms if req.duration_ms is not None else measured_ms

    attempt_id: Optional[int] = None
    try:
        from db import SessionLocal
        from models import Attempt

        with SessionLocal() as db:
            attempt = Attempt(
                total=total,
                correct=correct_count,
                items=results,
                duration_ms=duration_ms,
                session_id=req.session_id,
            )
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
            attempt_id = attempt.id
    except Exception as e:
        logger.warning("could not record attempt: %s", e)
        attempt_id = None

    return {
        "ok": True,
        "total": total,
        "correct": correct_count,
        "results": results,
        "attempt_id": attempt_id,
        "duration_ms": duration_ms,
    }
