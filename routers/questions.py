from __future__ import annotations

import random as _rnd
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from bank import find_question, get_questions
from schemas.questions import QuestionOut

router = APIRouter(tags=["questions"])


@router.get("/questions", response_model=List[QuestionOut])
def list_questions(
    topic: Optional[str] = None,
    strategy: Optional[str] = Query(default=None, description="e.g. make-10, doubles"),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    random: bool = Query(default=False, description="If true, shuffle before limiting"),
):
    # copy so shuffling never reorders the bank itself
    qs = list(get_questions())

    if topic:
        qs = [q for q in qs if q.get("topic") == topic]
    if strategy:
        qs = [q for q in qs if q.get("strategy_tag") == strategy]

    if random:
        _rnd.shuffle(qs)

    if limit is not None:
        qs = qs[:limit]

    return qs


@router.get("/questions/{qid}", response_model=QuestionOut)
def get_question_detail(qid: str):
    q = find_question(qid)
    if not q:
        raise HTTPException(status_code=404, detail="question not found")
    return q
