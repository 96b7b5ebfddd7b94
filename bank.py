# services/scoring/bank.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ValidationError
from sympy import Integer, nsimplify
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

from questions import QUESTIONS
from tagging import strategy_tag

logger = logging.getLogger("mathtutor-scoring.bank")

_BASE = Path(__file__).resolve().parent
_DATA_DIR = _BASE / "data" / "questions"  # sharded overrides

TRANSFORMS = standard_transformations + (convert_xor,)
_EXPR_CHARS = set("0123456789+-*/^(). ")


class QuestionModel(BaseModel):
    id: str
    topic: str
    prompt: str
    type: str = "addition"
    answer: Optional[int] = None
    answer_expr: Optional[str] = None
    strategy_tag: Optional[str] = None


def _eval_int(expr: str) -> int:
    """Evaluate a plain arithmetic expression to an exact integer."""
    s = expr.strip()
    if not s or not set(s) <= _EXPR_CHARS:
        raise ValueError(f"not an arithmetic expression: {expr!r}")
    val = nsimplify(parse_expr(s, transformations=TRANSFORMS, evaluate=True))
    if not isinstance(val, Integer):
        raise ValueError(f"expression is not a whole number: {expr!r}")
    return int(val)


def _expression_from_prompt(prompt: str) -> str:
    # "What is 7 + 7?" -> "7 + 7"
    return "".join(ch for ch in prompt if ch in _EXPR_CHARS).strip()


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    q = QuestionModel(**raw)
    if q.answer is None:
        try:
            q.answer = _eval_int(q.answer_expr or _expression_from_prompt(q.prompt))
        except Exception as e:
            raise ValueError(f"question {q.id}: cannot compute answer ({e})") from e
    if not q.strategy_tag:
        q.strategy_tag = strategy_tag(q.prompt)
    return q.model_dump()


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                logger.debug("skipping malformed row in %s", p.name)
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            data = []
    if isinstance(data, list):
        yield from data


def _load_records(records: Iterable[Dict[str, Any]], into: List[Dict[str, Any]]) -> None:
    for raw in records:
        try:
            into.append(_normalize(raw))
        except (ValidationError, ValueError, TypeError) as e:
            logger.debug("skipping invalid question: %s", e)
            continue


class QuestionBank:
    _questions: List[Dict[str, Any]] = []
    data_dir: Path = _DATA_DIR

    @classmethod
    def load(cls) -> List[Dict[str, Any]]:
        if not cls._questions:
            cls.reload()
        return cls._questions

    @classmethod
    def reload(cls) -> int:
        questions: List[Dict[str, Any]] = []

        if cls.data_dir.exists():
            for p in sorted(cls.data_dir.rglob("*")):
                if not p.is_file():
                    continue
                suf = p.suffix.lower()
                if suf == ".jsonl":
                    _load_records(_iter_jsonl(p), questions)
                elif suf == ".json":
                    _load_records(_iter_json(p), questions)

        # Built-in drills if nothing valid was found on disk
        if not questions:
            _load_records(QUESTIONS, questions)

        cls._questions = questions
        logger.info("question bank loaded: %d questions", len(questions))
        return len(cls._questions)


# Public API
def get_questions() -> List[Dict[str, Any]]:
    return QuestionBank.load()


def reload_bank() -> int:
    return QuestionBank.reload()


def find_question(qid: str) -> Optional[Dict[str, Any]]:
    return next((q for q in get_questions() if q.get("id") == qid), None)
