# services/scoring/tagging.py
"""
Rule-based error tagging for single-digit addition drills.

Given the question text ("8 + 5"), the student's answer and the correct answer,
``classify`` returns the misconception tags that apply, ``severity`` ranks a tag
list and ``strategy_tag`` names the addition strategy a question exercises.

Everything here is pure: no I/O, no caching, no shared state.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

# --- Vocabulary -------------------------------------------------------------------
# Tag strings are a public contract (feedback templates, stored attempts).

PARSE_ERROR = "parse_error"
COMPLEMENT_MISS = "complement_miss"
DOUBLE_MISS_LOW = "double_miss_low"
DOUBLE_MISS_HIGH = "double_miss_high"
DOUBLE_MAJOR_ERROR = "double_major_error"
NEAR_DOUBLE_WRONG_BASE = "near_double_wrong_base"
NEAR_DOUBLE_WRONG_DOUBLE = "near_double_wrong_double"
NEAR_DOUBLE_OFF = "near_double_off"
INCOMPLETE_ADDITION = "incomplete_addition"
COUNTING_ERROR = "counting_error"
OFF_BY_ONE = "off_by_one"
COMMUTATIVE_CONFUSION = "commutative_confusion"

TAG_VOCABULARY: Tuple[str, ...] = (
    PARSE_ERROR,
    COMPLEMENT_MISS,
    DOUBLE_MISS_LOW,
    DOUBLE_MISS_HIGH,
    DOUBLE_MAJOR_ERROR,
    NEAR_DOUBLE_WRONG_BASE,
    NEAR_DOUBLE_WRONG_DOUBLE,
    NEAR_DOUBLE_OFF,
    INCOMPLETE_ADDITION,
    COUNTING_ERROR,
    OFF_BY_ONE,
    COMMUTATIVE_CONFUSION,
)

CRITICAL = "critical"
MODERATE = "moderate"
MINOR = "minor"

_CRITICAL_TAGS = frozenset({INCOMPLETE_ADDITION, COUNTING_ERROR, DOUBLE_MAJOR_ERROR})
_MODERATE_TAGS = frozenset(
    {COMPLEMENT_MISS, DOUBLE_MISS_LOW, DOUBLE_MISS_HIGH, NEAR_DOUBLE_WRONG_BASE}
)

STRATEGY_UNKNOWN = "unknown"
STRATEGY_DOUBLES = "doubles"
STRATEGY_NEAR_DOUBLE = "near-double"
STRATEGY_MAKE_10 = "make-10"
STRATEGY_COMPLEMENT = "complement"
STRATEGY_BASIC = "basic-addition"

STRATEGIES: Tuple[str, ...] = (
    STRATEGY_DOUBLES,
    STRATEGY_NEAR_DOUBLE,
    STRATEGY_MAKE_10,
    STRATEGY_COMPLEMENT,
    STRATEGY_BASIC,
)

_NUMBER_RE = re.compile(r"\d+")


# --- Parsing ----------------------------------------------------------------------


def extract_operands(question: str) -> Optional[Tuple[int, int]]:
    """First two runs of digits in reading order, or None if there are fewer."""
    numbers = _NUMBER_RE.findall(question or "")
    if len(numbers) < 2:
        return None
    return int(numbers[0]), int(numbers[1])


# --- Rules ------------------------------------------------------------------------


def classify(question: str, user_answer: int, correct_answer: int) -> List[str]:
    operands = extract_operands(question)
    if operands is None:
        return [PARSE_ERROR]

    if user_answer == correct_answer:
        return []

    num1, num2 = operands
    total = num1 + num2
    diff = abs(user_answer - total)
    tags: List[str] = []

    def add(tag: str) -> None:
        if tag not in tags:
            tags.append(tag)

    # Made 10 but dropped the remainder, or landed one short past 10 (8 + 5 = 12)
    if total >= 10 and (user_answer == total - 1 or (user_answer == 10 and total > 10)):
        add(COMPLEMENT_MISS)

    if num1 == num2:
        if user_answer == total - 1:
            add(DOUBLE_MISS_LOW)
        elif user_answer == total + 1:
            add(DOUBLE_MISS_HIGH)
        elif diff > 2:
            add(DOUBLE_MAJOR_ERROR)

    if abs(num1 - num2) == 1:
        smaller = min(num1, num2)
        double_of_smaller = smaller * 2
        double_of_larger = (smaller + 1) * 2
        if user_answer == double_of_smaller:
            add(NEAR_DOUBLE_WRONG_BASE)
        elif user_answer == double_of_larger:
            add(NEAR_DOUBLE_WRONG_DOUBLE)
        elif user_answer == double_of_smaller + 1:
            add(NEAR_DOUBLE_OFF)

    wrote_an_operand = user_answer in (num1, num2)
    if wrote_an_operand:
        add(INCOMPLETE_ADDITION)

    if diff > 2 and DOUBLE_MAJOR_ERROR not in tags:
        add(COUNTING_ERROR)

    if diff == 1:
        add(OFF_BY_ONE)

    # Same trigger as incomplete_addition; kept so stored tag sets stay comparable.
    if wrote_an_operand:
        add(COMMUTATIVE_CONFUSION)

    return tags


def strategy_tag(question: str) -> str:
    operands = extract_operands(question)
    if operands is None:
        return STRATEGY_UNKNOWN
    num1, num2 = operands

    if num1 == num2:
        return STRATEGY_DOUBLES
    if abs(num1 - num2) == 1:
        return STRATEGY_NEAR_DOUBLE
    if num1 + num2 == 10:
        return STRATEGY_MAKE_10
    if (7 <= num1 <= 9 and 1 <= num2 <= 3) or (7 <= num2 <= 9 and 1 <= num1 <= 3):
        return STRATEGY_COMPLEMENT
    return STRATEGY_BASIC


def severity(tags: Iterable[str]) -> str:
    """
    critical: a fundamental gap (only one addend used, far off).
    moderate: a strategy slip (make-10 or doubles misapplied).
    minor:    everything else, including an empty tag list.
    """
    tag_set = set(tags)
    if not tag_set:
        return MINOR
    if tag_set & _CRITICAL_TAGS:
        return CRITICAL
    if tag_set & _MODERATE_TAGS:
        return MODERATE
    return MINOR
