# services/scoring/feedback.py
"""
Kid-friendly feedback text for incorrect answers.

Uses an OpenAI chat model when OPENAI_API_KEY is set (or a client is injected),
otherwise a fixed template per tag. Results are memoised in a FeedbackCache that
the caller owns and passes in.
"""

from __future__ import annotations

import logging
import os
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from tagging import (
    COMMUTATIVE_CONFUSION,
    COMPLEMENT_MISS,
    COUNTING_ERROR,
    DOUBLE_MAJOR_ERROR,
    DOUBLE_MISS_HIGH,
    DOUBLE_MISS_LOW,
    INCOMPLETE_ADDITION,
    NEAR_DOUBLE_OFF,
    NEAR_DOUBLE_WRONG_BASE,
    NEAR_DOUBLE_WRONG_DOUBLE,
    OFF_BY_ONE,
    PARSE_ERROR,
)

logger = logging.getLogger("mathtutor-scoring.feedback")

# --- Config -----------------------------------------------------------------------
FEEDBACK_MODEL = os.getenv("FEEDBACK_MODEL", "gpt-3.5-turbo")
FEEDBACK_TIMEOUT = float(os.getenv("FEEDBACK_TIMEOUT", "15.0"))
FEEDBACK_CACHE_SIZE = int(os.getenv("FEEDBACK_CACHE_SIZE", "512"))

GENERAL_ERROR = "general_error"
CORRECT_FEEDBACK = "Correct! Well done!"
NO_ERRORS_SUMMARY = "Great effort on this quiz! Keep practicing to master this strategy!"

FALLBACK_TEMPLATES: Dict[str, str] = {
    COMPLEMENT_MISS: 'Great effort! Let\'s use the "Make 10" strategy. Break it into 10 + more.',
    DOUBLE_MISS_LOW: "Great effort! Let's double-check by counting on our fingers.",
    DOUBLE_MISS_HIGH: "Great effort! Remember, when we double, we count by 2s. Try again!",
    DOUBLE_MAJOR_ERROR: "Great effort! A double is the same number two times. Show it with both hands!",
    NEAR_DOUBLE_WRONG_BASE: "Great effort! Start with the double, then add one more.",
    NEAR_DOUBLE_WRONG_DOUBLE: "Great effort! Use the double of the smaller number, then add one more.",
    NEAR_DOUBLE_OFF: "So close! Find the double first, then count one more very carefully.",
    INCOMPLETE_ADDITION: "Great effort! Don't forget - we need to add BOTH numbers together.",
    COUNTING_ERROR: "Great effort! Let's count more slowly using our fingers or blocks.",
    OFF_BY_ONE: "Almost there! You're just one away. Let's recount together.",
    COMMUTATIVE_CONFUSION: "Great effort! 8 + 2 and 2 + 8 make the same total. Add both numbers!",
    PARSE_ERROR: "Great effort! Let's look at the problem together one more time.",
    GENERAL_ERROR: "Great effort! Let's try a different way to solve this problem.",
}

_PROMPT_HINTS: Dict[str, str] = {
    COMPLEMENT_MISS: (
        'The student might not have used the "Make 10" strategy. '
        "Suggest counting up to 10 first."
    ),
    DOUBLE_MISS_LOW: (
        "The student might have miscounted their doubles. "
        "Suggest using fingers or drawing to double-check."
    ),
    DOUBLE_MISS_HIGH: (
        "The student might have miscounted their doubles. "
        "Suggest using fingers or drawing to double-check."
    ),
    NEAR_DOUBLE_WRONG_BASE: (
        "The student might have used the wrong double. "
        "Suggest they start with the double, then add 1 more."
    ),
    INCOMPLETE_ADDITION: (
        "The student may have only added one number. Remind them to add BOTH numbers."
    ),
    COUNTING_ERROR: (
        "The student's answer is too far off. "
        "Suggest counting on fingers or using manipulatives to recount."
    ),
    OFF_BY_ONE: "They're very close! Just off by one. Suggest recounting more slowly.",
}

_SUMMARY_DESCRIPTIONS: Dict[str, str] = {
    "make-10": "understanding how to use the Make-10 strategy",
    "complement": "finding complement pairs that make 10",
    "splitting": "splitting numbers correctly",
    "general": "solving these types of problems",
}


def fallback_feedback(tags: Sequence[str]) -> str:
    primary = tags[0] if tags else GENERAL_ERROR
    return FALLBACK_TEMPLATES.get(primary, FALLBACK_TEMPLATES[GENERAL_ERROR])


def build_prompt(question: str, user_answer: int, correct_answer: int, primary_tag: str) -> str:
    prompt = (
        f'You are a kindergarten math tutor. A student solved "{question}" and got '
        f"{user_answer} (the correct answer is {correct_answer}).\n\n"
        f"Error type: {primary_tag}.\n\n"
        "Generate ONLY a short, encouraging tip (under 50 words, kid-friendly language) "
        "to help them learn.\n"
        'Start with "Great effort!" and suggest one visual strategy.\n'
        "Do NOT explain the full solution - just guide them toward the strategy."
    )
    hint = _PROMPT_HINTS.get(primary_tag)
    if hint:
        prompt += f"\nHint: {hint}"
    return prompt


# --- Cache ------------------------------------------------------------------------


class FeedbackCache:
    """Thread-safe bounded LRU map of cache_key(question, tags) -> feedback text."""

    def __init__(self, max_size: int = FEEDBACK_CACHE_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def cache_key(question: str, tags: Iterable[str]) -> str:
        return f"{question}:{','.join(tags)}"

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._data.get(key)
            if value is not None:
                self._data.move_to_end(key)
            return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.max_size:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data


# --- Summary analysis -------------------------------------------------------------


@dataclass
class ErrorPattern:
    tag: str
    count: int = 0
    examples: List[Dict[str, Any]] = field(default_factory=list)


def analyze_error_patterns(items: Iterable[Dict[str, Any]]) -> List[ErrorPattern]:
    """
    Group incorrect answers by the strategy they exercise, most frequent first.

    Each item needs ``question``, ``user_answer``, ``correct_answer`` and may carry
    ``strategy`` (missing -> "general"). Keeps up to three examples per pattern.
    """
    patterns: Dict[str, ErrorPattern] = {}
    for it in items:
        tag = it.get("strategy") or "general"
        pattern = patterns.setdefault(tag, ErrorPattern(tag=tag))
        pattern.count += 1
        if len(pattern.examples) < 3:
            pattern.examples.append(
                {
                    "question": it.get("question"),
                    "user_answer": it.get("user_answer"),
                    "correct_answer": it.get("correct_answer"),
                }
            )
    return sorted(patterns.values(), key=lambda p: p.count, reverse=True)


def pattern_summary(patterns: Sequence[ErrorPattern]) -> str:
    return " | ".join(
        f"{p.tag}: {p.count} errors ({p.examples[0]['question'] if p.examples else ''})"
        for p in patterns
    )


def fallback_summary(incorrect_count: int, top: ErrorPattern) -> str:
    desc = (
        _SUMMARY_DESCRIPTIONS.get(top.tag)
        or _SUMMARY_DESCRIPTIONS.get(top.tag.split("_")[0])
        or _SUMMARY_DESCRIPTIONS["general"]
    )
    plural = "" if incorrect_count == 1 else "s"
    return (
        f"Great effort on the quiz! You got {incorrect_count} question{plural} to think about. "
        f"I noticed you're working on {desc}. Try drawing a picture or using your fingers "
        "to help you see how the numbers break apart. Keep practicing - you're making progress!"
    )


def _build_summary_prompt(
    incorrect_count: int, top: ErrorPattern, examples_text: str, lesson_id: Optional[str]
) -> str:
    if lesson_id == "lesson-1":
        lesson_context = (
            'The lesson is about "Making 10" - using complements and splitting numbers '
            "to solve addition."
        )
    else:
        lesson_context = "The lesson is about a specific math strategy for addition."
    return (
        "You are a kindergarten math teacher providing encouragement and guidance to a "
        "student who didn't yet master a lesson.\n\n"
        f"{lesson_context}\n\n"
        f"The student got {incorrect_count} questions wrong, with the most common issue "
        f'being related to: "{top.tag}"\n\n'
        f"Examples of what went wrong:\n{examples_text}\n\n"
        "Write a warm, encouraging summary feedback (2-3 sentences, 50-80 words) that:\n"
        "1. Acknowledges their effort positively\n"
        "2. Identifies the specific pattern they struggled with (focus on the "
        'strategy/technique, not just "you got it wrong")\n'
        "3. Gives ONE concrete, specific tip for improvement\n"
        "4. Ends encouragingly\n\n"
        "Use simple, kid-friendly language. No jargon."
    )


# --- Provider ---------------------------------------------------------------------


class FeedbackProvider:
    """
    Produces feedback text; never raises.

    ``client`` is anything with ``chat.completions.create(...)`` (an ``openai.OpenAI``
    instance in production). When omitted, one is created lazily if OPENAI_API_KEY
    is set; otherwise templates are used.
    """

    def __init__(
        self,
        cache: Optional[FeedbackCache] = None,
        client: Any = None,
        api_key: Optional[str] = None,
        model: str = FEEDBACK_MODEL,
    ):
        self.cache = cache if cache is not None else FeedbackCache()
        self.model = model
        self._client = client
        self._api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY", "")

    @property
    def uses_llm(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self._api_key, timeout=FEEDBACK_TIMEOUT, max_retries=1)
        return self._client

    def _complete(self, prompt: str, temperature: float, max_tokens: int) -> Optional[str]:
        completion = self._get_client().chat.completions.create(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        choices = getattr(completion, "choices", None) or []
        if not choices:
            return None
        content = choices[0].message.content
        return content.strip() if content and content.strip() else None

    def feedback(
        self, question: str, user_answer: int, correct_answer: int, tags: Sequence[str]
    ) -> str:
        key = FeedbackCache.cache_key(question, tags)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        text: Optional[str] = None
        if self.uses_llm:
            primary = tags[0] if tags else GENERAL_ERROR
            prompt = build_prompt(question, user_answer, correct_answer, primary)
            try:
                text = self._complete(prompt, temperature=0.2, max_tokens=100)
            except Exception as e:
                logger.warning("feedback generation failed, using template: %s", e)
                text = None

        if not text:
            text = fallback_feedback(tags)
        self.cache.set(key, text)
        return text

    def summary(self, incorrect: Sequence[Dict[str, Any]], lesson_id: Optional[str] = None) -> str:
        if not incorrect:
            return NO_ERRORS_SUMMARY

        patterns = analyze_error_patterns(incorrect)
        top = patterns[0]
        count = len(incorrect)

        if self.uses_llm:
            examples_text = "\n".join(
                f'"{it.get("question")}" - you answered {it.get("user_answer")}, '
                f'correct is {it.get("correct_answer")}'
                for it in incorrect[:3]
            )
            prompt = _build_summary_prompt(count, top, examples_text, lesson_id)
            try:
                text = self._complete(prompt, temperature=0.3, max_tokens=200)
                if text:
                    return text
            except Exception as e:
                logger.warning("summary generation failed, using template: %s", e)

        return fallback_summary(count, top)
