"""
Answer evaluation

Pure correctness predicate per question type. Never raises: absent values,
shape mismatches and unknown types all evaluate as incorrect.
"""

from typing import Any

from .codec import coerce_value
from .schema import QuestionType


def normalize_text(value: str) -> str:
    """Trim surrounding whitespace and case-fold."""
    return value.strip().casefold()


def is_correct(question_type: Any, user_answer: Any, correct: Any) -> bool:
    """
    Check a single answer.

    Args:
        question_type: QuestionType or its wire tag
        user_answer: Raw submitted value, None when unanswered
        correct: Raw authoritative value

    Returns:
        True only when the answer is present, well-shaped and matches
    """
    q_type = QuestionType.parse(question_type)
    if q_type is None:
        return False

    submitted = coerce_value(q_type, user_answer)
    expected = coerce_value(q_type, correct)
    if submitted is None or expected is None:
        return False

    if q_type == QuestionType.SINGLE:
        return submitted == expected
    if q_type == QuestionType.MULTIPLE:
        # both sides are frozensets here, so [] vs [] is correct
        return submitted == expected
    if q_type == QuestionType.TRUE_FALSE:
        return submitted is expected
    if q_type == QuestionType.TEXT:
        wanted = normalize_text(expected)
        given = normalize_text(submitted)
        return bool(wanted) and bool(given) and wanted == given
    return False
