"""
Score aggregation

Reduces the per-question checks of an attempt to an integer percentage.
Scores are never stored; they are recomputed from the attempt snapshot.
"""

from typing import Iterable, Optional

from .evaluator import is_correct
from .schema import Attempt, QuestionDefinition, ScoredAttempt, SubmittedAnswer


def round_half_up(numerator: int, denominator: int) -> int:
    """Round numerator/denominator to the nearest int, halves going up."""
    return (2 * numerator + denominator) // (2 * denominator)


def answers_by_id(attempt: Attempt) -> dict[int, SubmittedAnswer]:
    """Index stored answers by question id; the first entry for an id wins."""
    index: dict[int, SubmittedAnswer] = {}
    for answer in attempt.answers:
        index.setdefault(answer.id, answer)
    return index


def evaluate_question(
    question: QuestionDefinition,
    answer: Optional[SubmittedAnswer],
) -> bool:
    """Evaluate one question against its stored answer entry (None when unanswered)."""
    if answer is None:
        return False
    return is_correct(question.type, answer.user_answer, answer.correct)


def count_correct(attempt: Attempt) -> int:
    """Number of questions answered correctly."""
    answers = answers_by_id(attempt)
    return sum(
        1 for question in attempt.questions
        if evaluate_question(question, answers.get(question.id))
    )


def score_attempt(attempt: Attempt) -> int:
    """
    Percentage score in [0, 100].

    Every question counts in the denominator, answered or not.
    An attempt with no questions scores 0.
    """
    total = len(attempt.questions)
    if total == 0:
        return 0
    return round_half_up(100 * count_correct(attempt), total)


def score_attempts(attempts: Iterable[Attempt]) -> list[ScoredAttempt]:
    """Score each attempt, preserving order."""
    return [ScoredAttempt(attempt=a, score=score_attempt(a)) for a in attempts]
