"""
Progress series and personal results

Per-user views over historical attempts, always recomputed from the
attempt snapshots.
"""

from typing import Iterable

from .leaderboard import as_utc
from .quiz.schema import Attempt, ProgressPoint, ScoredAttempt
from .quiz.scoring import score_attempt


def progress_series(
    attempts: Iterable[Attempt],
    quiz_name: str,
    username: str,
) -> list[ProgressPoint]:
    """
    Score trend of one user on one quiz.

    Args:
        attempts: Decoded attempts (any users, any quizzes)
        quiz_name: Quiz to follow
        username: User to follow

    Returns:
        One point per matching attempt, oldest first
    """
    matching = [
        a for a in attempts
        if a.quiz_name == quiz_name and a.username == username
    ]
    matching.sort(key=lambda a: as_utc(a.quiz_done))
    return [ProgressPoint(date=a.quiz_done, score=score_attempt(a)) for a in matching]


def user_attempts(attempts: Iterable[Attempt], username: str) -> list[ScoredAttempt]:
    """A user's own results, newest first."""
    mine = [a for a in attempts if a.username == username]
    mine.sort(key=lambda a: as_utc(a.quiz_done), reverse=True)
    return [ScoredAttempt(attempt=a, score=score_attempt(a)) for a in mine]
