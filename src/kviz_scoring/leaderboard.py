"""
Leaderboard engine

Filters historical attempts by time window and quiz, picks each user's best
attempt per quiz and ranks them:
1. Window filter (all / weekly / monthly, relative to one captured ``now``)
2. Quiz filter (skipped for the "all" sentinel)
3. Grouping by quiz, then by user
4. Best attempt per user: highest score, earliest completion on ties
5. Ranking by ``ranking_key``: score descending, then completion ascending

Stateless: the same attempts and ``now`` always give the same leaderboard.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from .config import config
from .quiz.schema import Attempt, LeaderboardRow, ScoredAttempt, TimeWindow
from .quiz.scoring import score_attempt

logger = logging.getLogger(__name__)

MS_PER_DAY = 24 * 60 * 60 * 1000


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def whole_days_between(now: datetime, then: datetime) -> int:
    """
    Whole days elapsed from ``then`` to ``now``, via the millisecond difference.

    The fraction is floored, so an attempt 7 days and 23 hours old counts as
    7 days and stays in the weekly window. Comparing fractional days would
    drop it; windows here are deliberately whole-day.
    """
    millis = (as_utc(now) - as_utc(then)) // timedelta(milliseconds=1)
    return millis // MS_PER_DAY


def within_window(attempt: Attempt, window: TimeWindow, now: datetime) -> bool:
    """Check whether an attempt falls inside a leaderboard time window."""
    if window == TimeWindow.ALL:
        return True
    days = whole_days_between(now, attempt.quiz_done)
    if window == TimeWindow.WEEKLY:
        return days <= config.leaderboard.weekly_days
    if window == TimeWindow.MONTHLY:
        return days <= config.leaderboard.monthly_days
    return False


def ranking_key(entry: ScoredAttempt) -> tuple:
    """
    Sort key for ranking: higher score first, then earlier completion.

    Username is the last key so fully tied rows still come out in a fixed order.
    """
    return (-entry.score, as_utc(entry.quiz_done), entry.username)


def best_attempt(entries: Iterable[ScoredAttempt]) -> ScoredAttempt:
    """A user's best attempt: the highest score, the earliest one on ties."""
    return min(entries, key=lambda e: (-e.score, as_utc(e.quiz_done)))


def quiz_names(attempts: Iterable[Attempt]) -> list[str]:
    """Distinct quiz names in first-seen order."""
    return list(dict.fromkeys(a.quiz_name for a in attempts))


def group_by_quiz_and_user(
    entries: Iterable[ScoredAttempt],
) -> dict[str, dict[str, list[ScoredAttempt]]]:
    """Two-level grouping: quiz name -> username -> attempts."""
    grouped: dict[str, dict[str, list[ScoredAttempt]]] = defaultdict(lambda: defaultdict(list))
    for entry in entries:
        grouped[entry.quiz_name][entry.username].append(entry)
    return grouped


def rank(entries: Iterable[ScoredAttempt]) -> list[LeaderboardRow]:
    """Sort best attempts with ``ranking_key`` and number them from 1."""
    ordered = sorted(entries, key=ranking_key)
    return [
        LeaderboardRow(
            rank=position,
            username=entry.username,
            score=entry.score,
            quiz_done=entry.quiz_done,
        )
        for position, entry in enumerate(ordered, start=1)
    ]


def compute_leaderboard(
    attempts: Iterable[Attempt],
    quiz_name: Optional[str] = None,
    window: Union[TimeWindow, str] = TimeWindow.ALL,
    now: Optional[datetime] = None,
) -> dict[str, list[LeaderboardRow]]:
    """
    Build the leaderboard for every quiz in ``attempts``.

    Args:
        attempts: Decoded attempts
        quiz_name: Restrict to one quiz (None or "all" keeps every quiz)
        window: Time window, as TimeWindow or its value
        now: Reference instant; captured once, defaults to the current UTC time

    Returns:
        Quiz name -> ranked rows, quiz names in sorted order. Empty when
        nothing matches.
    """
    now = as_utc(now or datetime.now(timezone.utc))
    window = TimeWindow(window)

    candidates = [a for a in attempts if within_window(a, window, now)]
    if quiz_name and quiz_name != config.leaderboard.all_quizzes_sentinel:
        candidates = [a for a in candidates if a.quiz_name == quiz_name]

    scored = [ScoredAttempt(attempt=a, score=score_attempt(a)) for a in candidates]
    grouped = group_by_quiz_and_user(scored)

    leaderboard = {}
    for name in sorted(grouped):
        users = grouped[name]
        leaderboard[name] = rank(best_attempt(entries) for entries in users.values())

    logger.debug(
        "Leaderboard: %d attempts in window %s -> %d quizzes",
        len(candidates),
        window.value,
        len(leaderboard),
    )
    return leaderboard
