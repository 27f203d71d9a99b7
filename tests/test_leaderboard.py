"""
Tests for the leaderboard engine.
"""

from datetime import datetime, timedelta, timezone

import pytest

from kviz_scoring.leaderboard import (
    compute_leaderboard,
    quiz_names,
    ranking_key,
    whole_days_between,
    within_window,
)
from kviz_scoring.quiz.schema import (
    Attempt,
    QuestionDefinition,
    QuestionType,
    ScoredAttempt,
    SubmittedAnswer,
    TimeWindow,
)

NOW = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


def make_attempt(username: str, score: int, quiz_done: datetime, quiz: str = "Basics", id: int = 0) -> Attempt:
    """Build a ten-question attempt scoring ``score`` (a multiple of 10)."""
    questions = tuple(
        QuestionDefinition(i, QuestionType.TRUE_FALSE, f"Q{i}") for i in range(1, 11)
    )
    right = score // 10
    answers = tuple(
        SubmittedAnswer(i, True, i <= right) for i in range(1, 11)
    )
    return Attempt(
        quiz_name=quiz,
        username=username,
        quiz_done=quiz_done,
        questions=questions,
        answers=answers,
        id=id,
    )


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


class TestWindow:
    """Tests for time-window filtering."""

    def test_whole_days(self):
        """Partial days are dropped."""
        assert whole_days_between(NOW, days_ago(7.9)) == 7
        assert whole_days_between(NOW, days_ago(8)) == 8

    def test_weekly_keeps_partial_eighth_day(self):
        """Windows compare whole days: 7 days and 23 hours is still this week."""
        attempt = make_attempt("alice", 50, days_ago(7 + 23 / 24))

        assert within_window(attempt, TimeWindow.WEEKLY, NOW) is True
        assert within_window(make_attempt("bob", 50, days_ago(8)), TimeWindow.WEEKLY, NOW) is False

    def test_ten_days_old(self):
        """A 10-day-old attempt is outside weekly, inside monthly and all."""
        attempt = make_attempt("alice", 50, days_ago(10))

        assert within_window(attempt, TimeWindow.WEEKLY, NOW) is False
        assert within_window(attempt, TimeWindow.MONTHLY, NOW) is True
        assert within_window(attempt, TimeWindow.ALL, NOW) is True

    def test_boundaries(self):
        """Exactly 7 and 30 days are still inside their windows."""
        assert within_window(make_attempt("a", 0, days_ago(7)), TimeWindow.WEEKLY, NOW)
        assert within_window(make_attempt("a", 0, days_ago(30)), TimeWindow.MONTHLY, NOW)
        assert not within_window(make_attempt("a", 0, days_ago(31)), TimeWindow.MONTHLY, NOW)

    def test_window_filters_leaderboard(self):
        """Old attempts disappear from the weekly board."""
        attempts = [
            make_attempt("alice", 90, days_ago(10)),
            make_attempt("bob", 50, days_ago(1)),
        ]

        weekly = compute_leaderboard(attempts, window=TimeWindow.WEEKLY, now=NOW)
        monthly = compute_leaderboard(attempts, window="monthly", now=NOW)

        assert [r.username for r in weekly["Basics"]] == ["bob"]
        assert [r.username for r in monthly["Basics"]] == ["alice", "bob"]

    def test_naive_timestamps(self):
        """Naive completion times are treated as UTC."""
        attempt = make_attempt("alice", 50, datetime(2025, 8, 30, 12, 0))

        assert within_window(attempt, TimeWindow.WEEKLY, NOW) is True


class TestRankingKey:
    """Tests for the ranking comparator."""

    def test_score_then_time(self):
        """Higher scores first, earlier completion on ties."""
        early = ScoredAttempt(make_attempt("a", 80, days_ago(3)), 80)
        late = ScoredAttempt(make_attempt("b", 80, days_ago(1)), 80)
        best = ScoredAttempt(make_attempt("c", 90, days_ago(0)), 90)

        ordered = sorted([late, best, early], key=ranking_key)

        assert [e.username for e in ordered] == ["c", "a", "b"]


class TestComputeLeaderboard:
    """Tests for compute_leaderboard."""

    def test_tie_broken_by_earliest(self):
        """Equal scores rank the earlier finisher first."""
        attempts = [
            make_attempt("userB", 80, days_ago(1)),
            make_attempt("userA", 80, days_ago(2)),
        ]
        rows = compute_leaderboard(attempts, now=NOW)["Basics"]

        assert [(r.rank, r.username) for r in rows] == [(1, "userA"), (2, "userB")]

    def test_best_attempt_only(self):
        """A user appears once, with their best score."""
        attempts = [
            make_attempt("alice", 60, days_ago(5)),
            make_attempt("alice", 90, days_ago(3)),
        ]
        rows = compute_leaderboard(attempts, now=NOW)["Basics"]

        assert len(rows) == 1
        assert rows[0].score == 90
        assert rows[0].quiz_done == days_ago(3)

    def test_best_attempt_tie_keeps_first_achiever(self):
        """Repeating the same score later does not move the date."""
        attempts = [
            make_attempt("alice", 70, days_ago(1)),
            make_attempt("alice", 70, days_ago(4)),
        ]
        rows = compute_leaderboard(attempts, now=NOW)["Basics"]

        assert rows[0].quiz_done == days_ago(4)

    def test_grouped_per_quiz(self):
        """Each quiz gets its own ranking, keys sorted."""
        attempts = [
            make_attempt("alice", 90, days_ago(1), quiz="Science"),
            make_attempt("bob", 100, days_ago(1), quiz="History"),
            make_attempt("alice", 40, days_ago(1), quiz="History"),
        ]
        board = compute_leaderboard(attempts, now=NOW)

        assert list(board) == ["History", "Science"]
        assert [r.username for r in board["History"]] == ["bob", "alice"]
        assert board["Science"][0].rank == 1

    def test_quiz_filter(self):
        """A quiz name restricts the board; "all" does not."""
        attempts = [
            make_attempt("alice", 90, days_ago(1), quiz="Science"),
            make_attempt("bob", 100, days_ago(1), quiz="History"),
        ]

        assert list(compute_leaderboard(attempts, quiz_name="Science", now=NOW)) == ["Science"]
        assert len(compute_leaderboard(attempts, quiz_name="all", now=NOW)) == 2
        assert compute_leaderboard(attempts, quiz_name="Art", now=NOW) == {}

    def test_empty_input(self):
        """No attempts gives an empty mapping."""
        assert compute_leaderboard([], now=NOW) == {}

    def test_malformed_attempt_does_not_abort(self):
        """An attempt with no questions just scores 0."""
        broken = Attempt("Basics", "mallory", days_ago(1))
        attempts = [broken, make_attempt("alice", 30, days_ago(1))]

        rows = compute_leaderboard(attempts, now=NOW)["Basics"]

        assert [(r.username, r.score) for r in rows] == [("alice", 30), ("mallory", 0)]

    def test_idempotent(self):
        """Same input and now give identical output."""
        attempts = [
            make_attempt("alice", 80, days_ago(2)),
            make_attempt("bob", 80, days_ago(2)),
            make_attempt("carol", 100, days_ago(9), quiz="Other"),
            make_attempt("alice", 60, days_ago(20)),
        ]

        first = compute_leaderboard(attempts, window=TimeWindow.MONTHLY, now=NOW)
        second = compute_leaderboard(list(reversed(attempts)), window=TimeWindow.MONTHLY, now=NOW)

        assert first == second
        assert [r.to_dict() for r in first["Basics"]] == [r.to_dict() for r in second["Basics"]]

    def test_does_not_mutate_input(self):
        """The attempt list is left untouched."""
        attempts = [make_attempt("bob", 10, days_ago(1)), make_attempt("alice", 90, days_ago(1))]
        snapshot = list(attempts)

        compute_leaderboard(attempts, now=NOW)

        assert attempts == snapshot

    def test_invalid_window(self):
        """Unknown window names are rejected."""
        with pytest.raises(ValueError):
            compute_leaderboard([], window="yearly", now=NOW)


class TestQuizNames:
    """Tests for quiz_names."""

    def test_first_seen_order(self):
        """Names are distinct and keep first-seen order."""
        attempts = [
            make_attempt("a", 0, NOW, quiz="B"),
            make_attempt("a", 0, NOW, quiz="A"),
            make_attempt("b", 0, NOW, quiz="B"),
        ]

        assert quiz_names(attempts) == ["B", "A"]
