"""
Tests for score aggregation.
"""

from datetime import datetime, timezone

import pytest

from kviz_scoring.quiz.schema import (
    Attempt,
    QuestionDefinition,
    QuestionType,
    SubmittedAnswer,
)
from kviz_scoring.quiz.scoring import (
    count_correct,
    round_half_up,
    score_attempt,
    score_attempts,
)

DONE = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)


def make_attempt(questions, answers) -> Attempt:
    """Build an attempt with fixed metadata."""
    return Attempt(
        quiz_name="Geography",
        username="alice",
        quiz_done=DONE,
        questions=tuple(questions),
        answers=tuple(answers),
    )


def tf_questions(count: int) -> list[QuestionDefinition]:
    return [QuestionDefinition(i, QuestionType.TRUE_FALSE, f"Q{i}") for i in range(1, count + 1)]


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize("num,den,expected", [
        (1, 2, 1),
        (1, 3, 0),
        (2, 3, 1),
        (50, 100, 1),
        (250, 3, 83),
        (200, 3, 67),
        (0, 7, 0),
    ])
    def test_rounding(self, num, den, expected):
        """Halves round up, everything else to nearest."""
        assert round_half_up(num, den) == expected


class TestScoreAttempt:
    """Tests for score_attempt."""

    def test_empty_quiz_scores_zero(self):
        """No questions means a score of 0."""
        assert score_attempt(make_attempt([], [])) == 0

    def test_all_correct(self):
        """Every answer right scores 100."""
        questions = tf_questions(2)
        answers = [SubmittedAnswer(1, True, True), SubmittedAnswer(2, False, False)]

        assert score_attempt(make_attempt(questions, answers)) == 100

    def test_missing_answers_count_in_denominator(self):
        """Questions without an answer entry count as wrong."""
        questions = tf_questions(3)
        answers = [SubmittedAnswer(1, True, True)]

        attempt = make_attempt(questions, answers)
        assert count_correct(attempt) == 1
        assert score_attempt(attempt) == 33

    def test_half_rounds_up(self):
        """1 of 8 is 12.5% and rounds to 13."""
        questions = tf_questions(8)
        answers = [SubmittedAnswer(1, True, True)]

        assert score_attempt(make_attempt(questions, answers)) == 13

    def test_two_of_three(self):
        """2 of 3 is 66.7% and rounds to 67."""
        questions = tf_questions(3)
        answers = [SubmittedAnswer(i, True, True) for i in (1, 2)]

        assert score_attempt(make_attempt(questions, answers)) == 67

    def test_extra_answers_are_ignored(self):
        """Answers for ids not in the snapshot do not count."""
        questions = tf_questions(1)
        answers = [SubmittedAnswer(1, True, False), SubmittedAnswer(9, True, True)]

        assert score_attempt(make_attempt(questions, answers)) == 0

    def test_first_duplicate_answer_wins(self):
        """Only the first entry for an id is used."""
        questions = tf_questions(1)
        answers = [SubmittedAnswer(1, True, False), SubmittedAnswer(1, True, True)]

        assert score_attempt(make_attempt(questions, answers)) == 0

    def test_mixed_types(self):
        """Each question is evaluated with its own type."""
        questions = [
            QuestionDefinition(1, QuestionType.SINGLE, "Q1", ("a", "b")),
            QuestionDefinition(2, QuestionType.MULTIPLE, "Q2", ("a", "b", "c")),
            QuestionDefinition(3, QuestionType.TEXT, "Q3"),
            QuestionDefinition(4, None, "Q4"),
        ]
        answers = [
            SubmittedAnswer(1, 1, 1),
            SubmittedAnswer(2, [0, 2], [2, 0]),
            SubmittedAnswer(3, "Paris", " paris "),
            SubmittedAnswer(4, "x", "x"),
        ]

        assert score_attempt(make_attempt(questions, answers)) == 75

    def test_malformed_values_do_not_raise(self):
        """Garbage values score as wrong without errors."""
        questions = tf_questions(2)
        answers = [SubmittedAnswer(1, {"a": 1}, [1]), SubmittedAnswer(2, None, "yes")]

        assert score_attempt(make_attempt(questions, answers)) == 0

    def test_score_is_bounded_int(self):
        """Scores are ints within [0, 100]."""
        for count in range(1, 12):
            questions = tf_questions(count)
            for right in range(count + 1):
                answers = [SubmittedAnswer(i, True, True) for i in range(1, right + 1)]
                score = score_attempt(make_attempt(questions, answers))
                assert isinstance(score, int)
                assert 0 <= score <= 100


class TestScoreAttempts:
    """Tests for score_attempts."""

    def test_preserves_order(self):
        """Scored attempts come back in input order."""
        good = make_attempt(tf_questions(1), [SubmittedAnswer(1, True, True)])
        bad = make_attempt(tf_questions(1), [SubmittedAnswer(1, True, False)])

        scored = score_attempts([good, bad])

        assert [s.score for s in scored] == [100, 0]
        assert scored[0].attempt is good
