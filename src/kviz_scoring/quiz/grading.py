"""
Submission grading and review

Turns a live quiz plus a user's responses into an immutable attempt snapshot,
and breaks a stored attempt down question by question for review.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .schema import (
    AnswerKey,
    Attempt,
    QuestionReview,
    QuestionType,
    Quiz,
    SubmittedAnswer,
)
from .scoring import answers_by_id, evaluate_question


def _stored_correct(key: Optional[AnswerKey]) -> Any:
    if key is None:
        return None
    if key.type == QuestionType.MULTIPLE:
        return sorted(key.correct)
    return key.correct


def grade_submission(
    quiz: Quiz,
    username: str,
    responses: Mapping[int, Any],
    quiz_done: Optional[datetime] = None,
) -> Attempt:
    """
    Snapshot a finished quiz as an attempt.

    Each question gets one answer entry carrying the authoritative key next
    to the user's answer, so later edits to the quiz cannot change how the
    attempt scores.

    Args:
        quiz: Quiz being played, with decoded answer keys
        username: Submitting user
        responses: Question id -> raw answer; missing ids are unanswered
        quiz_done: Completion time (defaults to now, UTC)

    Returns:
        Attempt ready to be encoded and stored
    """
    keys = {k.id: k for k in quiz.answer_keys}
    answers = tuple(
        SubmittedAnswer(
            id=question.id,
            correct=_stored_correct(keys.get(question.id)),
            user_answer=responses.get(question.id),
        )
        for question in quiz.questions
    )
    return Attempt(
        quiz_name=quiz.name,
        username=username,
        quiz_done=quiz_done or datetime.now(timezone.utc),
        questions=tuple(quiz.questions),
        answers=answers,
    )


def review_attempt(attempt: Attempt) -> list[QuestionReview]:
    """One review line per question, in question order."""
    answers = answers_by_id(attempt)
    reviews = []
    for question in attempt.questions:
        answer = answers.get(question.id)
        reviews.append(QuestionReview(
            question=question,
            user_answer=answer.user_answer if answer else None,
            correct=answer.correct if answer else None,
            is_correct=evaluate_question(question, answer),
        ))
    return reviews
