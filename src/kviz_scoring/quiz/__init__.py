"""
Quiz content and scoring for kviz-scoring

Question model, wire codec, answer evaluation, score aggregation and grading.
"""

from .schema import (
    QuestionType,
    TimeWindow,
    QuestionDefinition,
    AnswerKey,
    SubmittedAnswer,
    Attempt,
    ScoredAttempt,
    LeaderboardRow,
    ProgressPoint,
    QuestionReview,
    Quiz,
)
from .codec import (
    encode_questions,
    decode_questions,
    encode_answer_keys,
    decode_answer_keys,
    encode_submitted_answers,
    decode_submitted_answers,
)
from .evaluator import is_correct
from .scoring import score_attempt, score_attempts, count_correct
from .grading import grade_submission, review_attempt

__all__ = [
    "QuestionType",
    "TimeWindow",
    "QuestionDefinition",
    "AnswerKey",
    "SubmittedAnswer",
    "Attempt",
    "ScoredAttempt",
    "LeaderboardRow",
    "ProgressPoint",
    "QuestionReview",
    "Quiz",
    "encode_questions",
    "decode_questions",
    "encode_answer_keys",
    "decode_answer_keys",
    "encode_submitted_answers",
    "decode_submitted_answers",
    "is_correct",
    "score_attempt",
    "score_attempts",
    "count_correct",
    "grade_submission",
    "review_attempt",
]
