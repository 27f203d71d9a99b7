"""
kviz-scoring: quiz answer evaluation and leaderboard engine for Kviz.

Decodes stored quiz attempts, scores them and ranks users per quiz.
"""

__version__ = "0.1.0"

from .quiz import (
    QuestionType,
    TimeWindow,
    QuestionDefinition,
    AnswerKey,
    SubmittedAnswer,
    Attempt,
    ScoredAttempt,
    LeaderboardRow,
    ProgressPoint,
    encode_questions,
    decode_questions,
    encode_answer_keys,
    decode_answer_keys,
    is_correct,
    score_attempt,
    grade_submission,
    review_attempt,
)
from .leaderboard import compute_leaderboard, ranking_key, quiz_names
from .progress import progress_series, user_attempts
from .records import decode_attempt, decode_attempts, encode_attempt, decode_quiz
from .client import KvizClient
from .errors import KvizError, KvizApiError, AuthenticationError, NotFoundError
from .config import config

__all__ = [
    # Model
    "QuestionType",
    "TimeWindow",
    "QuestionDefinition",
    "AnswerKey",
    "SubmittedAnswer",
    "Attempt",
    "ScoredAttempt",
    "LeaderboardRow",
    "ProgressPoint",
    # Codec
    "encode_questions",
    "decode_questions",
    "encode_answer_keys",
    "decode_answer_keys",
    # Scoring
    "is_correct",
    "score_attempt",
    "grade_submission",
    "review_attempt",
    # Leaderboard and progress
    "compute_leaderboard",
    "ranking_key",
    "quiz_names",
    "progress_series",
    "user_attempts",
    # Records
    "decode_attempt",
    "decode_attempts",
    "encode_attempt",
    "decode_quiz",
    # API
    "KvizClient",
    "KvizError",
    "KvizApiError",
    "AuthenticationError",
    "NotFoundError",
    # Config
    "config",
]
