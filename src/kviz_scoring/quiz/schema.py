"""
Quiz schema and data structures

Defines questions, answer keys, submitted answers and attempts,
plus the derived views (scored attempts, leaderboard rows, progress points).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class QuestionType(str, Enum):
    """Types of quiz questions (the wire tag is the value)."""
    SINGLE = "single"
    MULTIPLE = "multiple"
    TRUE_FALSE = "tf"
    TEXT = "text"

    @classmethod
    def parse(cls, raw: Any) -> Optional["QuestionType"]:
        """Return the matching type, or None for an unrecognised tag."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def has_options(self) -> bool:
        return self in (QuestionType.SINGLE, QuestionType.MULTIPLE)


class TimeWindow(str, Enum):
    """Leaderboard time windows."""
    ALL = "all"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# Single -> int, Multiple -> frozenset[int], TrueFalse -> bool, Text -> str
CorrectValue = Union[int, frozenset, bool, str]


def _wire_value(value: Any) -> Any:
    """Sets are not JSON; index sets go out as sorted lists."""
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


@dataclass(frozen=True)
class QuestionDefinition:
    """A single quiz question as shown to the user."""
    id: int
    type: Optional[QuestionType]  # None when the stored tag is unrecognised
    prompt: str = ""
    options: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "type": self.type.value if self.type else None,
            "prompt": self.prompt,
        }
        if self.type is not None and self.type.has_options:
            result["options"] = list(self.options)
        return result


@dataclass(frozen=True)
class AnswerKey:
    """
    Authoritative answer for one question.

    A tagged variant: ``type`` decides which arm ``correct`` holds.
    ``defaulted`` is set when the stored value was missing or mis-shaped
    and the neutral default for the type was substituted.
    """
    id: int
    type: QuestionType
    correct: CorrectValue
    defaulted: bool = False

    def to_dict(self) -> dict:
        correct = self.correct
        if self.type == QuestionType.MULTIPLE:
            correct = sorted(correct)
        return {"id": self.id, "correct": correct}


@dataclass(frozen=True)
class SubmittedAnswer:
    """One stored answer entry of an attempt: the key and the user's answer together."""
    id: int
    correct: Any = None
    user_answer: Any = None  # None means unanswered

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "correct": _wire_value(self.correct),
            "userAnswer": _wire_value(self.user_answer),
        }


@dataclass(frozen=True)
class Attempt:
    """
    A completed quiz submission.

    ``questions`` and ``answers`` are the snapshot taken at submission time;
    the attempt is scored against them, never against the live quiz.
    """
    quiz_name: str
    username: str
    quiz_done: datetime
    questions: tuple[QuestionDefinition, ...] = ()
    answers: tuple[SubmittedAnswer, ...] = ()
    id: int = 0


@dataclass(frozen=True)
class ScoredAttempt:
    """An attempt with its percentage score computed on demand."""
    attempt: Attempt
    score: int

    @property
    def quiz_name(self) -> str:
        return self.attempt.quiz_name

    @property
    def username(self) -> str:
        return self.attempt.username

    @property
    def quiz_done(self) -> datetime:
        return self.attempt.quiz_done


@dataclass(frozen=True)
class LeaderboardRow:
    """One ranked entry: a user's best attempt on a quiz."""
    rank: int
    username: str
    score: int
    quiz_done: datetime

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "username": self.username,
            "score": self.score,
            "quiz_done": self.quiz_done.isoformat(),
        }


@dataclass(frozen=True)
class ProgressPoint:
    """One point of a user's score trend."""
    date: datetime
    score: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "score": self.score}


@dataclass(frozen=True)
class QuestionReview:
    """Review line for one question of an attempt."""
    question: QuestionDefinition
    user_answer: Any
    correct: Any
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "id": self.question.id,
            "prompt": self.question.prompt,
            "user_answer": _wire_value(self.user_answer),
            "correct": _wire_value(self.correct),
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class Quiz:
    """A quiz from the catalogue, with its answer keys decoded."""
    name: str
    questions: tuple[QuestionDefinition, ...] = ()
    answer_keys: tuple[AnswerKey, ...] = ()
    description: str = ""
    category: str = ""
    time: int = 0
    difficulty: str = "Easy"
    id: int = 0
