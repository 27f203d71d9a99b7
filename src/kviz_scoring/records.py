"""
Result and quiz records

Decodes the DTO dictionaries exchanged with the persistence layer
(camelCase keys, questions/answers as embedded JSON strings) into the
typed model, and encodes attempts back for storage.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from .quiz.codec import (
    decode_answer_keys,
    decode_questions,
    decode_submitted_answers,
    encode_questions,
    encode_submitted_answers,
)
from .quiz.schema import Attempt, Quiz

logger = logging.getLogger(__name__)

# .NET emits 1-7 fractional digits; fromisoformat on 3.10 wants exactly 3 or 6
_FRACTION = re.compile(r"(\.\d{1,6})\d*")


def _six_digit_fraction(match: re.Match) -> str:
    return match.group(1).ljust(7, "0")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken to be UTC. Returns None when unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(_six_digit_fraction, text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _as_int(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def decode_attempt(record: Any) -> Optional[Attempt]:
    """
    Decode one Result DTO.

    Args:
        record: Dict with quizName, username, questions, answers, quizDone (and id)

    Returns:
        Attempt, or None if the record lacks a quiz name, username or valid quizDone
    """
    if not isinstance(record, dict):
        logger.warning("Skipping result record that is not an object")
        return None

    quiz_name = record.get("quizName")
    username = record.get("username")
    if not isinstance(quiz_name, str) or not quiz_name:
        logger.warning("Skipping result %r without a quiz name", record.get("id"))
        return None
    if not isinstance(username, str) or not username:
        logger.warning("Skipping result %r without a username", record.get("id"))
        return None

    quiz_done = parse_timestamp(record.get("quizDone"))
    if quiz_done is None:
        logger.warning(
            "Skipping result %r with invalid quizDone %r",
            record.get("id"),
            record.get("quizDone"),
        )
        return None

    return Attempt(
        quiz_name=quiz_name,
        username=username,
        quiz_done=quiz_done,
        questions=tuple(decode_questions(record.get("questions", ""))),
        answers=tuple(decode_submitted_answers(record.get("answers", ""))),
        id=_as_int(record.get("id")),
    )


def decode_attempts(records: Iterable[Any]) -> list[Attempt]:
    """Decode result DTOs, skipping the ones that cannot be decoded."""
    attempts = []
    for record in records:
        attempt = decode_attempt(record)
        if attempt is not None:
            attempts.append(attempt)
    return attempts


def encode_attempt(attempt: Attempt) -> dict:
    """Encode an attempt as a Result DTO."""
    return {
        "id": attempt.id,
        "quizName": attempt.quiz_name,
        "username": attempt.username,
        "questions": encode_questions(attempt.questions),
        "answers": encode_submitted_answers(attempt.answers),
        "quizDone": attempt.quiz_done.isoformat(),
    }


def decode_quiz(record: Any) -> Optional[Quiz]:
    """Decode a Quiz DTO, merging its answer keys onto its questions."""
    if not isinstance(record, dict):
        return None
    name = record.get("name")
    if not isinstance(name, str) or not name:
        logger.warning("Skipping quiz %r without a name", record.get("id"))
        return None

    questions = decode_questions(record.get("questions", ""))
    keys = decode_answer_keys(record.get("answers", ""), questions)
    return Quiz(
        name=name,
        questions=tuple(questions),
        answer_keys=tuple(keys),
        description=str(record.get("description") or ""),
        category=str(record.get("category") or ""),
        time=_as_int(record.get("time")),
        difficulty=str(record.get("difficulty") or "Easy"),
        id=_as_int(record.get("id")),
    )
