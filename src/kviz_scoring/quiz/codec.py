"""
Question codec

Translates questions, answer keys and submitted answers to and from the
JSON wire format. Decoding is tolerant: malformed payloads degrade to empty
or defaulted structures and never raise.
"""

import json
import logging
from typing import Any, Iterable, Optional

from .schema import (
    AnswerKey,
    CorrectValue,
    QuestionDefinition,
    QuestionType,
    SubmittedAnswer,
)

logger = logging.getLogger(__name__)

# Neutral answer-key values used when a stored key is missing or mis-shaped
DEFAULT_CORRECT: dict[QuestionType, CorrectValue] = {
    QuestionType.SINGLE: 0,
    QuestionType.MULTIPLE: frozenset(),
    QuestionType.TRUE_FALSE: True,
    QuestionType.TEXT: "",
}


# =============================================================================
# COERCION
# =============================================================================

def coerce_index(value: Any) -> Optional[int]:
    """Coerce an option index. bool is rejected even though it is an int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def coerce_index_set(value: Any) -> Optional[frozenset]:
    """Coerce a list of option indices to a set; any bad element rejects the whole value."""
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    indices = set()
    for item in value:
        index = coerce_index(item)
        if index is None:
            return None
        indices.add(index)
    return frozenset(indices)


def coerce_value(question_type: Any, value: Any) -> Optional[CorrectValue]:
    """
    Coerce a raw JSON value to the arm dictated by ``question_type``.

    Returns None for absent values, shape mismatches and unrecognised types.
    TrueFalse accepts booleans only: numeric 0/1 is a mismatch.
    """
    q_type = QuestionType.parse(question_type)
    if value is None or q_type is None:
        return None

    if q_type == QuestionType.SINGLE:
        return coerce_index(value)
    if q_type == QuestionType.MULTIPLE:
        return coerce_index_set(value)
    if q_type == QuestionType.TRUE_FALSE:
        return value if isinstance(value, bool) else None
    if q_type == QuestionType.TEXT:
        return value if isinstance(value, str) else None
    return None


def _coerce_id(raw: Any, fallback: Optional[int]) -> Optional[int]:
    """Question ids are integers; numeric strings are accepted."""
    if isinstance(raw, str):
        try:
            return int(raw)
        except ValueError:
            return fallback
    index = coerce_index(raw)
    return index if index is not None else fallback


def _load_array(payload: Any) -> Optional[list]:
    """Parse a wire payload, returning None unless it is a JSON array."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, (str, bytes, bytearray)):
        return None
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        # RecursionError: nesting too deep for the json module
        return None
    return data if isinstance(data, list) else None


# =============================================================================
# QUESTIONS
# =============================================================================

def encode_questions(questions: Iterable[QuestionDefinition]) -> str:
    """Serialize question definitions; options are emitted for single/multiple only."""
    return json.dumps([q.to_dict() for q in questions])


def decode_question(data: Any, position: int) -> QuestionDefinition:
    """
    Decode one question element.

    Args:
        data: Parsed JSON element
        position: 1-based position in the list, used when ``id`` is missing

    Returns:
        QuestionDefinition (with ``type=None`` when the tag is unrecognised)
    """
    if not isinstance(data, dict):
        logger.warning("Question #%d is not an object, keeping placeholder", position)
        return QuestionDefinition(id=position, type=None)

    q_type = QuestionType.parse(data.get("type"))
    if q_type is None:
        logger.warning("Question #%d has unrecognised type %r", position, data.get("type"))

    prompt = data.get("prompt")
    options: tuple[str, ...] = ()
    if q_type is not None and q_type.has_options:
        raw_options = data.get("options")
        if isinstance(raw_options, list):
            options = tuple(str(o) for o in raw_options)

    return QuestionDefinition(
        id=_coerce_id(data.get("id"), position),
        type=q_type,
        prompt="" if prompt is None else str(prompt),
        options=options,
    )


def decode_questions(payload: Any) -> list[QuestionDefinition]:
    """Decode a question list; anything but a JSON array yields an empty list."""
    items = _load_array(payload)
    if items is None:
        logger.debug("Questions payload is not a JSON array")
        return []
    return [decode_question(item, idx + 1) for idx, item in enumerate(items)]


# =============================================================================
# ANSWER KEYS
# =============================================================================

def encode_answer_keys(keys: Iterable[AnswerKey]) -> str:
    """Serialize answer keys as ``{id, correct}``; multiple-choice sets become sorted lists."""
    return json.dumps([k.to_dict() for k in keys])


def default_answer_key(question: QuestionDefinition) -> AnswerKey:
    """Neutral key for a question. Unrecognised types fall back to the text arm."""
    q_type = question.type or QuestionType.TEXT
    return AnswerKey(
        id=question.id,
        type=q_type,
        correct=DEFAULT_CORRECT[q_type],
        defaulted=True,
    )


def decode_answer_keys(
    payload: Any,
    questions: Iterable[QuestionDefinition],
) -> list[AnswerKey]:
    """
    Decode answer keys and merge them onto ``questions`` by id.

    A question with no matching entry, or whose entry has the wrong shape for
    its declared type, gets the neutral default with ``defaulted=True``.

    Args:
        payload: JSON answer-key list
        questions: Decoded question definitions

    Returns:
        One AnswerKey per question, in question order
    """
    items = _load_array(payload) or []
    by_id: dict[int, Any] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        key_id = _coerce_id(item.get("id"), None)
        if key_id is not None and key_id not in by_id:
            by_id[key_id] = item.get("correct")

    keys = []
    for question in questions:
        correct = coerce_value(question.type, by_id.get(question.id))
        if correct is None:
            logger.warning(
                "Answer key for question %d missing or mis-shaped, using default",
                question.id,
            )
            keys.append(default_answer_key(question))
            continue
        keys.append(AnswerKey(id=question.id, type=question.type, correct=correct))
    return keys


# =============================================================================
# SUBMITTED ANSWERS
# =============================================================================

def encode_submitted_answers(answers: Iterable[SubmittedAnswer]) -> str:
    """Serialize the stored answers of an attempt as ``{id, correct, userAnswer}``."""
    return json.dumps([a.to_dict() for a in answers])


def decode_submitted_answers(payload: Any) -> list[SubmittedAnswer]:
    """
    Decode the stored answers of an attempt.

    Values are kept raw; the evaluator checks their shape against the
    question type. Non-object entries and entries without a usable id are
    dropped.
    """
    items = _load_array(payload)
    if items is None:
        logger.debug("Answers payload is not a JSON array")
        return []

    answers = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning("Answer #%d is not an object, dropping", idx + 1)
            continue
        answer_id = _coerce_id(item.get("id"), None)
        if answer_id is None:
            logger.warning("Answer #%d has no usable id, dropping", idx + 1)
            continue
        answers.append(SubmittedAnswer(
            id=answer_id,
            correct=item.get("correct"),
            user_answer=item.get("userAnswer"),
        ))
    return answers
