"""Validation of untyped question records returned by the oracle.

Every record is checked field by field and either becomes a
``ProcessedQuestion`` or is rejected with a ``RecordValidationError`` whose
``reason`` names the failing field.
"""

import math
from typing import Any

from rfi_responder.core.exceptions import RecordValidationError
from rfi_responder.schemas.questions import ProcessedQuestion, QuestionType

SOURCE_KEYS = ("sourceDocument", "source_document")
ALLOWED_TYPES = {t.value: t for t in QuestionType}


def _require_text(record: dict, key: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise RecordValidationError(f"'{key}' must be a string")
    if not value.strip():
        raise RecordValidationError(f"'{key}' must not be empty")
    return value.strip()


def _require_confidence(record: dict) -> float:
    value = record.get("confidence")
    # bool is an int subclass but never a valid confidence
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordValidationError("'confidence' must be a number")
    if isinstance(value, int):
        # range check before float(), arbitrarily large ints overflow it
        if not 0 <= value <= 1:
            raise RecordValidationError("'confidence' integer is outside [0, 1]")
        return float(value)
    if not math.isfinite(value):
        raise RecordValidationError("'confidence' must be finite")
    if not 0.0 <= value <= 1.0:
        raise RecordValidationError(f"'confidence' {value} is outside [0, 1]")
    return value


def validate_question_record(raw: Any) -> ProcessedQuestion:
    """Turn one raw oracle record into a ``ProcessedQuestion``.

    Raises:
        RecordValidationError: If any field is missing or invalid
    """
    if not isinstance(raw, dict):
        raise RecordValidationError(f"record must be an object, got {type(raw).__name__}")

    text = _require_text(raw, "text")

    question_type = raw.get("type")
    if not isinstance(question_type, str) or question_type not in ALLOWED_TYPES:
        raise RecordValidationError(f"'type' must be one of {sorted(ALLOWED_TYPES)}, got {question_type!r}")

    confidence = _require_confidence(raw)
    answer = _require_text(raw, "answer")

    source_key = next((key for key in SOURCE_KEYS if key in raw), SOURCE_KEYS[0])
    source_document = _require_text(raw, source_key)

    metadata = raw.get("metadata")
    return ProcessedQuestion(
        text=text,
        type=ALLOWED_TYPES[question_type],
        confidence=confidence,
        answer=answer,
        source_document=source_document,
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )
