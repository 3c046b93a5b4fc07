import math
import random

import pytest

from rfi_responder.core.exceptions import RecordValidationError
from rfi_responder.schemas.questions import QuestionType
from rfi_responder.services.questions.validator import validate_question_record


def make_record(**overrides):
    record = {
        "text": "What is your data retention policy?",
        "type": "explicit",
        "confidence": 0.95,
        "answer": "Data is retained for seven years.",
        "sourceDocument": "rfi.docx, paragraph 1",
    }
    record.update(overrides)
    return record


def test_valid_record_is_accepted():
    question = validate_question_record(make_record())

    assert question.text == "What is your data retention policy?"
    assert question.type == QuestionType.EXPLICIT
    assert question.confidence == 0.95
    assert question.source_document == "rfi.docx, paragraph 1"
    assert question.metadata == {}


def test_snake_case_source_key_and_metadata_are_accepted():
    raw = make_record(type="implicit", confidence=1, metadata={"section": "3.1"})
    del raw["sourceDocument"]
    raw["source_document"] = "rfi.docx, section 3"

    question = validate_question_record(raw)

    assert question.type == QuestionType.IMPLICIT
    assert question.confidence == 1.0
    assert question.source_document == "rfi.docx, section 3"
    assert question.metadata == {"section": "3.1"}


def test_confidence_bounds_are_inclusive():
    assert validate_question_record(make_record(confidence=0)).confidence == 0.0
    assert validate_question_record(make_record(confidence=1.0)).confidence == 1.0


def test_text_is_stripped():
    assert validate_question_record(make_record(text="  Describe your SLA.  ")).text == "Describe your SLA."


@pytest.mark.parametrize(
    "raw",
    [
        "not a record",
        ["text"],
        make_record(text=""),
        make_record(text="   "),
        make_record(text=42),
        make_record(type="question"),
        make_record(type="Explicit"),
        make_record(type=None),
        make_record(confidence=1.5),
        make_record(confidence=-0.1),
        make_record(confidence="0.9"),
        make_record(confidence=True),
        make_record(confidence=math.nan),
        make_record(confidence=math.inf),
        make_record(answer=""),
        make_record(answer=None),
        make_record(sourceDocument=""),
    ],
)
def test_invalid_records_are_rejected(raw):
    with pytest.raises(RecordValidationError) as exc_info:
        validate_question_record(raw)
    assert exc_info.value.reason


def test_missing_field_is_rejected_with_field_name():
    raw = make_record()
    del raw["answer"]

    with pytest.raises(RecordValidationError, match="answer"):
        validate_question_record(raw)


def test_missing_source_is_rejected():
    raw = make_record()
    del raw["sourceDocument"]

    with pytest.raises(RecordValidationError, match="sourceDocument"):
        validate_question_record(raw)


def test_oversized_integer_confidence_is_rejected():
    with pytest.raises(RecordValidationError, match="confidence"):
        validate_question_record(make_record(confidence=10 ** 400))


FIELD_VALUES = [
    None,
    True,
    False,
    0,
    1,
    -1,
    2,
    10 ** 400,
    -(10 ** 400),
    0.5,
    -0.0,
    1.0000001,
    math.nan,
    math.inf,
    -math.inf,
    "",
    "   ",
    "0.5",
    "explicit",
    "implicit",
    "What is your uptime guarantee?",
    [],
    [0.5],
    {},
    {"nested": {"deeper": [1, 2, 3]}},
]

FIELD_NAMES = ["text", "type", "confidence", "answer", "sourceDocument", "source_document", "metadata"]


def random_record(rng):
    if rng.random() < 0.05:
        return rng.choice(FIELD_VALUES)
    record = make_record()
    for name in rng.sample(FIELD_NAMES, rng.randint(0, 3)):
        if rng.random() < 0.2:
            record.pop(name, None)
        else:
            record[name] = rng.choice(FIELD_VALUES)
    return record


@pytest.mark.parametrize("seed", range(20))
def test_random_records_either_validate_or_raise_record_error(seed):
    rng = random.Random(seed)

    for _ in range(200):
        raw = random_record(rng)
        try:
            question = validate_question_record(raw)
        except RecordValidationError as e:
            assert e.reason
            continue

        assert question.text and question.text == question.text.strip()
        assert question.type in (QuestionType.EXPLICIT, QuestionType.IMPLICIT)
        assert isinstance(question.confidence, float)
        assert math.isfinite(question.confidence)
        assert 0.0 <= question.confidence <= 1.0
        assert question.answer.strip()
        assert question.source_document.strip()
        assert isinstance(question.metadata, dict)
