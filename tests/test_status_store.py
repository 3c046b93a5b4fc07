from types import SimpleNamespace

import pytest

from rfi_responder.schemas.processing import HAPPY_PATH, ProcessingStep
from rfi_responder.services.pipeline.status_store import UNKNOWN_ERROR, ProcessingStatusStore


def test_start_is_preparation():
    store = ProcessingStatusStore()

    status = store.start(1)

    assert status.current_step == ProcessingStep.PREPARATION
    assert status.completed_steps == []
    assert status.progress == 0
    assert 1 in store


def test_happy_path_progress_is_monotonic():
    store = ProcessingStatusStore()
    store.start(1)

    progress = []
    for step in HAPPY_PATH[1:]:
        status = store.advance(1, step)
        progress.append(status.progress)
        assert status.completed_steps == HAPPY_PATH[: HAPPY_PATH.index(step)]

    assert progress == [25, 50, 75, 100]
    assert store.get(1).is_terminal


def test_cannot_move_backwards():
    store = ProcessingStatusStore()
    store.advance(1, ProcessingStep.QUESTIONS)

    with pytest.raises(ValueError):
        store.advance(1, ProcessingStep.EXTRACTION)


def test_error_is_not_an_advance_target():
    with pytest.raises(ValueError):
        ProcessingStatusStore().advance(1, ProcessingStep.ERROR)


def test_fail_keeps_completed_steps_and_zeroes_progress():
    store = ProcessingStatusStore()
    store.start(1)
    store.advance(1, ProcessingStep.EXTRACTION)
    store.advance(1, ProcessingStep.QUESTIONS)

    status = store.fail(1, "LLM provider quota exceeded")

    assert status.current_step == ProcessingStep.ERROR
    assert status.completed_steps == [ProcessingStep.PREPARATION, ProcessingStep.EXTRACTION]
    assert status.progress == 0
    assert status.error == "LLM provider quota exceeded"


def test_fail_without_message_uses_default():
    assert ProcessingStatusStore().fail(7, "").error == UNKNOWN_ERROR


def test_terminal_status_ignores_further_transitions():
    store = ProcessingStatusStore()
    store.fail(1, "broken")

    status = store.advance(1, ProcessingStep.COMPLETE)

    assert status.current_step == ProcessingStep.ERROR


def test_documents_are_tracked_independently():
    store = ProcessingStatusStore()
    store.start(1)
    store.start(2)
    store.advance(1, ProcessingStep.ANALYSIS)
    store.fail(2, "bad file")

    assert store.get(1).current_step == ProcessingStep.ANALYSIS
    assert store.get(2).current_step == ProcessingStep.ERROR
    assert len(store) == 2

    store.discard(2)
    assert store.get(2) is None
    assert 2 not in store


def test_status_serializes_with_camel_case_keys():
    store = ProcessingStatusStore()
    store.advance(1, ProcessingStep.EXTRACTION)

    payload = store.get(1).model_dump(by_alias=True, mode="json")

    assert payload == {
        "currentStep": "extraction",
        "completedSteps": ["preparation"],
        "progress": 25,
        "error": None,
    }


@pytest.mark.parametrize(
    "document, step, progress, error",
    [
        (SimpleNamespace(status="processed", document_metadata={}), ProcessingStep.COMPLETE, 100, None),
        (SimpleNamespace(status="error", document_metadata={"error": "bad file"}), ProcessingStep.ERROR, 0, "bad file"),
        (SimpleNamespace(status="error", document_metadata=None), ProcessingStep.ERROR, 0, UNKNOWN_ERROR),
        (SimpleNamespace(status="processing", document_metadata=None), ProcessingStep.PREPARATION, 0, None),
    ],
)
def test_derive_from_document(document, step, progress, error):
    status = ProcessingStatusStore.derive_from_document(document)

    assert status.current_step == step
    assert status.progress == progress
    assert status.error == error


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_finished_slots_expire_after_ttl():
    clock = ManualClock()
    store = ProcessingStatusStore(terminal_ttl=60, clock=clock)
    store.advance(1, ProcessingStep.COMPLETE)
    store.fail(2, "broken")
    store.advance(3, ProcessingStep.QUESTIONS)

    clock.now = 60
    assert store.get(1).current_step == ProcessingStep.COMPLETE

    clock.now = 61
    assert store.get(1) is None
    assert store.get(2) is None
    # in-flight documents are never evicted
    assert store.get(3).current_step == ProcessingStep.QUESTIONS
    assert len(store) == 1


def test_finished_slots_are_bounded_oldest_first():
    store = ProcessingStatusStore(max_terminal=2)
    store.start(10)
    for document_id in (1, 2, 3):
        store.advance(document_id, ProcessingStep.COMPLETE)

    assert 1 not in store
    assert 2 in store and 3 in store
    assert 10 in store
    assert len(store) == 3


def test_restarted_document_is_no_longer_finished():
    clock = ManualClock()
    store = ProcessingStatusStore(terminal_ttl=10, clock=clock)
    store.fail(1, "broken")

    store.start(1)
    clock.now = 100

    assert store.evict_expired() == 0
    assert store.get(1).current_step == ProcessingStep.PREPARATION


def test_discard_forgets_finished_slot():
    store = ProcessingStatusStore(max_terminal=1)
    store.advance(1, ProcessingStep.COMPLETE)
    store.discard(1)
    store.advance(2, ProcessingStep.COMPLETE)

    assert 2 in store
    assert len(store) == 1
