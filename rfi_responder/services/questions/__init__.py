"""Question and requirement extraction."""

from rfi_responder.services.questions.base_classifier import QuestionClassifier
from rfi_responder.services.questions.llm_extractor import LLMQuestionExtractor
from rfi_responder.services.questions.rule_based_classifier import RuleBasedQuestionClassifier
from rfi_responder.services.questions.runner import ExtractionOutcome, extract_from_chunks
from rfi_responder.services.questions.validator import validate_question_record

__all__ = [
    "ExtractionOutcome",
    "LLMQuestionExtractor",
    "QuestionClassifier",
    "RuleBasedQuestionClassifier",
    "extract_from_chunks",
    "validate_question_record",
]
