import re
from typing import List, Optional

from rfi_responder.schemas.questions import ProcessedQuestion, QuestionType
from rfi_responder.services.chunking.models import TextChunk
from rfi_responder.services.embeddings.snippets import split_into_snippets
from rfi_responder.services.questions.base_classifier import QuestionClassifier

INTERROGATIVE_WORDS = {"what", "how", "when", "where", "which", "who", "whom", "whose", "why"}
REQUIREMENT_PATTERN = re.compile(
    r"\b(must|shall|should|required|requires|provide|describe|explain|list|submit|include|detail)\b",
    re.IGNORECASE,
)
DEFAULT_ANSWER = "Draft response pending review by the bid team."


class RuleBasedQuestionClassifier(QuestionClassifier):
    """Deterministic classifier that needs no oracle.

    - a sentence ending in ``?`` is an explicit question (0.9)
    - a sentence starting with an interrogative word is explicit (0.7)
    - a sentence with a requirement keyword is an implicit requirement (0.6)
    """

    def __init__(self, default_answer: Optional[str] = None):
        self.default_answer = default_answer or DEFAULT_ANSWER

    async def classify(self, chunk: TextChunk) -> List[ProcessedQuestion]:
        questions: List[ProcessedQuestion] = []
        base_metadata = self.chunk_metadata(chunk)

        for position, sentence in enumerate(split_into_snippets(chunk.text), start=1):
            classified = self._classify_sentence(sentence)
            if classified is None:
                continue
            question_type, confidence = classified
            questions.append(
                ProcessedQuestion(
                    text=sentence,
                    type=question_type,
                    confidence=confidence,
                    answer=self.default_answer,
                    source_document=f"{chunk.source_label}, sentence {position}",
                    metadata={**base_metadata, "classifier": "rule_based"},
                )
            )

        return questions

    @staticmethod
    def _classify_sentence(sentence: str):
        words = sentence.split()
        if not words:
            return None
        if sentence.endswith("?"):
            return QuestionType.EXPLICIT, 0.9
        if words[0].lower().strip(",:;") in INTERROGATIVE_WORDS:
            return QuestionType.EXPLICIT, 0.7
        if REQUIREMENT_PATTERN.search(sentence):
            return QuestionType.IMPLICIT, 0.6
        return None
