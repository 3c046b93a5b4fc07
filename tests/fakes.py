"""In-memory stand-ins for oracles and repositories used across tests."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Callable, Dict, List, Optional
from unittest.mock import AsyncMock

from rfi_responder.core.embedding_client import EmbeddingClient


class FakeLLMClient:
    """Generative oracle double.

    ``responder`` receives the user prompt and returns the raw model output
    or raises an exception.
    """

    def __init__(self, responder: Callable[[str], str]):
        self.responder = responder
        self.prompts: List[str] = []

    async def generate_content(self, contents, system_instruction=None, generation_config=None) -> str:
        self.prompts.append(contents)
        return self.responder(contents)


class FakeEmbeddingClient(EmbeddingClient):
    """Deterministic letter-frequency vectors, normalized."""

    def __init__(self, dimension: int = 26, fail_on: Optional[Callable[[str], Optional[Exception]]] = None):
        super().__init__(dimension)
        self.fail_on = fail_on
        self.calls: List[str] = []

    async def _embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail_on is not None:
            error = self.fail_on(text)
            if error is not None:
                raise error

        vector = [0.0] * self.dimension
        for char in text.lower():
            if "a" <= char <= "z":
                vector[(ord(char) - ord("a")) % self.dimension] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]


def cosine_similarity(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeSnippetRepository:
    """Question/answer embedding table kept in a list."""

    def __init__(self, session=None):
        self.session = session or FakeSession()
        self.rows: List[dict] = []

    async def add_embedding(self, context_id: int, text: str, embedding: List[float], commit: bool = True):
        row = {"context_id": context_id, "text": text, "embedding": embedding}
        self.rows.append(row)
        return row

    async def semantic_search(self, embedding: List[float], top_k: int = 5):
        scored = [(row["text"], cosine_similarity(embedding, row["embedding"])) for row in self.rows]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:top_k]

    async def delete_by_context(self, context_id: int, commit: bool = True) -> int:
        before = len(self.rows)
        self.rows = [row for row in self.rows if row["context_id"] != context_id]
        return before - len(self.rows)

    def texts_for(self, context_id: int) -> List[str]:
        return [row["text"] for row in self.rows if row["context_id"] == context_id]


@dataclass
class FakeDocument:
    id: int
    name: str = "rfi.docx"
    mime_type: str = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    content: str = ""
    status: str = "processing"
    document_metadata: Optional[dict] = field(default_factory=dict)
    uploaded_at: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))


@dataclass
class FakeQuestion:
    text: str
    type: str
    confidence: Optional[float]
    answer: Optional[str]
    source_document: str
    id: int = 0
    document_id: int = 0
    question_metadata: Optional[dict] = None


class FakeDatabase:
    """Committed state shared by every ``FakeSession``."""

    def __init__(self):
        self.documents: Dict[int, FakeDocument] = {}
        self.questions: Dict[int, List] = {}
        self.commits = 0

    def add_document(self, document_id: int, **kwargs) -> FakeDocument:
        document = FakeDocument(id=document_id, **kwargs)
        self.documents[document_id] = document
        return document

    def session_factory(self):
        return FakeSession(self)


class FakeSavepoint:
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Async session double: staged question writes are applied on commit."""

    def __init__(self, db: Optional[FakeDatabase] = None):
        self.db = db or FakeDatabase()
        self.pending_questions: Dict[int, List] = {}
        self.rollback = AsyncMock()
        self.savepoints = 0

    def begin_nested(self):
        self.savepoints += 1
        return FakeSavepoint()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def commit(self):
        for document_id, questions in self.pending_questions.items():
            self.db.questions.setdefault(document_id, []).extend(questions)
        self.pending_questions = {}
        self.db.commits += 1


class FakeDocumentRepository:
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db

    async def get_by_id(self, document_id: int):
        return self.db.documents.get(document_id)

    async def mark_processed(self, document_id: int, commit: bool = True, metadata: Optional[dict] = None):
        document = self.db.documents.get(document_id)
        if document is None:
            return None
        document.status = "processed"
        document.document_metadata = {**(document.document_metadata or {}), **(metadata or {})}
        if commit:
            await self.session.commit()
        return document

    async def mark_error(self, document_id: int, message: str):
        document = self.db.documents.get(document_id)
        if document is None:
            return None
        document.status = "error"
        document.document_metadata = {**(document.document_metadata or {}), "error": message}
        return document


class FakeQuestionRepository:
    def __init__(self, session: FakeSession):
        self.session = session

    async def bulk_create(self, document_id: int, questions):
        staged = list(questions)
        self.session.pending_questions.setdefault(document_id, []).extend(staged)
        return staged


class FakeContextRepository:
    """Context entries kept in a dict."""

    def __init__(self):
        self.entries: Dict[int, object] = {}

    async def create_context(self, title: str, content: str, type: str, metadata: Optional[dict] = None):
        entry = SimpleNamespace(
            id=len(self.entries) + 1,
            title=title,
            content=content,
            type=type,
            context_metadata=metadata or {},
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        self.entries[entry.id] = entry
        return entry

    async def list_contexts(self):
        return list(self.entries.values())

    async def get_by_id(self, context_id: int):
        return self.entries.get(context_id)

    async def delete(self, context_id: int) -> bool:
        return self.entries.pop(context_id, None) is not None
