"""SQLAlchemy models for all database tables."""

from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import Float, ForeignKey, Integer, String, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rfi_responder.config import settings
from rfi_responder.database.base import Base

EMBEDDING_DIMENSION = settings.embedding_dimension


class Document(Base):
    """Uploaded RFI file."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    mime_type: Mapped[str] = mapped_column("type", String, nullable=False)
    # Raw upload, base64 encoded
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="processing"
    )  # processing | processed | error
    document_metadata: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()", nullable=False
    )

    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )


class Question(Base):
    """Question or requirement extracted from a document."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)  # explicit | implicit
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_document: Mapped[str] = mapped_column(Text, nullable=False)
    question_metadata: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )

    document: Mapped["Document"] = relationship("Document", back_populates="questions")


class ContextEntry(Base):
    """Knowledge base entry used to ground and compare answers."""

    __tablename__ = "contexts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String, nullable=False
    )  # knowledge_base | website | document
    context_metadata: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )

    question_embeddings: Mapped[list["QuestionEmbedding"]] = relationship(
        "QuestionEmbedding", back_populates="context", cascade="all, delete-orphan", passive_deletes=True
    )
    answer_embeddings: Mapped[list["AnswerEmbedding"]] = relationship(
        "AnswerEmbedding", back_populates="context", cascade="all, delete-orphan", passive_deletes=True
    )


class QuestionEmbedding(Base):
    """Embedded question-like snippet of a context entry."""

    __tablename__ = "question_embeddings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    context_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contexts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )

    context: Mapped["ContextEntry"] = relationship("ContextEntry", back_populates="question_embeddings")


class AnswerEmbedding(Base):
    """Embedded statement snippet of a context entry."""

    __tablename__ = "answer_embeddings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    context_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contexts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )

    context: Mapped["ContextEntry"] = relationship("ContextEntry", back_populates="answer_embeddings")
