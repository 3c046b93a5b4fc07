"""Database module for SQLAlchemy models and session management."""

from rfi_responder.database.base import Base, async_session_maker, engine, get_async_session
from rfi_responder.database.client import DatabaseClient, close_database, db_client, init_database
from rfi_responder.database.models import (
    AnswerEmbedding,
    ContextEntry,
    Document,
    Question,
    QuestionEmbedding,
)

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "get_async_session",
    "DatabaseClient",
    "db_client",
    "init_database",
    "close_database",
    "Document",
    "Question",
    "ContextEntry",
    "QuestionEmbedding",
    "AnswerEmbedding",
]
