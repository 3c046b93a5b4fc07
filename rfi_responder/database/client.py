"""Database connectivity checks and schema bootstrap."""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from rfi_responder.database.base import Base, engine
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

VECTOR_EXTENSION_QUERY = text("SELECT extversion FROM pg_extension WHERE extname = 'vector'")


class DatabaseClient:
    """Checks the RFI database and creates its tables on a fresh install.

    Schema changes to existing databases go through Alembic; ``create_schema``
    only adds what is missing.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def connect(self) -> None:
        """Open one connection to prove the database is reachable.

        Raises:
            SQLAlchemyError: If the database cannot be reached
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        LOGGER.info("Database connection successful")

    async def disconnect(self) -> None:
        await self.engine.dispose()
        LOGGER.info("Database connection closed")

    async def create_schema(self) -> None:
        """Enable pgvector and create any missing document, question and context tables."""
        async with self.engine.begin() as conn:
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            await conn.run_sync(Base.metadata.create_all)

        LOGGER.info("Database schema verified", extra={"tables": sorted(Base.metadata.tables)})

    async def health_check(self) -> dict:
        """Report reachability and the installed pgvector version.

        A reachable database without pgvector cannot store embeddings and is
        reported as ``degraded``.
        """
        try:
            async with self.engine.connect() as conn:
                vector_version: Optional[str] = await conn.scalar(VECTOR_EXTENSION_QUERY)
        except SQLAlchemyError as e:
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "connected": False, "error": str(e)}

        return {
            "status": "healthy" if vector_version else "degraded",
            "connected": True,
            "database": "postgresql",
            "pgvector": vector_version,
        }


db_client = DatabaseClient(engine)


async def init_database(create_schema: bool = True) -> None:
    """Verify connectivity and, unless disabled, create missing tables."""
    LOGGER.info("Initializing database connection...")
    await db_client.connect()

    if create_schema:
        await db_client.create_schema()

    LOGGER.info("Database initialization completed")


async def close_database() -> None:
    LOGGER.info("Closing database connection...")
    await db_client.disconnect()
