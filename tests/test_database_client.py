from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from rfi_responder.database.base import Base
from rfi_responder.database.client import DatabaseClient, db_client, init_database


def engine_with(conn, method="connect"):
    engine = MagicMock()
    context = getattr(engine, method).return_value
    context.__aenter__ = AsyncMock(return_value=conn)
    context.__aexit__ = AsyncMock(return_value=False)
    return engine


@pytest.mark.asyncio
async def test_health_check_reports_pgvector_version():
    conn = MagicMock()
    conn.scalar = AsyncMock(return_value="0.7.0")

    health = await DatabaseClient(engine_with(conn)).health_check()

    assert health["status"] == "healthy"
    assert health["pgvector"] == "0.7.0"


@pytest.mark.asyncio
async def test_health_check_without_pgvector_is_degraded():
    conn = MagicMock()
    conn.scalar = AsyncMock(return_value=None)

    health = await DatabaseClient(engine_with(conn)).health_check()

    assert health["status"] == "degraded"
    assert health["connected"] is True


@pytest.mark.asyncio
async def test_unreachable_database_is_unhealthy():
    engine = MagicMock()
    engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    health = await DatabaseClient(engine).health_check()

    assert health["status"] == "unhealthy"
    assert health["connected"] is False
    assert "connection refused" in health["error"]


@pytest.mark.asyncio
async def test_create_schema_enables_vector_and_creates_tables():
    conn = MagicMock()
    conn.execute = AsyncMock()
    conn.run_sync = AsyncMock()

    await DatabaseClient(engine_with(conn, method="begin")).create_schema()

    assert "CREATE EXTENSION IF NOT EXISTS vector" in str(conn.execute.await_args.args[0])
    conn.run_sync.assert_awaited_once_with(Base.metadata.create_all)


@pytest.mark.asyncio
async def test_init_database_can_skip_schema_creation():
    with patch.object(db_client, "connect", AsyncMock()) as connect, patch.object(
        db_client, "create_schema", AsyncMock()
    ) as create_schema:
        await init_database(create_schema=False)

    connect.assert_awaited_once()
    create_schema.assert_not_awaited()
