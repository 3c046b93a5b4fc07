from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rfi_responder.database.models import ContextEntry
from rfi_responder.repositories.base_repository import BaseRepository


class ContextRepository(BaseRepository[ContextEntry]):
    """Repository for knowledge base entries."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ContextEntry)

    async def create_context(
        self,
        title: str,
        content: str,
        type: str,
        metadata: Optional[dict] = None,
    ) -> ContextEntry:
        return await self.create(
            title=title,
            content=content,
            type=type,
            context_metadata=metadata or {},
        )

    async def list_contexts(self) -> List[ContextEntry]:
        return await self.get_all(limit=10_000)
