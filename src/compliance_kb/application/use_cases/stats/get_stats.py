"""Knowledge base stats use case."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from compliance_kb.application.ports import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class KBStats:
    """Corpus coverage metrics."""

    documents_count: int
    chunks_count: int
    embedded_count: int
    embedding_coverage: float


class GetStatsUseCase:
    """Count documents, chunks and embedded chunks.

    Dashboard signal only: each count runs in its own unit of work and a
    failing count reports 0 instead of raising.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> KBStats:
        documents_count = await self._count("documents", lambda uow: uow.documents.count_active())
        chunks_count = await self._count("chunks", lambda uow: uow.chunks.count_all())
        embedded_count = await self._count("embedded", lambda uow: uow.chunks.count_embedded())
        coverage = embedded_count / chunks_count if chunks_count > 0 else 0.0
        return KBStats(
            documents_count=documents_count,
            chunks_count=chunks_count,
            embedded_count=embedded_count,
            embedding_coverage=coverage,
        )

    async def _count(self, name: str, query: Callable[[UnitOfWork], Awaitable[int]]) -> int:
        try:
            async with self._uow_factory() as uow:
                return await query(uow)
        except Exception:
            logger.warning("Stats count '%s' failed, reporting 0", name, exc_info=True)
            return 0
