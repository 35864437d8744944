"""Retrieve use case - top-K semantic search over embedded chunks."""

import logging
from dataclasses import dataclass
from uuid import UUID

from compliance_kb.application.dto.retrieval_dto import RetrieveFilters
from compliance_kb.application.ports import EmbeddingProvider
from compliance_kb.domain.value_objects import DocType

logger = logging.getLogger(__name__)


@dataclass
class RetrieveResult:
    """Single ranked retrieval result."""

    chunk_id: UUID
    content: str
    document_id: UUID
    title: str
    doc_type: DocType
    similarity: float
    external_id: str | None = None
    canonical_ref: str | None = None
    source_url: str | None = None


class RetrieveUseCase:
    """Embed the query and rank embedded chunks of active documents by cosine similarity.

    Best effort: a missing provider or a failed query embedding yields an
    empty list. ``top_k`` is clamped into ``[1, max_top_k]``.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        embedding_provider: EmbeddingProvider,
        default_top_k: int = 8,
        max_top_k: int = 50,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._embedding_provider = embedding_provider
        self._default_top_k = default_top_k
        self._max_top_k = max_top_k

    async def execute(
        self,
        query: str,
        filters: RetrieveFilters | None = None,
        top_k: int | None = None,
    ) -> list[RetrieveResult]:
        """Execute retrieval."""
        if top_k is None:
            top_k = self._default_top_k
        top_k = min(max(top_k, 1), self._max_top_k)

        if not query or not query.strip():
            return []
        try:
            query_embedding = await self._embedding_provider.embed_text(query)
        except Exception:
            logger.warning("Query embedding failed", exc_info=True)
            return []
        if not query_embedding:
            return []

        async with self._uow_factory() as uow:
            hits = await uow.chunks.search(
                query_embedding=query_embedding,
                filters=filters or RetrieveFilters(),
                limit=top_k,
            )
        return [
            RetrieveResult(
                chunk_id=h.chunk_id,
                content=h.content,
                document_id=h.document_id,
                title=h.title,
                doc_type=h.doc_type,
                similarity=round(h.similarity, 3),
                external_id=h.external_id,
                canonical_ref=h.canonical_ref,
                source_url=h.source_url,
            )
            for h in hits
        ]
