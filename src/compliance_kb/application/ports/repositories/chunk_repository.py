"""Chunk repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from compliance_kb.application.dto.retrieval_dto import RetrievalHit, RetrieveFilters
from compliance_kb.domain.entities import Chunk, Document


class ChunkRepository(Protocol):
    """Port for chunk persistence, embedding writes and vector search."""

    async def get_by_document_id(self, document_id: UUID) -> list[Chunk]: ...

    async def create(self, chunk: Chunk) -> Chunk: ...

    async def replace_content(self, chunk: Chunk) -> Chunk: ...

    async def delete_by_document_id(self, document_id: UUID) -> None: ...

    async def delete_from_index(self, document_id: UUID, chunk_index: int) -> None: ...

    async def list_embedding_candidates(self, limit: int) -> list[tuple[Chunk, Document]]: ...

    async def save_embedding(
        self,
        chunk_id: UUID,
        content_hash: str,
        embedding: list[float],
        model: str,
        embedded_at: datetime,
    ) -> bool:
        """Store the embedding if the chunk still has ``content_hash``. Returns whether it was stored."""
        ...

    async def search(
        self,
        query_embedding: list[float],
        filters: RetrieveFilters,
        limit: int,
    ) -> list[RetrievalHit]: ...

    async def count_all(self) -> int: ...

    async def count_embedded(self) -> int: ...
