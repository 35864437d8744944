"""Document repository port."""

from typing import Protocol
from uuid import UUID

from compliance_kb.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for document persistence."""

    async def get_by_id(self, document_id: UUID) -> Document | None: ...

    async def get_by_canonical_ref(self, canonical_ref: str) -> Document | None: ...

    async def list_chunkable(self) -> list[Document]: ...

    async def create(self, document: Document) -> Document: ...

    async def update(self, document: Document) -> Document: ...

    async def count_active(self) -> int: ...
