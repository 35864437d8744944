"""Chunk entity - retrievable slice of a document with optional embedding."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from compliance_kb.domain.entities.document import Document


@dataclass
class Chunk:
    """Chunk - contiguous slice of document text, the unit of embedding."""

    id: UUID
    document_id: UUID
    chunk_index: int
    content: str
    content_hash: str
    start_char: int
    end_char: int
    embedding: list[float] | None = None
    embedding_model: str | None = None
    embedded_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.chunk_index < 0:
            raise ValueError("chunk_index must be >= 0")
        if not 0 <= self.start_char <= self.end_char:
            raise ValueError("start_char/end_char must satisfy 0 <= start <= end")

    def clear_embedding(self) -> None:
        self.embedding = None
        self.embedding_model = None
        self.embedded_at = None


def is_stale(chunk: Chunk, document: Document) -> bool:
    """Chunk needs (re-)embedding: never embedded, or document updated since."""
    if chunk.embedding is None or chunk.embedded_at is None:
        return True
    return chunk.embedded_at < document.updated_at
