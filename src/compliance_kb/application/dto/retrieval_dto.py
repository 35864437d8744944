"""Retrieval DTOs."""

from dataclasses import dataclass, field
from uuid import UUID

from compliance_kb.domain.value_objects import DocType


@dataclass
class RetrieveFilters:
    """Optional, independently composable retrieval filters."""

    doc_types: list[DocType] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    external_id_prefix: str | None = None


@dataclass
class RetrievalHit:
    """Raw nearest-neighbor hit as returned by the chunk repository."""

    chunk_id: UUID
    content: str
    document_id: UUID
    title: str
    doc_type: DocType
    similarity: float
    external_id: str | None = None
    canonical_ref: str | None = None
    source_url: str | None = None
