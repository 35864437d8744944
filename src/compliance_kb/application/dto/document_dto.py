"""Document DTOs."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from compliance_kb.domain.value_objects import DocType


@dataclass
class DocumentUpsertInput:
    """Input for upserting a document from a record source."""

    doc_type: DocType
    title: str
    external_id: str | None = None
    full_text: str | None = None
    source_url: str | None = None
    meta: dict[str, Any] | None = None
    is_active: bool = True
    data_source_id: UUID | None = None


@dataclass
class ChunkAllResult:
    """Summary of a full re-chunk pass."""

    processed: int
    total_chunks: int


@dataclass
class SyncRegistryResult:
    """Documents ingested per record kind during a registry sync."""

    clauses: int = 0
    controls: int = 0
