"""Document entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from compliance_kb.domain.value_objects import DocType


@dataclass
class Document:
    """Compliance document with full text and hash for change detection."""

    id: UUID
    doc_type: DocType
    canonical_ref: str
    title: str
    created_at: datetime
    updated_at: datetime
    external_id: str | None = None
    data_source_id: UUID | None = None
    full_text: str | None = None
    text_hash: str | None = None
    source_url: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True

    def __post_init__(self) -> None:
        self.doc_type = DocType(self.doc_type)
        if not self.canonical_ref:
            raise ValueError("canonical_ref must not be empty")
        if self.meta is None:
            self.meta = {}

    @property
    def has_text(self) -> bool:
        return self.text_hash is not None
