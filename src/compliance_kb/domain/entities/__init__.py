"""Domain entities."""

from compliance_kb.domain.entities.chunk import Chunk, is_stale
from compliance_kb.domain.entities.data_source import DataSource
from compliance_kb.domain.entities.document import Document

__all__ = [
    "Chunk",
    "DataSource",
    "Document",
    "is_stale",
]
