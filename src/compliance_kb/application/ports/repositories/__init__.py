"""Repository ports."""

from compliance_kb.application.ports.repositories.chunk_repository import ChunkRepository
from compliance_kb.application.ports.repositories.data_source_repository import (
    DataSourceRepository,
)
from compliance_kb.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from compliance_kb.application.ports.repositories.registry_reader import RegistryReader

__all__ = [
    "ChunkRepository",
    "DataSourceRepository",
    "DocumentRepository",
    "RegistryReader",
]
