"""Application ports - interfaces for external adapters."""

from compliance_kb.application.ports.chunker import Chunker
from compliance_kb.application.ports.embedding_provider import EmbeddingProvider
from compliance_kb.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Chunker",
    "EmbeddingProvider",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
