"""Unit of Work port - transactional boundary."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from compliance_kb.application.ports.repositories.chunk_repository import ChunkRepository
from compliance_kb.application.ports.repositories.data_source_repository import (
    DataSourceRepository,
)
from compliance_kb.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from compliance_kb.application.ports.repositories.registry_reader import RegistryReader


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def chunks(self) -> ChunkRepository: ...

    @property
    def data_sources(self) -> DataSourceRepository: ...

    @property
    def registry(self) -> RegistryReader: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    def __call__(self) -> AbstractAsyncContextManager[UnitOfWork]: ...
