"""Pytest fixtures for compliance knowledge base tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

import pytest

from compliance_kb.application.dto.chunking_config import ChunkingConfig
from compliance_kb.application.dto.registry_dto import ClauseRecord, ControlRecord
from compliance_kb.application.dto.retrieval_dto import RetrievalHit, RetrieveFilters
from compliance_kb.domain.entities import Chunk, DataSource, Document, is_stale
from compliance_kb.domain.value_objects import cosine_similarity
from compliance_kb.main import ComplianceKB, build_compliance_kb


# --- Fake repositories ---


class FakeDocumentRepository:
    """In-memory document repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Document] = {}

    def get(self, document_id: UUID) -> Document:
        """Sync accessor for assertions."""
        return replace(self._by_id[document_id])

    async def get_by_id(self, document_id: UUID) -> Document | None:
        doc = self._by_id.get(document_id)
        return replace(doc) if doc else None

    async def get_by_canonical_ref(self, canonical_ref: str) -> Document | None:
        for doc in self._by_id.values():
            if doc.canonical_ref == canonical_ref:
                return replace(doc)
        return None

    async def list_chunkable(self) -> list[Document]:
        docs = [
            d for d in self._by_id.values() if d.is_active and d.full_text
        ]
        return [replace(d) for d in sorted(docs, key=lambda d: d.created_at)]

    async def create(self, document: Document) -> Document:
        if await self.get_by_canonical_ref(document.canonical_ref):
            raise ValueError(f"duplicate canonical_ref {document.canonical_ref}")
        self._by_id[document.id] = replace(document)
        return document

    async def update(self, document: Document) -> Document:
        self._by_id[document.id] = replace(document)
        return document

    async def count_active(self) -> int:
        return sum(1 for d in self._by_id.values() if d.is_active)


class FakeDataSourceRepository:
    """In-memory data source repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, DataSource] = {}

    def add(self, source: DataSource) -> None:
        """Helper to register a data source (for tests)."""
        self._by_id[source.id] = source

    def category_of(self, data_source_id: UUID | None) -> str | None:
        source = self._by_id.get(data_source_id) if data_source_id else None
        return source.category if source else None

    async def list_syncable(self) -> list[DataSource]:
        return [
            s
            for s in self._by_id.values()
            if s.is_active and s.validation_status == "VALID"
        ]


class FakeRegistryReader:
    """In-memory registry records keyed by data source."""

    def __init__(self) -> None:
        self.clauses: dict[UUID, list[ClauseRecord]] = {}
        self.controls: dict[UUID, list[ControlRecord]] = {}

    async def list_clauses(self, data_source_id: UUID) -> list[ClauseRecord]:
        return list(self.clauses.get(data_source_id, []))

    async def list_controls(self, data_source_id: UUID) -> list[ControlRecord]:
        return list(self.controls.get(data_source_id, []))


class FakeChunkRepository:
    """In-memory chunk repository with Python-side cosine search."""

    def __init__(
        self,
        documents: FakeDocumentRepository,
        data_sources: FakeDataSourceRepository,
    ) -> None:
        self._documents = documents
        self._data_sources = data_sources
        self._by_id: dict[UUID, Chunk] = {}

    def for_document(self, document_id: UUID) -> list[Chunk]:
        """Sync accessor for assertions, ordered by chunk index."""
        return sorted(
            (replace(c) for c in self._by_id.values() if c.document_id == document_id),
            key=lambda c: c.chunk_index,
        )

    def all(self) -> list[Chunk]:
        return [replace(c) for c in self._by_id.values()]

    def _at(self, document_id: UUID, chunk_index: int) -> Chunk | None:
        for c in self._by_id.values():
            if c.document_id == document_id and c.chunk_index == chunk_index:
                return c
        return None

    async def get_by_document_id(self, document_id: UUID) -> list[Chunk]:
        return self.for_document(document_id)

    async def create(self, chunk: Chunk) -> Chunk:
        if self._at(chunk.document_id, chunk.chunk_index):
            raise ValueError("duplicate (document_id, chunk_index)")
        self._by_id[chunk.id] = replace(chunk)
        return chunk

    async def replace_content(self, chunk: Chunk) -> Chunk:
        stored = self._at(chunk.document_id, chunk.chunk_index)
        stored.content = chunk.content
        stored.content_hash = chunk.content_hash
        stored.start_char = chunk.start_char
        stored.end_char = chunk.end_char
        stored.clear_embedding()
        return chunk

    async def delete_by_document_id(self, document_id: UUID) -> None:
        self._by_id = {
            k: c for k, c in self._by_id.items() if c.document_id != document_id
        }

    async def delete_from_index(self, document_id: UUID, chunk_index: int) -> None:
        self._by_id = {
            k: c
            for k, c in self._by_id.items()
            if not (c.document_id == document_id and c.chunk_index >= chunk_index)
        }

    async def list_embedding_candidates(self, limit: int) -> list[tuple[Chunk, Document]]:
        pairs = []
        for c in self._by_id.values():
            doc = self._documents._by_id[c.document_id]
            if is_stale(c, doc):
                pairs.append((c, doc))
        pairs.sort(
            key=lambda p: (
                p[0].embedded_at is not None,
                p[0].embedded_at or datetime.min.replace(tzinfo=UTC),
                str(p[0].document_id),
                p[0].chunk_index,
            )
        )
        return [(replace(c), replace(d)) for c, d in pairs[:limit]]

    async def save_embedding(
        self,
        chunk_id: UUID,
        content_hash: str,
        embedding: list[float],
        model: str,
        embedded_at: datetime,
    ) -> bool:
        stored = self._by_id.get(chunk_id)
        if stored is None or stored.content_hash != content_hash:
            return False
        stored.embedding = list(embedding)
        stored.embedding_model = model
        stored.embedded_at = embedded_at
        return True

    async def search(
        self,
        query_embedding: list[float],
        filters: RetrieveFilters,
        limit: int,
    ) -> list[RetrievalHit]:
        hits: list[RetrievalHit] = []
        for c in self._by_id.values():
            doc = self._documents._by_id[c.document_id]
            if c.embedding is None or not doc.is_active:
                continue
            if filters.doc_types and doc.doc_type not in filters.doc_types:
                continue
            if filters.categories and (
                self._data_sources.category_of(doc.data_source_id) not in filters.categories
            ):
                continue
            prefix = filters.external_id_prefix
            if prefix and not (
                (doc.external_id or "").startswith(prefix)
                or doc.canonical_ref.startswith(prefix)
            ):
                continue
            similarity = cosine_similarity(c.embedding, query_embedding)
            if similarity is None:
                continue
            hits.append(
                RetrievalHit(
                    chunk_id=c.id,
                    content=c.content,
                    document_id=doc.id,
                    title=doc.title,
                    doc_type=doc.doc_type,
                    similarity=similarity,
                    external_id=doc.external_id,
                    canonical_ref=doc.canonical_ref,
                    source_url=doc.source_url,
                )
            )
        hits.sort(key=lambda h: h.similarity, reverse=True)
        return hits[:limit]

    async def count_all(self) -> int:
        return len(self._by_id)

    async def count_embedded(self) -> int:
        return sum(1 for c in self._by_id.values() if c.embedding is not None)


# --- Fake UnitOfWork ---


class FakeDatabase:
    """Shared in-memory state behind every FakeUnitOfWork of one test."""

    def __init__(self) -> None:
        self.documents = FakeDocumentRepository()
        self.data_sources = FakeDataSourceRepository()
        self.chunks = FakeChunkRepository(self.documents, self.data_sources)
        self.registry = FakeRegistryReader()


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self, db: FakeDatabase | None = None) -> None:
        db = db or FakeDatabase()
        self.documents = db.documents
        self.chunks = db.chunks
        self.data_sources = db.data_sources
        self.registry = db.registry

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def make_uow_factory(db: FakeDatabase):
    """Factory returning async context manager with a FakeUnitOfWork over ``db``."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUnitOfWork]:
        yield FakeUnitOfWork(db)

    return factory


# --- Stub embedding provider ---


STUB_VECTOR = [0.1, 0.2, 0.3]


class StubEmbeddingProvider:
    """Deterministic embedding provider; ``responder`` maps text to a vector or raises."""

    def __init__(
        self,
        responder: Callable[[str], list[float] | None] | None = None,
        dimensions: int = 3,
        configured: bool = True,
        model: str = "stub-embedding-3",
        max_input_chars: int = 8000,
    ) -> None:
        self._responder = responder or (lambda text: list(STUB_VECTOR))
        self._dimensions = dimensions
        self._configured = configured
        self._model = model
        self._max_input_chars = max_input_chars
        self.calls: list[str] = []

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def max_input_chars(self) -> int:
        return self._max_input_chars

    def is_configured(self) -> bool:
        return self._configured

    async def embed_text(self, text: str) -> list[float] | None:
        self.calls.append(text)
        if not self._configured:
            return None
        return self._responder(text)


# --- Text helpers ---


def paragraph(word: str, length: int = 1000) -> str:
    """Paragraph of roughly ``length`` chars with sentence breaks and no blank lines."""
    sentence = f"The contractor shall {word} covered defense information. "
    return (sentence * (length // len(sentence) + 1))[:length].strip()


# --- Fixtures ---


@pytest.fixture
def db() -> FakeDatabase:
    """Fresh in-memory database for each test."""
    return FakeDatabase()


@pytest.fixture
def uow_factory(db: FakeDatabase):
    return make_uow_factory(db)


@pytest.fixture
def stub_provider() -> StubEmbeddingProvider:
    return StubEmbeddingProvider()


@pytest.fixture
def kb(uow_factory, stub_provider: StubEmbeddingProvider) -> ComplianceKB:
    """Use cases wired over the fake database and stub provider."""
    return build_compliance_kb(uow_factory=uow_factory, embedding_provider=stub_provider)


@pytest.fixture
def mock_embedding_provider():
    """AsyncMock EmbeddingProvider - returns the stub vector for any text."""
    from unittest.mock import AsyncMock, MagicMock

    mock = MagicMock()
    mock.model = "mock-embedding"
    mock.dimensions = 3
    mock.max_input_chars = 8000
    mock.is_configured.return_value = True
    mock.embed_text = AsyncMock(return_value=list(STUB_VECTOR))
    return mock


@pytest.fixture
def chunking_config() -> ChunkingConfig:
    """Default chunk window (800-1200 chars, 100 lookahead)."""
    return ChunkingConfig(min_chars=800, max_chars=1200, lookahead_chars=100)
