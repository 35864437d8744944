"""PostgreSQL chunk repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from compliance_kb.application.dto.retrieval_dto import RetrievalHit, RetrieveFilters
from compliance_kb.domain.entities import Chunk, Document
from compliance_kb.domain.value_objects import DocType
from compliance_kb.infrastructure.persistence.postgres.document_repository import (
    DOCUMENT_COLUMNS,
    row_to_document,
)
from compliance_kb.infrastructure.persistence.postgres.embedding_storage import (
    EmbeddingStorage,
)

CHUNK_COLUMNS = (
    "id, document_id, chunk_index, content, content_hash, start_char, end_char, "
    "embedding, embedding_model, embedded_at"
)

SEARCH_COLUMNS = (
    "c.id, c.content, c.document_id, d.title, d.doc_type, "
    "d.external_id, d.canonical_ref, d.source_url"
)


def _prefixed(columns: str, alias: str) -> str:
    return ", ".join(f"{alias}.{c.strip()}" for c in columns.split(","))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _build_retrieve_filter_conditions(
    filters: RetrieveFilters,
) -> tuple[list[str], list[object]]:
    """Build SQL AND conditions and params for retrieval filters. Returns (conditions, params)."""
    conditions: list[str] = []
    params: list[object] = []
    if filters.doc_types:
        conditions.append("d.doc_type = ANY(%s)")
        params.append([str(t) for t in filters.doc_types])
    if filters.categories:
        conditions.append("ds.category = ANY(%s)")
        params.append(list(filters.categories))
    if filters.external_id_prefix:
        pattern = _escape_like(filters.external_id_prefix) + "%"
        conditions.append("(d.external_id LIKE %s OR d.canonical_ref LIKE %s)")
        params.extend([pattern, pattern])
    return conditions, params


class PostgresChunkRepository:
    """Chunk repository with reconciliation writes, embedding backfill and vector search."""

    def __init__(self, conn: AsyncConnection, storage: EmbeddingStorage) -> None:
        self._conn = conn
        self._storage = storage

    def _row_to_chunk(self, r: tuple) -> Chunk:
        return Chunk(
            id=r[0],
            document_id=r[1],
            chunk_index=r[2],
            content=r[3],
            content_hash=r[4],
            start_char=r[5],
            end_char=r[6],
            embedding=self._storage.decode(r[7]),
            embedding_model=r[8],
            embedded_at=r[9],
        )

    async def get_by_document_id(self, document_id: UUID) -> list[Chunk]:
        """Get chunks of a document ordered by chunk index."""
        cur = await self._conn.execute(
            f"SELECT {CHUNK_COLUMNS} FROM compliance_chunks WHERE document_id = %s "
            "ORDER BY chunk_index",
            (document_id,),
        )
        return [self._row_to_chunk(r) for r in await cur.fetchall()]

    async def create(self, chunk: Chunk) -> Chunk:
        """Insert a chunk without embedding."""
        await self._conn.execute(
            "INSERT INTO compliance_chunks (id, document_id, chunk_index, content, content_hash, "
            "start_char, end_char) VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                chunk.id,
                chunk.document_id,
                chunk.chunk_index,
                chunk.content,
                chunk.content_hash,
                chunk.start_char,
                chunk.end_char,
            ),
        )
        return chunk

    async def replace_content(self, chunk: Chunk) -> Chunk:
        """Overwrite content and offsets of a chunk and clear its embedding."""
        await self._conn.execute(
            "UPDATE compliance_chunks SET content = %s, content_hash = %s, start_char = %s, "
            "end_char = %s, embedding = NULL, embedding_model = NULL, embedded_at = NULL "
            "WHERE document_id = %s AND chunk_index = %s",
            (
                chunk.content,
                chunk.content_hash,
                chunk.start_char,
                chunk.end_char,
                chunk.document_id,
                chunk.chunk_index,
            ),
        )
        return chunk

    async def delete_by_document_id(self, document_id: UUID) -> None:
        """Delete all chunks for document."""
        await self._conn.execute(
            "DELETE FROM compliance_chunks WHERE document_id = %s", (document_id,)
        )

    async def delete_from_index(self, document_id: UUID, chunk_index: int) -> None:
        """Delete chunks at and after chunk_index."""
        await self._conn.execute(
            "DELETE FROM compliance_chunks WHERE document_id = %s AND chunk_index >= %s",
            (document_id, chunk_index),
        )

    async def list_embedding_candidates(self, limit: int) -> list[tuple[Chunk, Document]]:
        """Chunks without a current embedding, never-embedded first."""
        cur = await self._conn.execute(
            f"SELECT {_prefixed(CHUNK_COLUMNS, 'c')}, {_prefixed(DOCUMENT_COLUMNS, 'd')} "
            "FROM compliance_chunks c "
            "JOIN compliance_documents d ON d.id = c.document_id "
            "WHERE c.embedding IS NULL OR c.embedded_at IS NULL OR c.embedded_at < d.updated_at "
            "ORDER BY c.embedded_at ASC NULLS FIRST, c.document_id, c.chunk_index "
            "LIMIT %s",
            (limit,),
        )
        rows = await cur.fetchall()
        return [(self._row_to_chunk(r[:10]), row_to_document(r[10:])) for r in rows]

    async def save_embedding(
        self,
        chunk_id: UUID,
        content_hash: str,
        embedding: list[float],
        model: str,
        embedded_at: datetime,
    ) -> bool:
        """Persist an embedding with model tag and timestamp if the content is unchanged."""
        cur = await self._conn.execute(
            f"UPDATE compliance_chunks SET embedding = %s{self._storage.cast}, "
            "embedding_model = %s, embedded_at = %s WHERE id = %s AND content_hash = %s",
            (self._storage.encode(embedding), model, embedded_at, chunk_id, content_hash),
        )
        return cur.rowcount > 0

    async def search(
        self,
        query_embedding: list[float],
        filters: RetrieveFilters,
        limit: int,
    ) -> list[RetrievalHit]:
        """Nearest-neighbor search over embedded chunks of active documents."""
        conds, params = _build_retrieve_filter_conditions(filters)
        where_extra = "".join(f" AND {c}" for c in conds)
        from_sql = (
            "FROM compliance_chunks c "
            "JOIN compliance_documents d ON d.id = c.document_id "
            "LEFT JOIN compliance_data_sources ds ON ds.id = d.data_source_id "
            f"WHERE c.embedding IS NOT NULL AND d.is_active = true{where_extra}"
        )
        rows = await self._storage.rank(
            self._conn, SEARCH_COLUMNS, from_sql, params, "c.embedding", query_embedding, limit
        )
        return [
            RetrievalHit(
                chunk_id=r[0],
                content=r[1],
                document_id=r[2],
                title=r[3],
                doc_type=DocType(r[4]),
                external_id=r[5],
                canonical_ref=r[6],
                source_url=r[7],
                similarity=float(r[8]),
            )
            for r in rows
        ]

    async def count_all(self) -> int:
        cur = await self._conn.execute("SELECT COUNT(*) FROM compliance_chunks")
        r = await cur.fetchone()
        return int(r[0]) if r else 0

    async def count_embedded(self) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM compliance_chunks WHERE embedding IS NOT NULL"
        )
        r = await cur.fetchone()
        return int(r[0]) if r else 0
