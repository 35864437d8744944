"""Embedding storage strategies - pgvector column or jsonb fallback."""

import logging
from typing import Protocol

from psycopg import AsyncConnection

from compliance_kb.domain.exceptions import EmbeddingStorageUnavailable
from compliance_kb.domain.value_objects import cosine_similarity, format_vector, parse_vector

logger = logging.getLogger(__name__)


class EmbeddingStorage(Protocol):
    """How chunk embeddings are written and ranked for one column type."""

    name: str

    @property
    def cast(self) -> str: ...

    def encode(self, vector: list[float]) -> str: ...

    def decode(self, raw: object) -> list[float] | None: ...

    async def rank(
        self,
        conn: AsyncConnection,
        columns: str,
        from_sql: str,
        params: list[object],
        embedding_column: str,
        query_embedding: list[float],
        limit: int,
    ) -> list[tuple]: ...


class PgVectorEmbeddingStorage:
    """Embeddings in a pgvector column, ranked by cosine distance in SQL."""

    name = "pgvector"

    @property
    def cast(self) -> str:
        return "::vector"

    def encode(self, vector: list[float]) -> str:
        return format_vector(vector)

    def decode(self, raw: object) -> list[float] | None:
        return parse_vector(raw)

    async def rank(
        self,
        conn: AsyncConnection,
        columns: str,
        from_sql: str,
        params: list[object],
        embedding_column: str,
        query_embedding: list[float],
        limit: int,
    ) -> list[tuple]:
        """Rows of ``columns`` plus a trailing similarity column, best first."""
        vec = self.encode(query_embedding)
        cur = await conn.execute(
            f"SELECT {columns}, 1 - ({embedding_column} <=> %s::vector) AS similarity "
            f"{from_sql} "
            f"ORDER BY {embedding_column} <=> %s::vector LIMIT %s",
            [vec, *params, vec, limit],
        )
        return await cur.fetchall()


class JsonEmbeddingStorage:
    """Embeddings in a jsonb column, ranked by cosine similarity in Python."""

    name = "jsonb"

    @property
    def cast(self) -> str:
        return "::jsonb"

    def encode(self, vector: list[float]) -> str:
        return format_vector(vector)

    def decode(self, raw: object) -> list[float] | None:
        return parse_vector(raw)

    async def rank(
        self,
        conn: AsyncConnection,
        columns: str,
        from_sql: str,
        params: list[object],
        embedding_column: str,
        query_embedding: list[float],
        limit: int,
    ) -> list[tuple]:
        cur = await conn.execute(f"SELECT {columns}, {embedding_column} {from_sql}", params)
        rows = await cur.fetchall()
        return rank_rows_by_cosine(rows, query_embedding, limit, self.decode)


def rank_rows_by_cosine(
    rows: list[tuple],
    query_embedding: list[float],
    limit: int,
    decode=parse_vector,
) -> list[tuple]:
    """Replace the trailing embedding column of each row with its similarity; best ``limit`` first.

    Rows whose embedding dimension differs from the query are dropped.
    """
    scored: list[tuple] = []
    for row in rows:
        similarity = cosine_similarity(decode(row[-1]) or [], query_embedding)
        if similarity is None:
            continue
        scored.append((*row[:-1], similarity))
    scored.sort(key=lambda r: r[-1], reverse=True)
    return scored[:limit]


async def probe_embedding_storage(conn: AsyncConnection) -> EmbeddingStorage:
    """Pick the storage strategy from the type of compliance_chunks.embedding."""
    cur = await conn.execute(
        "SELECT udt_name FROM information_schema.columns "
        "WHERE table_name = 'compliance_chunks' AND column_name = 'embedding'"
    )
    row = await cur.fetchone()
    if not row:
        raise EmbeddingStorageUnavailable(
            "compliance_chunks.embedding not found - run database migrations"
        )
    storage: EmbeddingStorage = (
        PgVectorEmbeddingStorage() if row[0] == "vector" else JsonEmbeddingStorage()
    )
    logger.info("Using %s embedding storage", storage.name)
    return storage
