"""PostgreSQL document repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from compliance_kb.domain.entities import Document

DOCUMENT_COLUMNS = (
    "id, doc_type, canonical_ref, title, created_at, updated_at, external_id, "
    "data_source_id, full_text, text_hash, source_url, meta, is_active"
)


def row_to_document(r: tuple) -> Document:
    """Build a Document from a row selected with DOCUMENT_COLUMNS order."""
    return Document(
        id=r[0],
        doc_type=r[1],
        canonical_ref=r[2],
        title=r[3],
        created_at=r[4],
        updated_at=r[5],
        external_id=r[6],
        data_source_id=r[7],
        full_text=r[8],
        text_hash=r[9],
        source_url=r[10],
        meta=r[11] or {},
        is_active=r[12],
    )


class PostgresDocumentRepository:
    """Document repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, document_id: UUID) -> Document | None:
        """Get document by id."""
        cur = await self._conn.execute(
            f"SELECT {DOCUMENT_COLUMNS} FROM compliance_documents WHERE id = %s",
            (document_id,),
        )
        r = await cur.fetchone()
        return row_to_document(r) if r else None

    async def get_by_canonical_ref(self, canonical_ref: str) -> Document | None:
        """Get document by canonical reference."""
        cur = await self._conn.execute(
            f"SELECT {DOCUMENT_COLUMNS} FROM compliance_documents WHERE canonical_ref = %s",
            (canonical_ref,),
        )
        r = await cur.fetchone()
        return row_to_document(r) if r else None

    async def list_chunkable(self) -> list[Document]:
        """Active documents with non-empty text."""
        cur = await self._conn.execute(
            f"SELECT {DOCUMENT_COLUMNS} FROM compliance_documents "
            "WHERE is_active = true AND full_text IS NOT NULL AND full_text != '' "
            "ORDER BY created_at, id"
        )
        return [row_to_document(r) for r in await cur.fetchall()]

    async def create(self, document: Document) -> Document:
        """Create document."""
        await self._conn.execute(
            "INSERT INTO compliance_documents (id, doc_type, canonical_ref, title, created_at, "
            "updated_at, external_id, data_source_id, full_text, text_hash, source_url, meta, "
            "is_active) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                document.id,
                str(document.doc_type),
                document.canonical_ref,
                document.title,
                document.created_at,
                document.updated_at,
                document.external_id,
                document.data_source_id,
                document.full_text,
                document.text_hash,
                document.source_url,
                Jsonb(document.meta),
                document.is_active,
            ),
        )
        return document

    async def update(self, document: Document) -> Document:
        """Update mutable document fields."""
        await self._conn.execute(
            "UPDATE compliance_documents SET data_source_id=%s, title=%s, full_text=%s, "
            "text_hash=%s, source_url=%s, meta=%s, is_active=%s, updated_at=%s WHERE id=%s",
            (
                document.data_source_id,
                document.title,
                document.full_text,
                document.text_hash,
                document.source_url,
                Jsonb(document.meta),
                document.is_active,
                document.updated_at,
                document.id,
            ),
        )
        return document

    async def count_active(self) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM compliance_documents WHERE is_active = true"
        )
        r = await cur.fetchone()
        return int(r[0]) if r else 0
