"""Chunk document use case - incremental chunk reconciliation."""

import logging
from uuid import UUID, uuid4

from compliance_kb.application.dto.chunking_config import ChunkingConfig
from compliance_kb.application.ports import Chunker, UnitOfWork
from compliance_kb.domain.entities import Chunk
from compliance_kb.domain.exceptions import NotFound
from compliance_kb.domain.value_objects import compute_content_hash

logger = logging.getLogger(__name__)


class ChunkDocumentUseCase:
    """Reconcile a document's persisted chunks with its current text.

    Chunks whose content hash is unchanged keep their embedding; changed
    chunks are rewritten with cleared embedding fields; new indices are
    inserted and surplus trailing indices deleted, so indices stay
    contiguous from 0.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        chunker: Chunker,
        chunking_config: ChunkingConfig,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._chunker = chunker
        self._config = chunking_config

    async def execute(self, document_id: UUID, full_text: str | None) -> int:
        """Reconcile chunks for an existing document. Returns chunk count."""
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
            if document is None:
                raise NotFound("Document", str(document_id))
            return await self.reconcile(uow, document_id, full_text)

    async def reconcile(self, uow: UnitOfWork, document_id: UUID, full_text: str | None) -> int:
        """Reconcile inside a caller-owned unit of work."""
        if not full_text or not full_text.strip():
            await uow.chunks.delete_by_document_id(document_id)
            logger.debug("Document %s has no text, chunks removed", document_id)
            return 0

        spans = self._chunker.split(full_text, self._config)
        existing = {c.chunk_index: c for c in await uow.chunks.get_by_document_id(document_id)}

        inserted = rewritten = 0
        for index, span in enumerate(spans):
            content_hash = compute_content_hash(span.content)
            current = existing.get(index)
            if current is None:
                await uow.chunks.create(
                    Chunk(
                        id=uuid4(),
                        document_id=document_id,
                        chunk_index=index,
                        content=span.content,
                        content_hash=content_hash,
                        start_char=span.start_char,
                        end_char=span.end_char,
                    )
                )
                inserted += 1
            elif current.content_hash != content_hash:
                current.content = span.content
                current.content_hash = content_hash
                current.start_char = span.start_char
                current.end_char = span.end_char
                current.clear_embedding()
                await uow.chunks.replace_content(current)
                rewritten += 1

        removed = max(len(existing) - len(spans), 0)
        if removed:
            await uow.chunks.delete_from_index(document_id, len(spans))

        logger.debug(
            "Reconciled document %s: %d chunks (%d inserted, %d rewritten, %d removed)",
            document_id,
            len(spans),
            inserted,
            rewritten,
            removed,
        )
        return len(spans)
