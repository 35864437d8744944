"""Upsert document use case."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from compliance_kb.application.dto.document_dto import DocumentUpsertInput
from compliance_kb.application.use_cases.chunking.chunk_document import ChunkDocumentUseCase
from compliance_kb.domain.entities import Document
from compliance_kb.domain.exceptions import ValidationError
from compliance_kb.domain.value_objects import CanonicalRef, DocType, compute_text_hash

logger = logging.getLogger(__name__)


class UpsertDocumentUseCase:
    """Insert or update a document by canonical reference; rechunk when its text changes.

    ``updated_at`` advances on every upsert, including metadata-only
    updates, which marks the document's embeddings stale.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        chunk_document: ChunkDocumentUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._chunk_document = chunk_document

    async def execute(self, input_data: DocumentUpsertInput) -> UUID:
        """Upsert document. Returns document id."""
        try:
            doc_type = DocType(input_data.doc_type)
        except ValueError as e:
            raise ValidationError(f"Unknown document type: {input_data.doc_type}") from e

        canonical_ref = CanonicalRef.build(
            doc_type, input_data.external_id, input_data.data_source_id
        ).value
        text_hash = compute_text_hash(input_data.full_text)
        now = datetime.now(UTC)

        async with self._uow_factory() as uow:
            existing = await uow.documents.get_by_canonical_ref(canonical_ref)
            if existing:
                updated = replace(
                    existing,
                    data_source_id=_coalesce(input_data.data_source_id, existing.data_source_id),
                    title=input_data.title,
                    full_text=input_data.full_text,
                    text_hash=text_hash,
                    source_url=_coalesce(input_data.source_url, existing.source_url),
                    meta=_coalesce(input_data.meta, existing.meta),
                    is_active=input_data.is_active,
                    updated_at=now,
                )
                await uow.documents.update(updated)
                if existing.text_hash != text_hash:
                    await self._chunk_document.reconcile(uow, existing.id, input_data.full_text)
                return existing.id

            document = Document(
                id=uuid4(),
                doc_type=doc_type,
                canonical_ref=canonical_ref,
                title=input_data.title,
                external_id=input_data.external_id,
                data_source_id=input_data.data_source_id,
                full_text=input_data.full_text,
                text_hash=text_hash,
                source_url=input_data.source_url,
                meta=input_data.meta or {},
                is_active=input_data.is_active,
                created_at=now,
                updated_at=now,
            )
            await uow.documents.create(document)
            if text_hash:
                await self._chunk_document.reconcile(uow, document.id, input_data.full_text)
            logger.debug("Created document %s (%s)", document.id, canonical_ref)
            return document.id


def _coalesce(value, fallback):
    return value if value is not None else fallback
