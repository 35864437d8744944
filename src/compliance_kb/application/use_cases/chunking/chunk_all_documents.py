"""Chunk all documents use case."""

from compliance_kb.application.dto.document_dto import ChunkAllResult
from compliance_kb.application.use_cases.chunking.chunk_document import ChunkDocumentUseCase


class ChunkAllDocumentsUseCase:
    """Re-reconcile every active document that has text."""

    def __init__(
        self,
        unit_of_work_factory: type,
        chunk_document: ChunkDocumentUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._chunk_document = chunk_document

    async def execute(self) -> ChunkAllResult:
        async with self._uow_factory() as uow:
            documents = await uow.documents.list_chunkable()

        total_chunks = 0
        for document in documents:
            async with self._uow_factory() as uow:
                total_chunks += await self._chunk_document.reconcile(
                    uow, document.id, document.full_text
                )
        return ChunkAllResult(processed=len(documents), total_chunks=total_chunks)
