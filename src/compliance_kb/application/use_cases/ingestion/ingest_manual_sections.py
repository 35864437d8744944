"""Ingest manual sections use case."""

from compliance_kb.application.dto.document_dto import DocumentUpsertInput
from compliance_kb.application.dto.registry_dto import ManualSectionRecord
from compliance_kb.application.use_cases.document.upsert_document import UpsertDocumentUseCase
from compliance_kb.domain.value_objects import DocType


class IngestManualSectionsUseCase:
    """Upsert internal manual sections as MANUAL_SECTION documents."""

    def __init__(self, upsert_document: UpsertDocumentUseCase) -> None:
        self._upsert_document = upsert_document

    async def execute(self, sections: list[ManualSectionRecord]) -> int:
        for s in sections:
            await self._upsert_document.execute(
                DocumentUpsertInput(
                    doc_type=DocType.MANUAL_SECTION,
                    external_id=s.id,
                    title=s.title,
                    full_text=s.content,
                    meta={"part": s.part},
                )
            )
        return len(sections)
