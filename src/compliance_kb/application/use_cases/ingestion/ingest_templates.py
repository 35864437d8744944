"""Ingest templates use case."""

from uuid import UUID

from compliance_kb.application.dto.document_dto import DocumentUpsertInput
from compliance_kb.application.dto.registry_dto import TemplateRecord
from compliance_kb.application.use_cases.document.upsert_document import UpsertDocumentUseCase
from compliance_kb.domain.value_objects import DocType


class IngestTemplatesUseCase:
    """Upsert contract/policy templates as TEMPLATE documents."""

    def __init__(self, upsert_document: UpsertDocumentUseCase) -> None:
        self._upsert_document = upsert_document

    async def execute(
        self,
        templates: list[TemplateRecord],
        data_source_id: UUID | None = None,
    ) -> int:
        for t in templates:
            await self._upsert_document.execute(
                DocumentUpsertInput(
                    doc_type=DocType.TEMPLATE,
                    external_id=t.name,
                    title=t.name,
                    full_text=t.text,
                    data_source_id=data_source_id,
                    meta={"template_type": t.type, **(t.meta or {})},
                )
            )
        return len(templates)
