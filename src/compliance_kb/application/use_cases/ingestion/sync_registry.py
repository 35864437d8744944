"""Sync registry use case - mirror validated clause/control registries into the knowledge base."""

import logging
from uuid import UUID

from compliance_kb.application.dto.document_dto import DocumentUpsertInput, SyncRegistryResult
from compliance_kb.application.dto.registry_dto import ClauseRecord, ControlRecord
from compliance_kb.application.use_cases.document.upsert_document import UpsertDocumentUseCase
from compliance_kb.domain.value_objects import DocType

logger = logging.getLogger(__name__)

CLAUSE_CATEGORIES = frozenset({"FAR", "DFARS", "INTERNAL"})
CONTROL_CATEGORIES = frozenset({"CMMC", "NIST"})


def clause_to_input(record: ClauseRecord, data_source_id: UUID | None) -> DocumentUpsertInput:
    external_id = f"{record.regulation} {record.clause_number}".strip()
    parts = [p for p in (record.title, record.description, record.full_text) if p]
    return DocumentUpsertInput(
        doc_type=DocType.CLAUSE,
        external_id=external_id,
        title=record.title,
        full_text="\n\n".join(parts) or record.title,
        data_source_id=data_source_id,
        meta={
            "clause_number": record.clause_number,
            "regulation": record.regulation,
            "category": record.category,
            "risk_level": record.risk_level,
            "flow_down": record.flow_down,
        },
    )


def control_to_input(record: ControlRecord, data_source_id: UUID | None) -> DocumentUpsertInput:
    parts = [p for p in (record.practice_statement, record.objective) if p]
    return DocumentUpsertInput(
        doc_type=DocType.CONTROL,
        external_id=record.control_identifier,
        title=record.control_identifier,
        full_text="\n\n".join(parts) or record.practice_statement,
        data_source_id=data_source_id,
        meta={"domain": record.domain, "level": record.level},
    )


class SyncRegistryUseCase:
    """Upsert clauses and controls of every active, validated data source."""

    def __init__(
        self,
        unit_of_work_factory: type,
        upsert_document: UpsertDocumentUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._upsert_document = upsert_document

    async def execute(self) -> SyncRegistryResult:
        async with self._uow_factory() as uow:
            sources = await uow.data_sources.list_syncable()

        result = SyncRegistryResult()
        for source in sources:
            if source.category in CLAUSE_CATEGORIES:
                result.clauses += await self.ingest_clauses(source.id)
            if source.category in CONTROL_CATEGORIES:
                result.controls += await self.ingest_controls(source.id)
        logger.info(
            "Registry sync: %d sources, %d clauses, %d controls",
            len(sources),
            result.clauses,
            result.controls,
        )
        return result

    async def ingest_clauses(self, data_source_id: UUID) -> int:
        async with self._uow_factory() as uow:
            records = await uow.registry.list_clauses(data_source_id)
        for record in records:
            await self._upsert_document.execute(clause_to_input(record, data_source_id))
        return len(records)

    async def ingest_controls(self, data_source_id: UUID) -> int:
        async with self._uow_factory() as uow:
            records = await uow.registry.list_controls(data_source_id)
        for record in records:
            await self._upsert_document.execute(control_to_input(record, data_source_id))
        return len(records)
