"""Registry reader port - read-only access to the external clause/control registry."""

from typing import Protocol
from uuid import UUID

from compliance_kb.application.dto.registry_dto import ClauseRecord, ControlRecord


class RegistryReader(Protocol):
    """Port for reading validated registry records of one data source."""

    async def list_clauses(self, data_source_id: UUID) -> list[ClauseRecord]: ...

    async def list_controls(self, data_source_id: UUID) -> list[ControlRecord]: ...
