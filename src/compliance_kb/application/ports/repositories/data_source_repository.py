"""Data source repository port."""

from typing import Protocol

from compliance_kb.domain.entities import DataSource


class DataSourceRepository(Protocol):
    """Port for registry data source lookups."""

    async def list_syncable(self) -> list[DataSource]: ...
