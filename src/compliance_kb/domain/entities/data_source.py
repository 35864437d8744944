"""Data source entity - originating batch of registry records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class DataSource:
    """Registry data source (e.g. a validated FAR or CMMC import)."""

    id: UUID
    name: str
    category: str
    is_active: bool
    validation_status: str
    created_at: datetime | None = None
