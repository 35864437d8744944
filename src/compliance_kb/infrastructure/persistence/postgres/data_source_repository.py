"""PostgreSQL data source repository implementation."""

from psycopg import AsyncConnection

from compliance_kb.domain.entities import DataSource


class PostgresDataSourceRepository:
    """Data source repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_syncable(self) -> list[DataSource]:
        """Active data sources that passed validation."""
        cur = await self._conn.execute(
            "SELECT id, name, category, is_active, validation_status, created_at "
            "FROM compliance_data_sources "
            "WHERE is_active = true AND validation_status = 'VALID' ORDER BY created_at, id"
        )
        rows = await cur.fetchall()
        return [
            DataSource(
                id=r[0],
                name=r[1],
                category=r[2],
                is_active=r[3],
                validation_status=r[4],
                created_at=r[5],
            )
            for r in rows
        ]
