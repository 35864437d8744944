"""PostgreSQL reader for the external clause and control registry tables."""

from uuid import UUID

from psycopg import AsyncConnection

from compliance_kb.application.dto.registry_dto import ClauseRecord, ControlRecord


class PostgresRegistryReader:
    """Reads clause_master and cyber_control_master rows of one data source."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_clauses(self, data_source_id: UUID) -> list[ClauseRecord]:
        cur = await self._conn.execute(
            "SELECT clause_number, title, regulation, category, risk_level, flow_down, "
            "description, full_text FROM clause_master WHERE data_source_id = %s "
            "ORDER BY clause_number",
            (data_source_id,),
        )
        rows = await cur.fetchall()
        return [
            ClauseRecord(
                clause_number=r[0],
                title=r[1],
                regulation=r[2],
                category=r[3],
                risk_level=r[4],
                flow_down=r[5],
                description=r[6],
                full_text=r[7],
            )
            for r in rows
        ]

    async def list_controls(self, data_source_id: UUID) -> list[ControlRecord]:
        cur = await self._conn.execute(
            "SELECT control_identifier, domain, level, practice_statement, objective "
            "FROM cyber_control_master WHERE data_source_id = %s ORDER BY control_identifier",
            (data_source_id,),
        )
        rows = await cur.fetchall()
        return [
            ControlRecord(
                control_identifier=r[0],
                domain=r[1],
                level=r[2],
                practice_statement=r[3],
                objective=r[4],
            )
            for r in rows
        ]
