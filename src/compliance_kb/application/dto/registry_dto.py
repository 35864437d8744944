"""Registry record DTOs consumed by ingestion use cases."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ClauseRecord:
    """Row of the clause master registry."""

    clause_number: str
    title: str
    regulation: str
    category: str | None = None
    risk_level: int | None = None
    flow_down: str | None = None
    description: str | None = None
    full_text: str | None = None


@dataclass
class ControlRecord:
    """Row of the cyber control master registry."""

    control_identifier: str
    domain: str
    level: str
    practice_statement: str
    objective: str | None = None


@dataclass
class TemplateRecord:
    """Contract or policy template supplied as JSON."""

    name: str
    text: str
    type: str | None = None
    meta: dict[str, Any] | None = None


@dataclass
class ManualSectionRecord:
    """Section of an internal compliance manual."""

    id: str
    title: str
    content: str
    part: str | None = None
