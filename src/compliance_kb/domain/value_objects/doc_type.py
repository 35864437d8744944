"""Compliance document types."""

from enum import StrEnum


class DocType(StrEnum):
    """Supported compliance document types."""

    CLAUSE = "CLAUSE"
    CONTROL = "CONTROL"
    TEMPLATE = "TEMPLATE"
    MANUAL_SECTION = "MANUAL_SECTION"
    POLICY = "POLICY"
    SOP = "SOP"
    FRM = "FRM"
