"""Canonical reference - deduplication key for documents."""

import re
from dataclasses import dataclass
from uuid import UUID

from compliance_kb.domain.value_objects.doc_type import DocType

_WHITESPACE = re.compile(r"\s+")
_SEPARATOR = "|"
_SOURCE_PREFIX_LEN = 8


@dataclass(frozen=True)
class CanonicalRef:
    """Deterministic key built from doc type, external id and source batch."""

    value: str

    @classmethod
    def build(
        cls,
        doc_type: DocType,
        external_id: str | None = None,
        data_source_id: UUID | str | None = None,
    ) -> "CanonicalRef":
        parts = [str(doc_type)]
        normalized = normalize_external_id(external_id)
        if normalized:
            parts.append(normalized)
        if data_source_id:
            parts.append(str(data_source_id)[:_SOURCE_PREFIX_LEN])
        return cls(_SEPARATOR.join(parts))

    def __str__(self) -> str:
        return self.value


def normalize_external_id(external_id: str | None) -> str | None:
    """Collapse whitespace runs to underscores ("DFARS 252.204" -> "DFARS_252.204")."""
    if not external_id or not external_id.strip():
        return None
    return _WHITESPACE.sub("_", external_id.strip())
