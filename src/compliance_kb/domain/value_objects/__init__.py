"""Domain value objects."""

from compliance_kb.domain.value_objects.canonical_ref import (
    CanonicalRef,
    normalize_external_id,
)
from compliance_kb.domain.value_objects.content_hash import (
    compute_content_hash,
    compute_text_hash,
)
from compliance_kb.domain.value_objects.doc_type import DocType
from compliance_kb.domain.value_objects.embedding_vector import (
    cosine_similarity,
    format_vector,
    parse_vector,
)

__all__ = [
    "CanonicalRef",
    "DocType",
    "compute_content_hash",
    "compute_text_hash",
    "cosine_similarity",
    "format_vector",
    "normalize_external_id",
    "parse_vector",
]
