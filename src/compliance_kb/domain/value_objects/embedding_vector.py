"""Embedding vector helpers shared by storage strategies."""

import json
import math
from collections.abc import Sequence


def format_vector(vector: Sequence[float]) -> str:
    """Text literal accepted by both pgvector and jsonb: '[0.1,0.2,...]'."""
    return "[" + ",".join(repr(float(v)) for v in vector) + "]"


def parse_vector(raw: object) -> list[float] | None:
    """Parse a stored embedding (pgvector text, jsonb list or JSON string)."""
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = json.loads(raw)
    return [float(v) for v in raw]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float | None:
    """Cosine similarity; None for mismatched dimensions or zero vectors."""
    if len(a) != len(b) or not a:
        return None
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return None
    return math.fsum(x * y for x, y in zip(a, b, strict=True)) / (norm_a * norm_b)
