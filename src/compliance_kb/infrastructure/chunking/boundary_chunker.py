"""Boundary-aware greedy chunker."""

from compliance_kb.application.dto.chunking_config import ChunkingConfig, ChunkSpan

# Boundary markers in priority order, with the offset past the match at
# which the chunk ends.
_BOUNDARIES: tuple[tuple[str, int], ...] = (
    ("\n\n", 2),
    (". ", 2),
    (" ", 1),
)


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


class BoundaryChunker:
    """Chunker that cuts at max_chars, snapping back to a paragraph, sentence or word break."""

    def split(self, text: str, config: ChunkingConfig) -> list[ChunkSpan]:
        """Split text into non-overlapping, trimmed chunk spans.

        From the cursor the chunk tentatively ends at ``cursor + max_chars``.
        Unless that is the end of the text, the last paragraph break,
        sentence end or space inside ``max_chars + lookahead_chars`` is used
        instead, provided it lies at least ``min_chars`` into the window.
        Offsets refer to the line-ending-normalized text.
        """
        if not text or not text.strip():
            return []

        normalized = normalize_line_endings(text)
        length = len(normalized)
        spans: list[ChunkSpan] = []
        start = 0
        while start < length:
            end = min(start + config.max_chars, length)
            if end < length:
                end = start + self._split_offset(normalized, start, config)
            content = normalized[start:end].strip()
            if content:
                spans.append(ChunkSpan(content=content, start_char=start, end_char=end))
            start = end
        return spans

    @staticmethod
    def _split_offset(text: str, start: int, config: ChunkingConfig) -> int:
        """Offset (relative to start) at which the current chunk ends."""
        search_end = min(start + config.max_chars + config.lookahead_chars, len(text))
        window = text[start:search_end]
        for marker, advance in _BOUNDARIES:
            pos = window.rfind(marker)
            if pos >= config.min_chars:
                return pos + advance
        return config.max_chars
