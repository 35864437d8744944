"""Unit tests for BoundaryChunker."""

import pytest

from compliance_kb.application.dto.chunking_config import ChunkingConfig
from compliance_kb.infrastructure.chunking.boundary_chunker import (
    BoundaryChunker,
    normalize_line_endings,
)

from tests.conftest import paragraph


def test_split_empty_text_returns_empty_list(chunking_config: ChunkingConfig) -> None:
    """Empty or whitespace-only text returns empty list."""
    chunker = BoundaryChunker()
    assert chunker.split("", chunking_config) == []
    assert chunker.split("   ", chunking_config) == []
    assert chunker.split("\n\t  \r\n", chunking_config) == []


def test_split_short_text_single_chunk(chunking_config: ChunkingConfig) -> None:
    """Text shorter than max_chars produces one chunk covering it."""
    spans = BoundaryChunker().split("short text", chunking_config)
    assert len(spans) == 1
    assert spans[0].content == "short text"
    assert spans[0].start_char == 0
    assert spans[0].end_char == 10


def test_split_prefers_paragraph_break(chunking_config: ChunkingConfig) -> None:
    """Paragraph break wins over a later sentence end inside the window."""
    text = "a" * 900 + "\n\n" + "b" * 198 + ". " + "c" * 1000
    spans = BoundaryChunker().split(text, chunking_config)
    assert len(spans) == 2
    assert spans[0].content == "a" * 900
    assert spans[0].end_char == 902
    assert spans[1].start_char == 902
    assert spans[1].content == "b" * 198 + ". " + "c" * 1000


def test_split_prefers_sentence_over_space(chunking_config: ChunkingConfig) -> None:
    """Without a paragraph break, the last sentence end past min_chars is used."""
    text = "a" * 850 + ". " + "b" * 100 + " " + "c" * 1000
    spans = BoundaryChunker().split(text, chunking_config)
    assert spans[0].content == "a" * 850 + "."
    assert spans[0].end_char == 852


def test_split_falls_back_to_space(chunking_config: ChunkingConfig) -> None:
    """Space is used when no paragraph or sentence boundary exists."""
    text = "a" * 1000 + " " + "b" * 1000
    spans = BoundaryChunker().split(text, chunking_config)
    assert spans[0].content == "a" * 1000
    assert spans[0].end_char == 1001
    assert spans[1].content == "b" * 1000


def test_split_ignores_boundary_before_min(chunking_config: ChunkingConfig) -> None:
    """Boundaries closer than min_chars to the cursor are ignored: hard cut at max_chars."""
    text = "a" * 500 + " " + "b" * 2000
    spans = BoundaryChunker().split(text, chunking_config)
    assert [len(s.content) for s in spans] == [1200, 1200, 101]
    assert spans[0].content == "a" * 500 + " " + "b" * 699


def test_split_hard_cuts_without_boundaries(chunking_config: ChunkingConfig) -> None:
    spans = BoundaryChunker().split("x" * 3000, chunking_config)
    assert [len(s.content) for s in spans] == [1200, 1200, 600]
    assert [(s.start_char, s.end_char) for s in spans] == [(0, 1200), (1200, 2400), (2400, 3000)]


def test_split_boundary_in_lookahead_may_exceed_max(chunking_config: ChunkingConfig) -> None:
    """A paragraph break inside the lookahead region extends the chunk past max_chars."""
    text = "a" * 1250 + "\n\n" + "b" * 500
    spans = BoundaryChunker().split(text, chunking_config)
    assert spans[0].content == "a" * 1250
    assert spans[0].end_char == 1252
    assert spans[1].content == "b" * 500


def test_split_offsets_match_normalized_text(chunking_config: ChunkingConfig) -> None:
    """Each span's trimmed slice of the normalized text equals its content."""
    text = "\r\n\r\n".join(paragraph(w) for w in ("protect", "report", "retain", "flow"))
    normalized = normalize_line_endings(text)
    spans = BoundaryChunker().split(text, chunking_config)
    assert len(spans) == 4
    previous_end = 0
    for span in spans:
        assert span.start_char == previous_end
        assert normalized[span.start_char : span.end_char].strip() == span.content
        previous_end = span.end_char
    assert previous_end == len(normalized)


def test_split_normalizes_line_endings(chunking_config: ChunkingConfig) -> None:
    spans = BoundaryChunker().split("line one\r\nline two\rline three", chunking_config)
    assert spans[0].content == "line one\nline two\nline three"


def test_split_is_deterministic(chunking_config: ChunkingConfig) -> None:
    text = paragraph("safeguard", 2000)
    chunker = BoundaryChunker()
    assert chunker.split(text, chunking_config) == chunker.split(text, chunking_config)


def test_split_sentence_text_two_chunks(chunking_config: ChunkingConfig) -> None:
    """2000 chars of sentences split at the last sentence end inside the window."""
    text = paragraph("safeguard", 2000)
    spans = BoundaryChunker().split(text, chunking_config)
    assert len(spans) == 2
    assert spans[0].content.endswith(".")
    assert 800 <= spans[0].end_char <= 1300


@pytest.mark.parametrize(
    ("min_chars", "max_chars", "lookahead_chars"),
    [(-1, 1200, 100), (800, 0, 100), (800, 1200, -5), (1300, 1200, 100)],
)
def test_chunking_config_rejects_invalid_window(
    min_chars: int, max_chars: int, lookahead_chars: int
) -> None:
    with pytest.raises(ValueError):
        ChunkingConfig(min_chars=min_chars, max_chars=max_chars, lookahead_chars=lookahead_chars)
