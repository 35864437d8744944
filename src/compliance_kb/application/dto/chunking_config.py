"""Chunking configuration DTO."""

from dataclasses import dataclass


@dataclass
class ChunkingConfig:
    """Target chunk window in characters, plus boundary lookahead."""

    min_chars: int = 800
    max_chars: int = 1200
    lookahead_chars: int = 100

    def __post_init__(self) -> None:
        if self.min_chars < 0 or self.max_chars <= 0 or self.lookahead_chars < 0:
            raise ValueError("Chunk window sizes must be positive")
        if self.min_chars > self.max_chars:
            raise ValueError("min_chars must not exceed max_chars")


@dataclass(frozen=True)
class ChunkSpan:
    """One chunk produced by a chunker, with offsets into the normalized text."""

    content: str
    start_char: int
    end_char: int
