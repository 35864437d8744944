"""Chunker port - text splitting strategies."""

from typing import Protocol

from compliance_kb.application.dto.chunking_config import ChunkingConfig, ChunkSpan


class Chunker(Protocol):
    """Port for splitting text into ordered chunk spans."""

    def split(self, text: str, config: ChunkingConfig) -> list[ChunkSpan]: ...
