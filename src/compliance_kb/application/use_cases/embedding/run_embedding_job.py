"""Embedding backfill job use case."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from compliance_kb.application.ports import EmbeddingProvider
from compliance_kb.domain.entities import is_stale

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingJobResult:
    """Counts for one backfill batch."""

    processed: int
    skipped: int
    errors: int


class RunEmbeddingJobUseCase:
    """Embed up to ``limit`` stale chunks, never-embedded chunks first.

    Each chunk is embedded and saved on its own; a provider failure or a
    malformed vector is counted as an error and the batch continues.
    A vector is only saved while the chunk still has the content it was
    computed from; otherwise the chunk counts as skipped. Storage errors
    propagate.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        embedding_provider: EmbeddingProvider,
        default_limit: int = 50,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._embedding_provider = embedding_provider
        self._default_limit = default_limit

    def is_configured(self) -> bool:
        return self._embedding_provider.is_configured()

    async def execute(self, limit: int | None = None) -> EmbeddingJobResult:
        """Run one backfill batch."""
        if not self.is_configured():
            logger.warning("Embedding provider not configured, skipping backfill")
            return EmbeddingJobResult(processed=0, skipped=0, errors=1)

        if limit is None:
            limit = self._default_limit
        if limit < 1:
            return EmbeddingJobResult(processed=0, skipped=0, errors=0)

        async with self._uow_factory() as uow:
            candidates = await uow.chunks.list_embedding_candidates(limit)

        provider = self._embedding_provider
        processed = 0
        errors = 0
        for chunk, document in candidates:
            if not is_stale(chunk, document):
                continue
            try:
                vector = await provider.embed_text(chunk.content[: provider.max_input_chars])
            except Exception:
                logger.warning("Embedding request failed for chunk %s", chunk.id, exc_info=True)
                errors += 1
                continue
            if not vector or len(vector) != provider.dimensions:
                logger.warning(
                    "Provider returned unusable vector for chunk %s (len=%s, expected %d)",
                    chunk.id,
                    len(vector) if vector else None,
                    provider.dimensions,
                )
                errors += 1
                continue

            async with self._uow_factory() as uow:
                saved = await uow.chunks.save_embedding(
                    chunk.id, chunk.content_hash, vector, provider.model, datetime.now(UTC)
                )
            if not saved:
                logger.debug("Chunk %s changed while embedding, left for the next batch", chunk.id)
                continue
            processed += 1

        result = EmbeddingJobResult(
            processed=processed,
            skipped=len(candidates) - processed - errors,
            errors=errors,
        )
        logger.info(
            "Embedding batch done: processed=%d skipped=%d errors=%d",
            result.processed,
            result.skipped,
            result.errors,
        )
        return result
