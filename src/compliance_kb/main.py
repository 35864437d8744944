"""Application entry point and composition root."""

import argparse
import asyncio
import json
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from uuid import UUID

from compliance_kb import __version__
from compliance_kb.application.dto.chunking_config import ChunkingConfig
from compliance_kb.application.dto.registry_dto import ManualSectionRecord, TemplateRecord
from compliance_kb.application.dto.retrieval_dto import RetrieveFilters
from compliance_kb.application.ports import Chunker, EmbeddingProvider
from compliance_kb.application.use_cases.chunking.chunk_all_documents import (
    ChunkAllDocumentsUseCase,
)
from compliance_kb.application.use_cases.chunking.chunk_document import ChunkDocumentUseCase
from compliance_kb.application.use_cases.document.upsert_document import UpsertDocumentUseCase
from compliance_kb.application.use_cases.embedding.run_embedding_job import (
    RunEmbeddingJobUseCase,
)
from compliance_kb.application.use_cases.ingestion.ingest_manual_sections import (
    IngestManualSectionsUseCase,
)
from compliance_kb.application.use_cases.ingestion.ingest_templates import (
    IngestTemplatesUseCase,
)
from compliance_kb.application.use_cases.ingestion.sync_registry import SyncRegistryUseCase
from compliance_kb.application.use_cases.search.retrieve import RetrieveUseCase
from compliance_kb.application.use_cases.stats.get_stats import GetStatsUseCase
from compliance_kb.config import Settings, get_settings
from compliance_kb.domain.exceptions import ComplianceKBError, ValidationError
from compliance_kb.domain.value_objects import DocType
from compliance_kb.infrastructure.chunking.boundary_chunker import BoundaryChunker
from compliance_kb.infrastructure.embedding.openai_provider import OpenAIEmbeddingProvider
from compliance_kb.infrastructure.persistence.postgres.connection import (
    create_pool,
    pool_lifespan,
)
from compliance_kb.infrastructure.persistence.postgres.embedding_storage import (
    probe_embedding_storage,
)
from compliance_kb.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from compliance_kb.logging_config import configure_logging


@dataclass
class ComplianceKB:
    """Wired use cases exposed to collaborators."""

    upsert_document: UpsertDocumentUseCase
    chunk_document: ChunkDocumentUseCase
    chunk_all_documents: ChunkAllDocumentsUseCase
    run_embedding_job: RunEmbeddingJobUseCase
    retrieve: RetrieveUseCase
    get_stats: GetStatsUseCase
    sync_registry: SyncRegistryUseCase
    ingest_templates: IngestTemplatesUseCase
    ingest_manual_sections: IngestManualSectionsUseCase


def build_compliance_kb(
    uow_factory: object,
    embedding_provider: EmbeddingProvider,
    chunker: Chunker | None = None,
    chunking_config: ChunkingConfig | None = None,
    embedding_batch_limit: int = 50,
    default_top_k: int = 8,
    max_top_k: int = 50,
) -> ComplianceKB:
    """Wire use cases around a unit-of-work factory and an embedding provider."""
    chunk_document = ChunkDocumentUseCase(
        unit_of_work_factory=uow_factory,
        chunker=chunker or BoundaryChunker(),
        chunking_config=chunking_config or ChunkingConfig(),
    )
    upsert_document = UpsertDocumentUseCase(
        unit_of_work_factory=uow_factory,
        chunk_document=chunk_document,
    )
    return ComplianceKB(
        upsert_document=upsert_document,
        chunk_document=chunk_document,
        chunk_all_documents=ChunkAllDocumentsUseCase(
            unit_of_work_factory=uow_factory,
            chunk_document=chunk_document,
        ),
        run_embedding_job=RunEmbeddingJobUseCase(
            unit_of_work_factory=uow_factory,
            embedding_provider=embedding_provider,
            default_limit=embedding_batch_limit,
        ),
        retrieve=RetrieveUseCase(
            unit_of_work_factory=uow_factory,
            embedding_provider=embedding_provider,
            default_top_k=default_top_k,
            max_top_k=max_top_k,
        ),
        get_stats=GetStatsUseCase(unit_of_work_factory=uow_factory),
        sync_registry=SyncRegistryUseCase(
            unit_of_work_factory=uow_factory,
            upsert_document=upsert_document,
        ),
        ingest_templates=IngestTemplatesUseCase(upsert_document),
        ingest_manual_sections=IngestManualSectionsUseCase(upsert_document),
    )


def create_embedding_provider(settings: Settings) -> OpenAIEmbeddingProvider:
    return OpenAIEmbeddingProvider(
        base_url=settings.embedding_api_url,
        api_key=settings.embedding_api_key,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
        max_input_chars=settings.embedding_max_input_chars,
    )


@asynccontextmanager
async def open_compliance_kb(settings: Settings) -> AsyncIterator[ComplianceKB]:
    """Composition root - open the pool, probe embedding storage, wire use cases."""
    pool = create_pool(settings.database_url)
    async with pool_lifespan(pool):
        async with pool.connection() as conn:
            storage = await probe_embedding_storage(conn)
        yield build_compliance_kb(
            uow_factory=create_uow_factory(pool, storage),
            embedding_provider=create_embedding_provider(settings),
            chunking_config=ChunkingConfig(
                min_chars=settings.chunk_min_chars,
                max_chars=settings.chunk_max_chars,
                lookahead_chars=settings.chunk_lookahead_chars,
            ),
            embedding_batch_limit=settings.embedding_batch_limit,
            default_top_k=settings.retrieve_default_top_k,
            max_top_k=settings.retrieve_max_top_k,
        )


def _load_records(path: str, record_type: type) -> list:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValidationError(f"{path}: expected a JSON array")
    try:
        return [record_type(**item) for item in data]
    except TypeError as e:
        raise ValidationError(f"{path}: {e}") from e


def _json_default(value: object) -> object:
    if isinstance(value, UUID):
        return str(value)
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compliance-kb",
        description="Compliance knowledge base: ingestion, embedding backfill and retrieval",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("version", help="Print version")
    sub.add_parser("sync-registry", help="Ingest clauses/controls from validated data sources")

    p = sub.add_parser("ingest-templates", help="Ingest templates from a JSON array file")
    p.add_argument("file", help="JSON file: [{name, text, type?, meta?}, ...]")
    p.add_argument("--data-source-id", type=UUID, default=None)

    p = sub.add_parser("ingest-manual", help="Ingest manual sections from a JSON array file")
    p.add_argument("file", help="JSON file: [{id, title, content, part?}, ...]")

    sub.add_parser("chunk-all", help="Re-reconcile chunks of all active documents")

    p = sub.add_parser("embed", help="Run one embedding backfill batch")
    p.add_argument("--limit", type=int, default=None, help="Chunks per batch")

    p = sub.add_parser("retrieve", help="Semantic search over embedded chunks")
    p.add_argument("query")
    p.add_argument("--doc-type", action="append", default=[], dest="doc_types")
    p.add_argument("--category", action="append", default=[], dest="categories")
    p.add_argument("--prefix", default=None, help="External id / canonical ref prefix")
    p.add_argument("--top-k", type=int, default=None)

    sub.add_parser("stats", help="Corpus and embedding coverage metrics")
    return parser


async def _run(kb: ComplianceKB, args: argparse.Namespace) -> object:
    if args.command == "sync-registry":
        return asdict(await kb.sync_registry.execute())
    if args.command == "ingest-templates":
        templates = _load_records(args.file, TemplateRecord)
        count = await kb.ingest_templates.execute(templates, args.data_source_id)
        return {"ingested": count}
    if args.command == "ingest-manual":
        sections = _load_records(args.file, ManualSectionRecord)
        return {"ingested": await kb.ingest_manual_sections.execute(sections)}
    if args.command == "chunk-all":
        return asdict(await kb.chunk_all_documents.execute())
    if args.command == "embed":
        return asdict(await kb.run_embedding_job.execute(args.limit))
    if args.command == "retrieve":
        try:
            doc_types = [DocType(t) for t in args.doc_types]
        except ValueError as e:
            raise ValidationError(str(e)) from e
        filters = RetrieveFilters(
            doc_types=doc_types,
            categories=args.categories,
            external_id_prefix=args.prefix,
        )
        results = await kb.retrieve.execute(args.query, filters, args.top_k)
        return {"results": [asdict(r) for r in results]}
    if args.command == "stats":
        return asdict(await kb.get_stats.execute())
    raise ValidationError(f"Unknown command: {args.command}")


async def run_command(args: argparse.Namespace, settings: Settings) -> object:
    async with open_compliance_kb(settings) as kb:
        return await _run(kb, args)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    if args.command == "version":
        print(f"compliance-kb v{__version__}")
        return 0

    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    try:
        result = asyncio.run(run_command(args, settings))
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ComplianceKBError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, default=_json_default))
    return 0


if __name__ == "__main__":
    sys.exit(main())
