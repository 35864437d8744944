"""Initial schema - data sources, compliance documents and chunks.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

EMBEDDING_DIM = 1536


def _vector_extension_available() -> bool:
    bind = op.get_bind()
    row = bind.execute(
        sa.text("SELECT 1 FROM pg_available_extensions WHERE name = 'vector'")
    ).first()
    return row is not None


def upgrade() -> None:
    use_vector = _vector_extension_available()
    if use_vector:
        op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "compliance_data_sources",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("validation_status", sa.String(50), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "compliance_documents",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "data_source_id",
            sa.UUID(),
            sa.ForeignKey("compliance_data_sources.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("doc_type", sa.String(50), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("canonical_ref", sa.String(512), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("full_text", sa.Text(), nullable=True),
        sa.Column("text_hash", sa.String(64), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("meta", JSONB(), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "doc_type IN ('CLAUSE','CONTROL','TEMPLATE','MANUAL_SECTION','POLICY','SOP','FRM')",
            name="ck_compliance_documents_doc_type",
        ),
    )
    op.create_index(
        "ix_compliance_documents_canonical_ref", "compliance_documents", ["canonical_ref"], unique=True
    )
    op.create_index("ix_compliance_documents_doc_type", "compliance_documents", ["doc_type"])

    op.create_table(
        "compliance_chunks",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "document_id",
            sa.UUID(),
            sa.ForeignKey("compliance_documents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("chunk_index", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_hash", sa.String(64), nullable=False),
        sa.Column("start_char", sa.Integer(), nullable=False),
        sa.Column("end_char", sa.Integer(), nullable=False),
        sa.Column("embedding", Vector(EMBEDDING_DIM) if use_vector else JSONB(), nullable=True),
        sa.Column("embedding_model", sa.String(255), nullable=True),
        sa.Column("embedded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_compliance_chunks_document_index",
        "compliance_chunks",
        ["document_id", "chunk_index"],
        unique=True,
    )
    op.create_index("ix_compliance_chunks_embedded_at", "compliance_chunks", ["embedded_at"])
    if use_vector:
        op.execute(
            "CREATE INDEX ix_compliance_chunks_embedding ON compliance_chunks "
            "USING hnsw (embedding vector_cosine_ops)"
        )


def downgrade() -> None:
    op.drop_table("compliance_chunks")
    op.drop_table("compliance_documents")
    op.drop_table("compliance_data_sources")
    op.execute("DROP EXTENSION IF EXISTS vector")
