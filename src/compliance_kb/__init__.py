"""Compliance knowledge base - chunking, embedding backfill and retrieval."""

__version__ = "0.1.0"
