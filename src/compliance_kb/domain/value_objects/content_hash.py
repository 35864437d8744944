"""SHA-256 digests for document text and chunk content."""

import hashlib


def compute_text_hash(text: str | None) -> str | None:
    """Hash of the stripped document text; None when there is no text."""
    if not text or not text.strip():
        return None
    return hashlib.sha256(text.strip().encode("utf-8")).hexdigest()


def compute_content_hash(content: str) -> str:
    """Hash of a chunk's content, as stored."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
