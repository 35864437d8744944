"""Domain exceptions."""


class ComplianceKBError(Exception):
    """Base exception for the compliance knowledge base."""

    pass


class NotFound(ComplianceKBError):
    """Requested resource was not found."""

    pass


class ValidationError(ComplianceKBError):
    """Validation failed for input data."""

    pass


class EmbeddingStorageUnavailable(ComplianceKBError):
    """Chunk embedding column could not be located during the capability probe."""

    pass
