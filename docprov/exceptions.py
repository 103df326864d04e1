class ProvenanceError(Exception):
    """Base exception for all docprov errors."""


class NotFoundError(ProvenanceError):
    """Raised when a content hash or content address is unknown."""


class BackendUnavailableError(ProvenanceError):
    """Raised when a storage backend cannot be reached or times out."""


class InvalidInputError(ProvenanceError):
    """Raised for malformed or missing input before any state changes."""


class ModelLoadError(ProvenanceError):
    """Raised when a classifier model cannot be loaded."""
