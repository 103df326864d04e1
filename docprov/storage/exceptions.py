from docprov.exceptions import BackendUnavailableError, NotFoundError, ProvenanceError


class StorageError(ProvenanceError):
    """Base exception for storage backend failures."""


class ContentNotFoundError(NotFoundError, StorageError):
    """Raised when no backend holds the requested content address."""


class StorageUnavailableError(BackendUnavailableError, StorageError):
    """Raised when a backend cannot be reached, times out or rejects a call."""


class ChecksumMismatchError(StorageError):
    """Raised when mirrored bytes do not match their recorded checksum."""
