from docprov.exceptions import ProvenanceError


class DuplicateRecordError(ProvenanceError):
    """Raised when a content hash is registered twice under the reject policy."""
