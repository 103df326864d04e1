from docprov.exceptions import ProvenanceError


class AnalysisError(ProvenanceError):
    """Raised when an analyzer cannot complete its checks."""


class TextRecognitionError(AnalysisError):
    """Raised when the OCR engine fails or times out."""
