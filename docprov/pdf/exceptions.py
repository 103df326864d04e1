from docprov.exceptions import InvalidInputError


class PdfInspectionError(InvalidInputError):
    """Raised when PDF bytes cannot be parsed or rendered."""
