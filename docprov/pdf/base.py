from abc import ABC, abstractmethod

from docprov.pdf.models import PdfInspection


class BasePdfInspector(ABC):
    """Contract for all PDF inspection adapters."""

    @abstractmethod
    def inspect(self, pdf_bytes: bytes) -> PdfInspection:
        """Read page count, text and document info from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfInspection with the extracted text and authoring fields.

        Raises:
            PdfInspectionError: if the bytes cannot be parsed.
        """

    @abstractmethod
    def render_first_page(self, pdf_bytes: bytes, resolution: int = 72) -> bytes:
        """Rasterize the first page to PNG bytes.

        Raises:
            PdfInspectionError: if the document has no pages or cannot be drawn.
        """
