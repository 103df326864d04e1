import pymupdf

from docprov.pdf.base import BasePdfInspector
from docprov.pdf.exceptions import PdfInspectionError
from docprov.pdf.models import PdfInspection


class PyMuPdfAdapter(BasePdfInspector):
    """Inspects PDFs using PyMuPDF."""

    def inspect(self, pdf_bytes: bytes) -> PdfInspection:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
                has_images = any(page.get_images() for page in doc)
                info = doc.metadata or {}
            return PdfInspection(
                page_count=len(pages),
                text="\n".join(pages).strip(),
                has_images=has_images,
                creation_date=info.get("creationDate") or None,
                producer=info.get("producer") or None,
                creator=info.get("creator") or None,
            )
        except PdfInspectionError:
            raise
        except Exception as exc:
            raise PdfInspectionError(f"pymupdf inspection failed: {exc}") from exc

    def render_first_page(self, pdf_bytes: bytes, resolution: int = 72) -> bytes:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise PdfInspectionError("PDF has no pages to render")
                return doc[0].get_pixmap(dpi=resolution).tobytes("png")
        except PdfInspectionError:
            raise
        except Exception as exc:
            raise PdfInspectionError(f"pymupdf rendering failed: {exc}") from exc
