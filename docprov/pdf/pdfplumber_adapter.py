import io

import pdfplumber

from docprov.pdf.base import BasePdfInspector
from docprov.pdf.exceptions import PdfInspectionError
from docprov.pdf.models import PdfInspection


class PdfPlumberAdapter(BasePdfInspector):
    """Inspects PDFs using pdfplumber."""

    def inspect(self, pdf_bytes: bytes) -> PdfInspection:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                has_images = any(page.images for page in pdf.pages)
                info = pdf.metadata or {}
            return PdfInspection(
                page_count=len(pages),
                text="\n".join(pages).strip(),
                has_images=has_images,
                creation_date=_info_value(info, "CreationDate"),
                producer=_info_value(info, "Producer"),
                creator=_info_value(info, "Creator"),
            )
        except PdfInspectionError:
            raise
        except Exception as exc:
            raise PdfInspectionError(f"pdfplumber inspection failed: {exc}") from exc

    def render_first_page(self, pdf_bytes: bytes, resolution: int = 72) -> bytes:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not pdf.pages:
                    raise PdfInspectionError("PDF has no pages to render")
                image = pdf.pages[0].to_image(resolution=resolution).original
                buf = io.BytesIO()
                image.save(buf, format="PNG")
            return buf.getvalue()
        except PdfInspectionError:
            raise
        except Exception as exc:
            raise PdfInspectionError(f"pdfplumber rendering failed: {exc}") from exc


def _info_value(info: dict[str, object], key: str) -> str | None:
    value = info.get(key)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if value is None or not str(value).strip():
        return None
    return str(value)
