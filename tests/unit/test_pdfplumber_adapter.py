import io

import pytest
from PIL import Image

from docprov.pdf.exceptions import PdfInspectionError
from docprov.pdf.pdfplumber_adapter import PdfPlumberAdapter


class TestPdfPlumberAdapterInspect:
    def test_inspect_reads_text(self, sample_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().inspect(sample_pdf_bytes)
        assert "Certificate of registration 4411" in result.text
        assert result.page_count == 1

    def test_inspect_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().inspect(multi_page_pdf_bytes)
        assert result.page_count == 2
        assert "Page one content" in result.text
        assert "Page two content" in result.text

    def test_inspect_reads_document_info(self, sample_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().inspect(sample_pdf_bytes)
        assert result.creation_date
        assert result.producer is not None
        assert "reportlab" in result.producer.lower()

    def test_inspect_reads_creator(self, edited_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().inspect(edited_pdf_bytes)
        assert result.creator == "Adobe Photoshop CC 2023"

    def test_inspect_empty_pdf(self, empty_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().inspect(empty_pdf_bytes)
        assert result.text == ""
        assert result.has_images is False

    def test_inspect_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfInspectionError):
            PdfPlumberAdapter().inspect(b"not a pdf")


class TestPdfPlumberAdapterRender:
    def test_render_first_page_returns_png(self, multi_page_pdf_bytes: bytes) -> None:
        png = PdfPlumberAdapter().render_first_page(multi_page_pdf_bytes)
        with Image.open(io.BytesIO(png)) as image:
            assert image.format == "PNG"
            assert image.width > 0

    def test_render_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfInspectionError):
            PdfPlumberAdapter().render_first_page(b"not a pdf")
