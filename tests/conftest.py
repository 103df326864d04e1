import io

import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

CERTIFICATE_TEXT = "Certificate of registration 4411 issued by the Ministry of Interior"


def _pdf(*pages: list[str], creator: str | None = None) -> bytes:
    """Render one letter-size page per list of lines."""
    buf = io.BytesIO()
    doc = canvas.Canvas(buf, pagesize=letter)
    if creator is not None:
        doc.setCreator(creator)
    for lines in pages:
        for i, line in enumerate(lines):
            doc.drawString(72, 720 - 20 * i, line)
        doc.showPage()
    doc.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return _pdf([CERTIFICATE_TEXT, "Holder: Example Person, valid until 2030"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return _pdf(["Page one content"], ["Page two content"])


@pytest.fixture()
def edited_pdf_bytes() -> bytes:
    return _pdf([CERTIFICATE_TEXT], creator="Adobe Photoshop CC 2023")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    return _pdf([])


def _document_image() -> Image.Image:
    image = Image.new("RGB", (120, 80), "white")
    draw = ImageDraw.Draw(image)
    draw.rectangle((10, 10, 110, 30), outline="black")
    draw.line((10, 50, 110, 50), fill="black", width=2)
    return image


@pytest.fixture()
def png_bytes() -> bytes:
    buf = io.BytesIO()
    _document_image().save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def rgba_png_bytes() -> bytes:
    buf = io.BytesIO()
    _document_image().convert("RGBA").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    _document_image().save(buf, format="JPEG", quality=95)
    return buf.getvalue()


@pytest.fixture()
def low_quality_jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    _document_image().save(buf, format="JPEG", quality=40)
    return buf.getvalue()


@pytest.fixture()
def photoshop_jpeg_bytes() -> bytes:
    exif = Image.Exif()
    exif[0x0131] = "Adobe Photoshop CC 2023"
    buf = io.BytesIO()
    _document_image().save(buf, format="JPEG", quality=95, exif=exif)
    return buf.getvalue()
