from dataclasses import dataclass


@dataclass(frozen=True)
class PdfInspection:
    """Structural facts read from a PDF."""

    page_count: int
    text: str
    has_images: bool
    creation_date: str | None = None
    producer: str | None = None
    creator: str | None = None
