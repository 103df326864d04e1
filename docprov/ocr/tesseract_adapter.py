import pytesseract
from PIL import Image

from docprov.analysis.exceptions import TextRecognitionError
from docprov.ocr.base import BaseTextRecognizer


class TesseractAdapter(BaseTextRecognizer):
    """Recognizes text with the Tesseract engine via pytesseract."""

    def __init__(self, *, languages: str, timeout_seconds: int) -> None:
        self._languages = languages
        self._timeout_seconds = timeout_seconds

    def recognize(self, image: Image.Image) -> str:
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self._languages,
                timeout=self._timeout_seconds,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise TextRecognitionError(f"Tesseract failed: {exc}") from exc
        except RuntimeError as exc:
            # pytesseract reports its own timeout as a plain RuntimeError
            raise TextRecognitionError(f"Tesseract timed out: {exc}") from exc
        return text.strip()
