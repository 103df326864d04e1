from PIL import Image

from docprov.ocr.base import BaseTextRecognizer


class DisabledRecognizer(BaseTextRecognizer):
    """Recognizes nothing. Used where no OCR engine is installed."""

    def recognize(self, image: Image.Image) -> str:
        return ""
