from docprov.config.settings import Settings
from docprov.ocr.base import BaseTextRecognizer
from docprov.ocr.disabled_adapter import DisabledRecognizer
from docprov.ocr.tesseract_adapter import TesseractAdapter


class TextRecognizerFactory:
    """Creates the configured OCR adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseTextRecognizer:
        engine = settings.ocr_engine.lower()
        if engine == "tesseract":
            return TesseractAdapter(
                languages=settings.ocr_languages,
                timeout_seconds=settings.ocr_timeout_seconds,
            )
        if engine == "none":
            return DisabledRecognizer()
        raise ValueError(
            f"Unknown OCR engine '{engine}'. Choose from: ['tesseract', 'none']"
        )
