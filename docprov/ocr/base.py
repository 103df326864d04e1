from abc import ABC, abstractmethod

from PIL import Image


class BaseTextRecognizer(ABC):
    """Contract for OCR adapters used by the font-consistency check."""

    @abstractmethod
    def recognize(self, image: Image.Image) -> str:
        """Return the text recognized in image.

        Raises:
            TextRecognitionError: if recognition fails or times out.
        """
