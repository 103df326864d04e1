import io

import numpy as np
from PIL import Image

from docprov.exceptions import InvalidInputError


def preprocess(data: bytes, size: int) -> np.ndarray:
    """Decode image bytes into a (1, size, size, 3) float32 batch in [0, 1]."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            rgb = image.convert("RGB").resize((size, size))
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise InvalidInputError(f"Cannot decode image for classification: {exc}") from exc
    with rgb:
        pixels = np.asarray(rgb, dtype=np.float32)
    return (pixels / 255.0)[np.newaxis, ...]
