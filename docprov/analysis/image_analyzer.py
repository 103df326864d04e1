import io
import time
from collections.abc import Sequence

import numpy as np
from PIL import Image, ImageFilter

from docprov.analysis.base import BaseAnalyzer
from docprov.analysis.models import AnalysisResult, AnomalyFinding, Severity
from docprov.analysis.scoring import ScoringPolicy
from docprov.exceptions import InvalidInputError
from docprov.logging.logger import Log
from docprov.ocr.base import BaseTextRecognizer
from docprov.signals.base import BaseSignalProvider

LAPLACIAN_KERNEL = (-1, -1, -1, -1, 8, -1, -1, -1, -1)

EXIF_SOFTWARE = 0x0131
EXIF_DATETIME = 0x0132
EXIF_MODEL = 0x0110
EXIF_ORIENTATION = 0x0112

# ITU T.81 Annex K luminance table, the reference libjpeg scales by quality
STANDARD_LUMINANCE_TABLE = (
    16, 11, 10, 16, 24, 40, 51, 61,
    12, 12, 14, 19, 26, 58, 60, 55,
    14, 13, 16, 24, 40, 57, 69, 56,
    14, 17, 22, 29, 51, 87, 80, 62,
    18, 22, 37, 56, 68, 109, 103, 77,
    24, 35, 55, 64, 81, 104, 113, 92,
    49, 64, 78, 87, 103, 121, 120, 101,
    72, 92, 95, 98, 112, 100, 103, 99,
)

_MODE_DEPTH = {"1": 1, "I;16": 16, "I": 32, "F": 32}


def estimate_jpeg_quality(image: Image.Image) -> int | None:
    """Estimate the libjpeg quality setting from the luminance quantization table."""
    tables = getattr(image, "quantization", None)
    if not tables or 0 not in tables:
        return None
    scale = sum(tables[0]) * 100.0 / sum(STANDARD_LUMINANCE_TABLE)
    quality = (200.0 - scale) / 2.0 if scale <= 100.0 else 5000.0 / scale
    return int(round(min(100.0, max(1.0, quality))))


def edge_map(image: Image.Image) -> np.ndarray:
    greyscale = image.convert("L")
    edges = greyscale.filter(ImageFilter.Kernel((3, 3), LAPLACIAN_KERNEL, scale=1))
    return np.asarray(edges, dtype=np.uint8)


class ImageAnalyzer(BaseAnalyzer):
    """Forensic checks for raster images.

    Edge discontinuities, font consistency of recognized text, recompression
    artifacts and the EXIF authoring-tool tag each may add one finding.
    """

    def __init__(
        self,
        recognizer: BaseTextRecognizer,
        signals: BaseSignalProvider,
        scoring: ScoringPolicy,
        *,
        suspicious_tools: Sequence[str],
        edge_threshold: float,
        max_font_count: int,
        quality_threshold: int,
    ) -> None:
        self._recognizer = recognizer
        self._signals = signals
        self._scoring = scoring
        self._suspicious_tools = [t.lower() for t in suspicious_tools]
        self._edge_threshold = edge_threshold
        self._max_font_count = max_font_count
        self._quality_threshold = quality_threshold

    def analyze(self, data: bytes) -> AnalysisResult:
        started = time.perf_counter()
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise InvalidInputError(f"Unsupported or unreadable image: {exc}") from exc
        with image:
            return self._analyze_image(image, started)

    def _analyze_image(self, image: Image.Image, started: float) -> AnalysisResult:
        findings: list[AnomalyFinding] = []
        exif = self._exif(image)

        edges = edge_map(image)
        suspicion = self._signals.edge_suspicion(edges)
        if suspicion > self._edge_threshold:
            findings.append(
                AnomalyFinding(
                    type="edge_manipulation",
                    severity=Severity.HIGH,
                    description="Suspicious edge patterns detected",
                    confidence=suspicion,
                )
            )

        text = self._recognizer.recognize(image.convert("RGB"))
        fonts = self._signals.font_count(text)
        if fonts > self._max_font_count:
            findings.append(
                AnomalyFinding(
                    type="font_inconsistency",
                    severity=Severity.MEDIUM,
                    description="Multiple font types detected",
                    evidence={"fonts_detected": fonts},
                )
            )

        quality = self._estimated_quality(image)
        if quality is not None and quality < self._quality_threshold:
            likelihood = self._signals.recompression_likelihood(quality)
            if likelihood > 0.5:
                findings.append(
                    AnomalyFinding(
                        type="compression_artifacts",
                        severity=Severity.MEDIUM,
                        description="Evidence of multiple compression cycles",
                        confidence=likelihood,
                        evidence={"estimated_quality": quality},
                    )
                )

        software = exif.get("software")
        if isinstance(software, str) and any(
            tool in software.lower() for tool in self._suspicious_tools
        ):
            findings.append(
                AnomalyFinding(
                    type="editing_software",
                    severity=Severity.HIGH,
                    description=f"Document edited with {software}",
                    evidence={"software": software},
                )
            )

        score = self._scoring.score(findings)
        Log.debug(f"Image analysis: {len(findings)} findings, score {score}")
        return AnalysisResult(
            composite_score=score,
            format=(image.format or "").lower(),
            findings=findings,
            metadata={
                "format": image.format,
                "width": image.width,
                "height": image.height,
                "mode": image.mode,
                "channels": len(image.getbands()),
                "depth": _MODE_DEPTH.get(image.mode, 8),
                "density": image.info.get("dpi"),
                "has_alpha": "A" in image.getbands(),
                "edge_density": float((edges > 32).mean()) if edges.size else 0.0,
                "estimated_quality": quality,
                "recognized_text": text[:200],
                "exif": exif,
            },
            processing_seconds=time.perf_counter() - started,
        )

    def _estimated_quality(self, image: Image.Image) -> int | None:
        if image.format != "JPEG":
            return None
        quality = estimate_jpeg_quality(image)
        if quality is not None:
            return quality
        dpi = image.info.get("dpi")
        return int(dpi[0]) if dpi else 72

    def _exif(self, image: Image.Image) -> dict[str, object]:
        raw = image.getexif()
        if not raw:
            return {}
        software = raw.get(EXIF_SOFTWARE)
        return {
            "software": str(software).strip("\x00 ") if software else None,
            "datetime": raw.get(EXIF_DATETIME),
            "camera": raw.get(EXIF_MODEL),
            "orientation": raw.get(EXIF_ORIENTATION),
        }
