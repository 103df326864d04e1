from docprov.analysis.base import BaseAnalyzer
from docprov.analysis.formats import PDF, normalize_format
from docprov.analysis.models import AnalysisResult
from docprov.exceptions import InvalidInputError
from docprov.logging.logger import Log


class DocumentAnalyzer:
    """Dispatches bytes to the structural (PDF) or forensic (image) analyzer."""

    def __init__(self, pdf_analyzer: BaseAnalyzer, image_analyzer: BaseAnalyzer) -> None:
        self._pdf_analyzer = pdf_analyzer
        self._image_analyzer = image_analyzer

    def analyze(self, data: bytes, format_hint: str | None = None) -> AnalysisResult:
        if not data:
            raise InvalidInputError("Cannot analyze empty content")
        fmt = normalize_format(format_hint, data)
        analyzer = self._pdf_analyzer if fmt == PDF else self._image_analyzer
        result = analyzer.analyze(data)
        Log.info(
            f"Analyzed {len(data)} bytes as {fmt or 'image'}: "
            f"score {result.composite_score}, {len(result.findings)} findings"
        )
        return result
