from docprov.analysis.analyzer import DocumentAnalyzer
from docprov.analysis.image_analyzer import ImageAnalyzer
from docprov.analysis.pdf_analyzer import PdfAnalyzer
from docprov.analysis.scoring import ScoringPolicy
from docprov.config.settings import Settings
from docprov.ocr.base import BaseTextRecognizer
from docprov.pdf.base import BasePdfInspector
from docprov.signals.base import BaseSignalProvider


class AnalyzerFactory:
    """Builds the format-dispatching analyzer from settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        inspector: BasePdfInspector,
        recognizer: BaseTextRecognizer,
        signals: BaseSignalProvider,
    ) -> DocumentAnalyzer:
        pdf_analyzer = PdfAnalyzer(
            inspector,
            ScoringPolicy(settings.pdf_baseline_score, settings.pdf_severity_weights),
            suspicious_tools=settings.suspicious_tools,
            min_text_length=settings.pdf_min_text_length,
        )
        image_analyzer = ImageAnalyzer(
            recognizer,
            signals,
            ScoringPolicy(settings.image_baseline_score, settings.image_severity_weights),
            suspicious_tools=settings.suspicious_tools,
            edge_threshold=settings.edge_suspicion_threshold,
            max_font_count=settings.max_font_count,
            quality_threshold=settings.compression_quality_threshold,
        )
        return DocumentAnalyzer(pdf_analyzer, image_analyzer)
