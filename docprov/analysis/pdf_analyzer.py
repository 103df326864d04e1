import time
from collections.abc import Sequence

from docprov.analysis.base import BaseAnalyzer
from docprov.analysis.formats import PDF
from docprov.analysis.models import AnalysisResult, AnomalyFinding, Severity
from docprov.analysis.scoring import ScoringPolicy
from docprov.logging.logger import Log
from docprov.pdf.base import BasePdfInspector


class PdfAnalyzer(BaseAnalyzer):
    """Structural checks for text documents: authoring fields and content volume."""

    def __init__(
        self,
        inspector: BasePdfInspector,
        scoring: ScoringPolicy,
        *,
        suspicious_tools: Sequence[str],
        min_text_length: int,
    ) -> None:
        self._inspector = inspector
        self._scoring = scoring
        self._suspicious_tools = [t.lower() for t in suspicious_tools]
        self._min_text_length = min_text_length

    def analyze(self, data: bytes) -> AnalysisResult:
        started = time.perf_counter()
        inspection = self._inspector.inspect(data)
        findings: list[AnomalyFinding] = []

        if not inspection.creation_date:
            findings.append(
                AnomalyFinding(
                    type="missing_metadata",
                    severity=Severity.MEDIUM,
                    description="Missing creation date",
                )
            )

        tool = self._suspicious_tool(inspection.producer, inspection.creator)
        if tool is not None:
            findings.append(
                AnomalyFinding(
                    type="suspicious_software",
                    severity=Severity.HIGH,
                    description="Document created with image editing software",
                    evidence={"tool": tool},
                )
            )

        if len(inspection.text) < self._min_text_length:
            findings.append(
                AnomalyFinding(
                    type="low_content",
                    severity=Severity.LOW,
                    description="Very little text content detected",
                    evidence={"text_length": len(inspection.text)},
                )
            )

        score = self._scoring.score(findings)
        Log.debug(f"PDF analysis: {len(findings)} findings, score {score}")
        return AnalysisResult(
            composite_score=score,
            format=PDF,
            findings=findings,
            metadata={
                "pages": inspection.page_count,
                "text_length": len(inspection.text),
                "has_images": inspection.has_images,
                "creation_date": inspection.creation_date,
                "producer": inspection.producer,
                "creator": inspection.creator,
            },
            processing_seconds=time.perf_counter() - started,
        )

    def _suspicious_tool(self, *fields: str | None) -> str | None:
        for value in fields:
            if value and any(tool in value.lower() for tool in self._suspicious_tools):
                return value
        return None
