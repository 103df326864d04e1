from abc import ABC, abstractmethod

from docprov.analysis.models import AnalysisResult


class BaseAnalyzer(ABC):
    """Contract for format-specific analyzers."""

    @abstractmethod
    def analyze(self, data: bytes) -> AnalysisResult:
        """Run every check for this format and score the findings.

        Raises:
            InvalidInputError: if the bytes are not of this analyzer's format.
            AnalysisError: if a check cannot run.
        """
