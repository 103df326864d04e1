from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class AnomalyFinding:
    """One irregularity detected by an analyzer. Consumed by scoring only."""

    type: str
    severity: Severity
    description: str
    confidence: float | None = None
    evidence: Mapping[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "severity": self.severity.value,
            "description": self.description,
            "confidence": self.confidence,
            "evidence": dict(self.evidence),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Output of one analyzer run. Recomputed for every verification."""

    composite_score: float
    format: str
    findings: list[AnomalyFinding] = field(default_factory=list)
    metadata: dict[str, object] = field(default_factory=dict)
    processing_seconds: float = 0.0
