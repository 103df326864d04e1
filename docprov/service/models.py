from dataclasses import dataclass, field

from docprov.analysis.models import AnalysisResult, AnomalyFinding
from docprov.classifier.models import ClassifierResult
from docprov.ledger.models import DocumentRecord


@dataclass(frozen=True)
class RegistrationReceipt:
    transaction_id: str
    content_hash: str
    content_address: str
    sequence_number: int


@dataclass(frozen=True)
class VerificationReport:
    """Structured verdict. A forged document is a normal report, not an error."""

    authentic: bool
    composite_score: float
    content_hash: str
    anomalies: list[AnomalyFinding] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    ledger_record: DocumentRecord | None = None
    analysis: AnalysisResult | None = None
    classification: ClassifierResult | None = None
    rationale: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "authentic": self.authentic,
            "composite_score": self.composite_score,
            "content_hash": self.content_hash,
            "anomalies": [a.to_dict() for a in self.anomalies],
            "flags": list(self.flags),
            "ledger_record": self.ledger_record.to_dict() if self.ledger_record else None,
            "metadata": self.analysis.metadata if self.analysis else {},
            "ai_confidence": (
                self.classification.authenticity_confidence if self.classification else None
            ),
            "model_version": self.classification.model_version if self.classification else None,
            "rationale": list(self.rationale),
        }
