from docprov.analysis.models import AnalysisResult
from docprov.classifier.models import ClassifierResult
from docprov.config.settings import Settings
from docprov.decision.models import Decision
from docprov.ledger.models import VerificationResult


class DecisionPolicy:
    """Authentic only when the ledger knows the hash, the composite score
    clears the high-confidence threshold and the classifier is confident.

    Any single failing condition forces a negative verdict.
    """

    def __init__(self, *, score_threshold: float, confidence_threshold: float) -> None:
        self._score_threshold = score_threshold
        self._confidence_threshold = confidence_threshold

    @classmethod
    def from_settings(cls, settings: Settings) -> "DecisionPolicy":
        return cls(
            score_threshold=settings.decision_score_threshold,
            confidence_threshold=settings.decision_confidence_threshold,
        )

    def decide(
        self,
        lookup: VerificationResult,
        analysis: AnalysisResult,
        classification: ClassifierResult,
    ) -> Decision:
        rationale: list[str] = []
        if not lookup.exists:
            rationale.append("Content hash is not registered in the ledger")
        if not analysis.composite_score > self._score_threshold:
            rationale.append(
                f"Composite score {analysis.composite_score:g} does not exceed "
                f"{self._score_threshold:g}"
            )
        if not classification.authenticity_confidence > self._confidence_threshold:
            rationale.append(
                f"Classifier confidence {classification.authenticity_confidence:.3f} "
                f"does not exceed {self._confidence_threshold:g}"
            )

        authentic = not rationale
        if authentic:
            rationale.append("Registered, structurally sound and visually consistent")
        return Decision(
            authentic=authentic,
            composite_score=analysis.composite_score,
            rationale=rationale,
        )
