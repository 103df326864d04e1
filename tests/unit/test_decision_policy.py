from datetime import datetime, timezone

import pytest

from docprov.analysis.models import AnalysisResult
from docprov.classifier.models import ClassifierResult
from docprov.config.settings import Settings
from docprov.decision.policy import DecisionPolicy
from docprov.ledger.models import DocumentRecord, VerificationResult


def _registered() -> VerificationResult:
    record = DocumentRecord(
        content_hash="ab" * 32,
        transaction_id="cd" * 32,
        sequence_number=1_000_000,
        issuer="MOI",
        document_type="passport",
        storage_pointer="bafyabc",
        metadata={},
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        confirmations=12,
    )
    return VerificationResult(exists=True, record=record, message="Document registered")


def _missing() -> VerificationResult:
    return VerificationResult(exists=False, message="Document not found in registry")


def _analysis(score: float) -> AnalysisResult:
    return AnalysisResult(composite_score=score, format="pdf")


def _classification(confidence: float) -> ClassifierResult:
    return ClassifierResult(forgery_probability=1 - confidence, authenticity_confidence=confidence)


@pytest.fixture()
def policy() -> DecisionPolicy:
    return DecisionPolicy(score_threshold=85.0, confidence_threshold=0.9)


class TestDecisionPolicy:
    def test_all_conditions_pass(self, policy: DecisionPolicy) -> None:
        decision = policy.decide(_registered(), _analysis(95.0), _classification(0.95))
        assert decision.authentic is True
        assert decision.composite_score == 95.0
        assert len(decision.rationale) == 1

    def test_unregistered_is_never_authentic(self, policy: DecisionPolicy) -> None:
        decision = policy.decide(_missing(), _analysis(100.0), _classification(1.0))
        assert decision.authentic is False
        assert decision.rationale == ["Content hash is not registered in the ledger"]

    def test_score_must_exceed_threshold(self, policy: DecisionPolicy) -> None:
        decision = policy.decide(_registered(), _analysis(85.0), _classification(0.95))
        assert decision.authentic is False
        assert "Composite score 85 does not exceed 85" in decision.rationale

    def test_confidence_must_exceed_threshold(self, policy: DecisionPolicy) -> None:
        decision = policy.decide(_registered(), _analysis(95.0), _classification(0.9))
        assert decision.authentic is False
        assert len(decision.rationale) == 1

    def test_every_failure_is_reported(self, policy: DecisionPolicy) -> None:
        decision = policy.decide(_missing(), _analysis(40.0), _classification(0.2))
        assert decision.authentic is False
        assert len(decision.rationale) == 3

    def test_from_settings(self) -> None:
        policy = DecisionPolicy.from_settings(
            Settings(decision_score_threshold=50.0, decision_confidence_threshold=0.5)
        )
        decision = policy.decide(_registered(), _analysis(60.0), _classification(0.6))
        assert decision.authentic is True
