from collections.abc import Iterable, Mapping

from docprov.analysis.models import AnomalyFinding, Severity


class ScoringPolicy:
    """Composite score: a format baseline minus severity-weighted penalties.

    The result is clamped to [0, 100].
    """

    def __init__(self, baseline: float, weights: Mapping[str, float]) -> None:
        missing = [s.value for s in Severity if s.value not in weights]
        if missing:
            raise ValueError(f"Missing severity weights: {missing}")
        self.baseline = baseline
        self._weights = {Severity(k): float(v) for k, v in weights.items()}

    def weight(self, severity: Severity) -> float:
        return self._weights[severity]

    def score(self, findings: Iterable[AnomalyFinding]) -> float:
        penalty = sum(self._weights[f.severity] for f in findings)
        return min(100.0, max(0.0, self.baseline - penalty))
