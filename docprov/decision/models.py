from dataclasses import dataclass, field


@dataclass(frozen=True)
class Decision:
    authentic: bool
    composite_score: float
    rationale: list[str] = field(default_factory=list)
