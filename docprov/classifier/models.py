from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClassifierResult:
    forgery_probability: float
    authenticity_confidence: float
    flags: list[str] = field(default_factory=list)
    model_version: str = ""
