import random

import numpy as np

from docprov.signals.base import BaseSignalProvider


class SimulatedSignalProvider(BaseSignalProvider):
    """Draws every signal from a pseudo-random generator."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def confirmations(self) -> int:
        return self._rng.randint(10, 59)

    def edge_suspicion(self, edge_map: np.ndarray) -> float:
        return self._rng.random()

    def font_count(self, text: str) -> int:
        return self._rng.randint(1, 3)

    def recompression_likelihood(self, estimated_quality: int) -> float:
        return self._rng.random()


class StaticSignalProvider(BaseSignalProvider):
    """Returns fixed, configured values for every signal."""

    def __init__(
        self,
        *,
        confirmations: int = 12,
        edge_suspicion: float = 0.0,
        font_count: int = 1,
        recompression_likelihood: float = 0.0,
    ) -> None:
        self._confirmations = confirmations
        self._edge_suspicion = edge_suspicion
        self._font_count = font_count
        self._recompression_likelihood = recompression_likelihood

    def confirmations(self) -> int:
        return self._confirmations

    def edge_suspicion(self, edge_map: np.ndarray) -> float:
        return self._edge_suspicion

    def font_count(self, text: str) -> int:
        return self._font_count

    def recompression_likelihood(self, estimated_quality: int) -> float:
        return self._recompression_likelihood
