from abc import ABC, abstractmethod

import numpy as np


class BaseSignalProvider(ABC):
    """Contract for the operational and forensic signals that are not yet
    backed by real instrumentation.

    Ledger confirmation counts and the image heuristics consult a provider so
    deterministic values can be injected where needed.
    """

    @abstractmethod
    def confirmations(self) -> int:
        """Confirmation count reported for a freshly appended record."""

    @abstractmethod
    def edge_suspicion(self, edge_map: np.ndarray) -> float:
        """Suspicion in [0, 1] that the edge map shows spliced regions."""

    @abstractmethod
    def font_count(self, text: str) -> int:
        """Number of distinct fonts judged present in recognized text."""

    @abstractmethod
    def recompression_likelihood(self, estimated_quality: int) -> float:
        """Likelihood in [0, 1] that the image went through several encodes."""
