from abc import ABC, abstractmethod

import numpy as np


class BaseForgeryModel(ABC):
    """A loaded visual classifier."""

    version: str = ""

    @abstractmethod
    def predict(self, batch: np.ndarray) -> np.ndarray:
        """Run inference on a (1, H, W, 3) float32 batch scaled to [0, 1].

        Returns:
            Flat array: forgery probability first, optionally followed by the
            authenticity probability.
        """


class BaseModelLoader(ABC):
    """Contract for loading a named classifier from its backing store."""

    @abstractmethod
    def load(self, name: str) -> BaseForgeryModel:
        """Load the model called name.

        Raises:
            ModelLoadError: if the model is missing or cannot be deserialized.
        """
