from collections.abc import Mapping

import numpy as np

from docprov.analysis.exceptions import AnalysisError
from docprov.classifier.cache import ModelCache
from docprov.classifier.models import ClassifierResult
from docprov.classifier.preprocessing import preprocess
from docprov.logging.logger import Log


class ForgeryClassifier:
    """Scores an image with the cached visual classifier.

    Flags come from ascending probability thresholds, so a higher forgery
    probability never yields fewer flags.
    """

    def __init__(
        self,
        cache: ModelCache,
        *,
        model_name: str,
        input_size: int,
        flag_thresholds: Mapping[str, float],
    ) -> None:
        self._cache = cache
        self._model_name = model_name
        self._input_size = input_size
        self._flag_thresholds = sorted(flag_thresholds.items(), key=lambda item: item[1])

    def classify(self, data: bytes) -> ClassifierResult:
        model = self._cache.get(self._model_name)
        batch = preprocess(data, self._input_size)
        try:
            output = np.asarray(model.predict(batch), dtype=np.float64).reshape(-1)
        finally:
            del batch
        if output.size == 0:
            raise AnalysisError(f"Model {self._model_name} returned no prediction")

        forgery = float(output[0])
        authenticity = float(output[1]) if output.size > 1 else 1.0 - forgery
        flags = [name for name, threshold in self._flag_thresholds if forgery > threshold]
        Log.info(
            f"Classifier {self._model_name}: forgery {forgery:.3f}, "
            f"{len(flags)} flags"
        )
        return ClassifierResult(
            forgery_probability=forgery,
            authenticity_confidence=authenticity,
            flags=flags,
            model_version=model.version or self._model_name,
        )
