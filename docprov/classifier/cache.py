import threading
import time
from collections.abc import Callable

from docprov.classifier.base import BaseForgeryModel, BaseModelLoader
from docprov.exceptions import ModelLoadError
from docprov.logging.logger import Log


class ModelCache:
    """Loads each named model once and keeps it for the life of the process.

    Loads are serialized per name, so concurrent callers asking for the same
    uncached model wait for a single load. A failed load is remembered for
    backoff_seconds and re-raised without touching the loader again.
    """

    def __init__(
        self,
        loader: BaseModelLoader,
        *,
        backoff_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._backoff_seconds = backoff_seconds
        self._clock = clock
        self._models: dict[str, BaseForgeryModel] = {}
        self._failures: dict[str, tuple[float, str]] = {}
        self._name_locks: dict[str, threading.Lock] = {}
        self._generation = 0
        self._guard = threading.Lock()

    def get(self, name: str) -> BaseForgeryModel:
        model = self._models.get(name)
        if model is not None:
            return model

        with self._lock_for(name):
            model = self._models.get(name)
            if model is not None:
                return model
            self._raise_if_backing_off(name)
            with self._guard:
                generation = self._generation
            try:
                Log.info(f"Loading classifier model {name}")
                model = self._loader.load(name)
            except Exception as exc:
                with self._guard:
                    if generation == self._generation:
                        self._failures[name] = (self._clock(), str(exc))
                Log.error(f"Failed to load classifier model {name}: {exc}")
                if isinstance(exc, ModelLoadError):
                    raise
                raise ModelLoadError(f"Model {name} failed to load: {exc}") from exc
            with self._guard:
                # a clear() issued during the load wins; the caller still gets its model
                if generation == self._generation:
                    self._failures.pop(name, None)
                    self._models[name] = model
            return model

    def loaded(self) -> list[str]:
        return sorted(self._models)

    def clear(self) -> None:
        """Drop every cached model and remembered failure, including loads in flight."""
        with self._guard:
            self._generation += 1
            self._models.clear()
            self._failures.clear()
        Log.info("Classifier model cache cleared")

    def _lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            return self._name_locks.setdefault(name, threading.Lock())

    def _raise_if_backing_off(self, name: str) -> None:
        failure = self._failures.get(name)
        if failure is None:
            return
        failed_at, message = failure
        if self._clock() - failed_at < self._backoff_seconds:
            raise ModelLoadError(f"Model {name} unavailable (last failure: {message})")
