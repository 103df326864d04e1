from pathlib import Path

from docprov.classifier.base import BaseModelLoader
from docprov.classifier.cache import ModelCache
from docprov.classifier.classifier import ForgeryClassifier
from docprov.config.settings import Settings


class ClassifierFactory:
    """Creates the model loader, its cache and the classifier from settings."""

    LOADERS = ("torchscript",)

    @classmethod
    def create(
        cls,
        settings: Settings,
        cache: ModelCache | None = None,
    ) -> ForgeryClassifier:
        if cache is None:
            cache = ModelCache(
                cls.create_loader(settings),
                backoff_seconds=settings.model_failure_backoff_seconds,
            )
        return ForgeryClassifier(
            cache,
            model_name=settings.classifier_model_name,
            input_size=settings.classifier_input_size,
            flag_thresholds=settings.classifier_flags,
        )

    @classmethod
    def create_loader(cls, settings: Settings) -> BaseModelLoader:
        loader = settings.classifier_loader.lower()
        if loader == "torchscript":
            # torch is an optional extra; only import it when it is selected
            from docprov.classifier.torchscript_loader import TorchScriptLoader

            return TorchScriptLoader(Path(settings.classifier_models_dir))
        raise ValueError(
            f"Unknown classifier loader '{loader}'. Choose from: {list(cls.LOADERS)}"
        )
