from pathlib import Path

import numpy as np
import torch

from docprov.classifier.base import BaseForgeryModel, BaseModelLoader
from docprov.exceptions import ModelLoadError


class TorchScriptModel(BaseForgeryModel):
    """Wraps a TorchScript module taking NCHW float input."""

    def __init__(self, module: torch.jit.ScriptModule, version: str) -> None:
        self._module = module
        self.version = version

    def predict(self, batch: np.ndarray) -> np.ndarray:
        tensor = torch.from_numpy(np.ascontiguousarray(batch)).permute(0, 3, 1, 2)
        try:
            with torch.inference_mode():
                output = self._module(tensor)
            return output.detach().cpu().numpy().reshape(-1).copy()
        finally:
            del tensor


class TorchScriptLoader(BaseModelLoader):
    """Loads `{models_dir}/{name}/model.pt` onto the CPU."""

    MODEL_FILE = "model.pt"
    VERSION_FILE = "version.txt"

    def __init__(self, models_dir: Path) -> None:
        self._models_dir = models_dir

    def load(self, name: str) -> BaseForgeryModel:
        model_dir = self._models_dir / name
        path = model_dir / self.MODEL_FILE
        if not path.exists():
            raise ModelLoadError(f"Model file not found: {path}")
        try:
            module = torch.jit.load(str(path), map_location="cpu")
        except Exception as exc:
            raise ModelLoadError(f"Cannot load TorchScript model {path}: {exc}") from exc
        module.eval()
        version_file = model_dir / self.VERSION_FILE
        version = version_file.read_text().strip() if version_file.exists() else name
        return TorchScriptModel(module, version)
