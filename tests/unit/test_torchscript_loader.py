from pathlib import Path

import numpy as np
import pytest

from docprov.exceptions import ModelLoadError

torch = pytest.importorskip("torch")

from docprov.classifier.torchscript_loader import TorchScriptLoader  # noqa: E402


class MeanForgery(torch.nn.Module):
    def forward(self, x):  # type: ignore[no-untyped-def]
        mean = x.mean()
        return torch.stack([mean, torch.ones_like(mean) - mean])


def _save_model(models_dir: Path, name: str, version: str | None = None) -> None:
    model_dir = models_dir / name
    model_dir.mkdir(parents=True)
    torch.jit.script(MeanForgery()).save(str(model_dir / "model.pt"))
    if version is not None:
        (model_dir / "version.txt").write_text(f"{version}\n")


class TestTorchScriptLoader:
    def test_loads_and_predicts(self, tmp_path: Path) -> None:
        _save_model(tmp_path, "forgery-detector-v3", version="3.1.0")
        model = TorchScriptLoader(tmp_path).load("forgery-detector-v3")

        output = model.predict(np.full((1, 8, 8, 3), 0.25, dtype=np.float32))

        assert model.version == "3.1.0"
        assert output.tolist() == pytest.approx([0.25, 0.75])

    def test_version_defaults_to_name(self, tmp_path: Path) -> None:
        _save_model(tmp_path, "forgery-detector-v3")
        assert TorchScriptLoader(tmp_path).load("forgery-detector-v3").version == "forgery-detector-v3"

    def test_missing_model_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ModelLoadError, match="not found"):
            TorchScriptLoader(tmp_path).load("absent")

    def test_corrupt_model_raises(self, tmp_path: Path) -> None:
        (tmp_path / "broken").mkdir()
        (tmp_path / "broken" / "model.pt").write_bytes(b"garbage")
        with pytest.raises(ModelLoadError):
            TorchScriptLoader(tmp_path).load("broken")
