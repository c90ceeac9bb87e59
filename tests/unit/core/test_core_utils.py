from pathlib import Path

from mirt_engine.core.paths import get_project_root_dir
from mirt_engine.core.utils import get_rng


def test_rng_reproducibility() -> None:
    rng1 = get_rng(42)
    rng2 = get_rng(42)
    assert rng1.random() == rng2.random()


def test_project_root_holds_pyproject() -> None:
    root = get_project_root_dir()
    assert isinstance(root, Path)
    assert (root / "pyproject.toml").exists()
