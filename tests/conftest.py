"""Shared pytest fixtures for image batch tests."""

from pathlib import Path

import cv2
import numpy as np
import pytest


@pytest.fixture
def make_images(tmp_path: Path):
    """Write grayscale PNGs under tmp_path/inputs and return their paths.

    Usage: make_images(["a.png", "b.png"], shape=(20, 30))
    """

    def _make(names, shape=(20, 30), seed=0):
        input_dir = tmp_path / "inputs"
        input_dir.mkdir(exist_ok=True)
        rng = np.random.default_rng(seed)
        paths = []
        for name in names:
            path = input_dir / name
            img = rng.integers(0, 256, shape, dtype=np.uint8)
            assert cv2.imwrite(str(path), img)
            paths.append(path)
        return paths

    return _make


@pytest.fixture
def write_pathfile(tmp_path: Path):
    """Write a pathfile listing the given paths, one per line."""

    def _write(paths, name="pathfile.txt"):
        pathfile = tmp_path / name
        pathfile.write_text("".join(f"{p}\n" for p in paths), encoding="utf-8")
        return pathfile

    return _write
