"""
Output manifest persistence.

The manifest lists the images produced by a batch run, one path per line,
in processing order. It is only written after every image succeeded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


def write_manifest(path: Path | str, output_paths: Iterable[Path | str]) -> Path:
    """Write output paths to a manifest file, one newline-terminated line each.

    Creates the manifest's parent directory if needed.

    Returns:
        The manifest path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        for output_path in output_paths:
            handle.write(f"{output_path}\n")
    return path


def read_manifest(path: Path | str) -> list[Path]:
    """Read a manifest back into an ordered list of paths."""
    text = Path(path).read_text(encoding="utf-8")
    return [Path(line) for line in text.splitlines() if line]
