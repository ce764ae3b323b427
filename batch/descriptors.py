"""
Input image descriptors.

A descriptor names one image to process. Descriptors are usually loaded
from a pathfile: a text file with one image path per line.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ImageDescriptor:
    """One input image of a batch.

    Attributes:
        filename: Path to the image file.
    """

    filename: Path

    @classmethod
    def from_pathfile(cls, pathfile: Path | str) -> list[ImageDescriptor]:
        """Load descriptors from a pathfile, keeping the file's line order.

        Surrounding whitespace is stripped and blank lines are skipped.

        Args:
            pathfile: Text file with one image path per line.

        Returns:
            Descriptors in the order they appear in the file.

        Raises:
            FileNotFoundError: If the pathfile does not exist.
        """
        text = Path(pathfile).read_text(encoding="utf-8")
        return [
            cls(filename=Path(line.strip()))
            for line in text.splitlines()
            if line.strip()
        ]
