"""
Caller frame capture

Frames are read from the live stack only when a line is emitted.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List
import os
import sys

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent

# Only the logging machinery is skipped; admin and database log as callers.
_INTERNAL_DIRS = tuple(
    str(_PACKAGE_ROOT / name) + os.sep for name in ("core", "formatters", "writers")
)


@dataclass(frozen=True)
class Frame:
    """A captured stack location."""

    filename: str
    lineno: int
    function: str

    def __str__(self) -> str:
        return f"{Path(self.filename).name}:{self.lineno}"


@lru_cache(maxsize=1024)
def _is_internal(filename: str) -> bool:
    try:
        return str(Path(filename).resolve()).startswith(_INTERNAL_DIRS)
    except (OSError, ValueError):
        return False


def capture_frames(skip: int = 0, depth: int = 1) -> List[Frame]:
    """
    Capture frames above the caller of this function.

    Frames inside the logging machinery (core, formatters, writers) are
    passed over, so the first frame returned is the statement that
    emitted the line.

    Args:
        skip: Additional external frames to pass over
        depth: Maximum number of frames to return

    Returns:
        Up to depth frames, innermost first
    """
    frames: List[Frame] = []
    frame = sys._getframe(1)
    while frame is not None and len(frames) < depth:
        code = frame.f_code
        if not _is_internal(code.co_filename):
            if skip > 0:
                skip -= 1
            else:
                frames.append(Frame(code.co_filename, frame.f_lineno, code.co_name))
        frame = frame.f_back
    return frames
