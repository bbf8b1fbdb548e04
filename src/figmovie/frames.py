"""
Export matplotlib figures as fixed-resolution PNG frames.

Frames are always written as PNG at 72 dpi, so one inch of figure equals
72 pixels. Any change made to the figure while exporting is undone on exit,
also when saving fails.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from numbers import Integral, Real
from pathlib import Path
from typing import Iterator, Optional, Tuple

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from PIL import Image

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

DPI = 72
FORMAT = "png"


def is_positive_number(v) -> bool:
    """True for finite real numbers above zero; bools are not numbers here."""
    if isinstance(v, bool) or not isinstance(v, Real):
        return False
    if not isinstance(v, Integral) and not math.isfinite(v):
        return False
    return v > 0


def check_size(size) -> Tuple[int, int]:
    """Validate a (width, height) pair of positive numbers, rounded to pixels."""
    try:
        width, height = size
    except (TypeError, ValueError):
        raise InvalidArgument(
            f"video size has to be given as (width, height), got: {size!r}"
        ) from None
    for v in (width, height):
        if not is_positive_number(v):
            raise InvalidArgument(f"video size must be positive numbers, got: {size!r}")
    return max(1, int(round(width))), max(1, int(round(height)))


def check_figure(fig) -> Figure:
    if not isinstance(fig, Figure):
        raise InvalidArgument(f"not a matplotlib Figure: {fig!r}")
    return fig


def current_figure() -> Figure:
    return plt.gcf()


@contextmanager
def fixed_size(fig: Figure, width: int, height: int) -> Iterator[Figure]:
    """
    Resize fig so that saving it at DPI yields exactly width x height pixels.

    Agg truncates the canvas size to whole pixels, hence the extra half pixel.
    """
    orig = fig.get_size_inches().copy()
    fig.set_size_inches((width + 0.5) / DPI, (height + 0.5) / DPI, forward=False)
    try:
        yield fig
    finally:
        fig.set_size_inches(orig, forward=False)


@contextmanager
def auto_position() -> Iterator[None]:
    # the figure as laid out on screen, never a tight crop
    with matplotlib.rc_context({"savefig.bbox": "standard"}):
        yield


def export_frame(fig: Figure, path: Path, size: Optional[Tuple[int, int]] = None) -> Path:
    """Draw fig and save it to path, at size pixels when given."""
    path = Path(path)
    with auto_position():
        if size is not None:
            with fixed_size(fig, *size):
                _draw_and_save(fig, path)
        else:
            _draw_and_save(fig, path)
    logger.debug("Wrote %s", path)
    return path


def _draw_and_save(fig: Figure, path: Path) -> None:
    fig.canvas.draw()
    fig.savefig(path, format=FORMAT, dpi=DPI)


def frame_size(path: Path) -> Tuple[int, int]:
    """Pixel (width, height) of an image file."""
    with Image.open(path) as img:
        return img.size
