#!/usr/bin/env python3
"""
Record a demo animation with FrameRecorder.

  figmovie sin.mp4
  figmovie sin.webm --frames 40 --fps 10 --size 640x480 --keep-frames

Each frame plots sin(k*x) for k = 1..FRAMES.
"""

from __future__ import annotations

import argparse
import logging
import sys

import matplotlib
import numpy as np

from .config import RecorderConfig, parse_geometry
from .errors import FigmovieError
from .recorder import DEFAULT_FPS, FrameRecorder

logger = logging.getLogger("figmovie")

FRAMES = 20


def _geometry(text: str):
    try:
        return parse_geometry(text)
    except FigmovieError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def _positive_float(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="figmovie",
        description="Render a demo sequence of matplotlib figures into an MP4 or WebM video",
    )
    p.add_argument("output", help="Video file to write; must end with .mp4 or .webm")
    p.add_argument("--frames", type=int, default=FRAMES, help=f"Number of frames (default: {FRAMES})")
    p.add_argument("--fps", type=_positive_float, default=DEFAULT_FPS,
                   help=f"Frames per second (default: {DEFAULT_FPS})")
    p.add_argument("--size", type=_geometry, default=None, metavar="WxH",
                   help="Video size in pixels, e.g. 640x480 (default: size of the figure)")
    p.add_argument("--keep-frames", action=argparse.BooleanOptionalAction, default=None,
                   help="Keep the PNG frames after encoding (default: $FIGMOVIE_KEEP_FRAMES or off)")
    p.add_argument("--ffmpeg", default=None, help="Path to the ffmpeg executable")
    p.add_argument("-v", "--verbose", action="store_true", help="Increase log messages verbosity")
    return p


def setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def record_demo(rec: FrameRecorder, n_frames: int) -> None:
    import matplotlib.pyplot as plt

    x = np.arange(1, np.pi, 0.01)
    fig, ax = plt.subplots()
    try:
        for k in range(1, n_frames + 1):
            ax.cla()
            ax.plot(x, np.sin(k * x))
            ax.set_ylim(-1.1, 1.1)
            ax.set_title(f"sin({k}x)")
            rec.capture(fig)
    finally:
        plt.close(fig)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    matplotlib.use("Agg")

    overrides = {}
    if args.ffmpeg is not None:
        overrides["ffmpeg"] = args.ffmpeg
    if args.keep_frames is not None:
        overrides["keep_frames"] = args.keep_frames

    try:
        config = RecorderConfig.from_env(**overrides)
        with FrameRecorder(args.size, config=config) as rec:
            record_demo(rec, args.frames)
            rec.write_movie(args.output, fps=args.fps)
    except FigmovieError as exc:
        logger.error("figmovie: %s", exc)
        return 1

    print(f"Wrote {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
