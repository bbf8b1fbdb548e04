"""
Small FFmpeg helper for building a video from numbered PNG frames.
"""

from __future__ import annotations

import logging
import os
import subprocess
from fractions import Fraction
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .errors import EncodingFailed, UnsupportedFormat

logger = logging.getLogger(__name__)

# container extension -> codec arguments
VCODECS = {
    ".mp4": ("-vcodec", "libx264"),   # H.264
    ".webm": ("-vcodec", "libvpx"),   # VP8
}
FRAME_PATTERN = "%d.png"
NOCOLOR_ENV = {
    "NO_COLOR": "1",              # older ffmpeg releases
    "AV_LOG_FORCE_NOCOLOR": "1",  # newer ones
}


def codec_args(filename) -> Tuple[str, ...]:
    ext = Path(filename).suffix.lower()
    try:
        return VCODECS[ext]
    except KeyError:
        raise UnsupportedFormat(
            f'The extension of the filename has to be ".mp4" or ".webm", got: {str(filename)!r}'
        ) from None


def even_crop(width: int, height: int) -> Tuple[Tuple[str, ...], Tuple[int, int]]:
    """
    libx264 and libvpx refuse odd frame sizes: crop one pixel off the left
    and/or top edge when needed.

    Returns the crop filter arguments (empty when both sides are even) and
    the resulting video size.
    """
    wcrop = width % 2
    hcrop = height % 2
    if not (wcrop or hcrop):
        return (), (width, height)
    width -= wcrop
    height -= hcrop
    crop = ("-vf", f"crop={width}:{height}:{wcrop}:{hcrop}")
    return crop, (width, height)


def format_fps(fps) -> str:
    """Frame rate as passed to -r, without rounding; ffmpeg accepts num/den."""
    if isinstance(fps, Fraction) and fps.denominator != 1:
        return f"{fps.numerator}/{fps.denominator}"
    if fps == int(fps):
        return str(int(fps))
    return repr(float(fps))


def build_command(
    ffmpeg: str,
    frames_dir: Path,
    output: Path,
    fps: float,
    size: Tuple[int, int],
    options: Sequence[str] = (),
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Return the ffmpeg argument list encoding frames_dir/%d.png into output."""
    vcodec = codec_args(output)
    crop, (width, height) = even_crop(*size)
    if crop:
        logger.warning("Cropping video from %dx%d to %dx%d (codec needs even dimensions)",
                       size[0], size[1], width, height)
    return [
        ffmpeg,
        "-f", "image2",                           # input = sequence of images
        "-r", format_fps(fps),                      # frames per second in final video
        "-i", str(Path(frames_dir) / FRAME_PATTERN),
        *vcodec,
        *crop,
        "-s", f"{width}:{height}",
        *options,
        *extra_args,
        str(output),
    ]


def run(cmd: Sequence[str], env: Optional[dict] = None) -> subprocess.CompletedProcess:
    """Run ffmpeg to completion with colored logging disabled."""
    run_env = dict(os.environ if env is None else env)
    run_env.update(NOCOLOR_ENV)
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(list(cmd), capture_output=True, text=True, env=run_env)
    except OSError as exc:
        raise EncodingFailed(f"could not start {cmd[0]!r}: {exc}", cmd=cmd) from exc
    if result.returncode != 0:
        raise EncodingFailed(
            f"ffmpeg exited with status {result.returncode}",
            cmd=cmd,
            returncode=result.returncode,
            stderr=result.stderr or "",
        )
    if result.stderr:
        logger.debug("ffmpeg: %s", result.stderr.strip())
    return result
