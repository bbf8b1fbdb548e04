"""
Recorder configuration, resolved once from the environment and then frozen.

Environment variables:
  FIGMOVIE_FFMPEG       path to the ffmpeg executable
  FIGMOVIE_KEEP_FRAMES  keep the PNG frames after close() (true/false)
  FIGMOVIE_TMPDIR       parent directory of the per-recorder workspaces
"""

from __future__ import annotations

import os
import shlex
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidArgument


DEFAULT_FFMPEG_OPTIONS: Tuple[str, ...] = (
    "-loglevel", "warning",  # only warnings and errors
    "-pix_fmt", "yuv420p",   # players choke on yuv444p from libx264
    "-y",                    # overwrite output without asking
)
TMP_DIRNAME = "figmovie"


def _str2bool(x) -> bool:
    if isinstance(x, bool):
        return x
    s = str(x).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise InvalidArgument(f"Expected a boolean (True/False), got: {x!r}")


def find_ffmpeg(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Return the ffmpeg executable to use: $FIGMOVIE_FFMPEG, then the PATH.

    Falls back to the bare name so that a missing ffmpeg is reported when
    encoding, not when recording starts.
    """
    env = os.environ if environ is None else environ
    explicit = env.get("FIGMOVIE_FFMPEG")
    if explicit:
        return explicit
    return shutil.which("ffmpeg") or "ffmpeg"


def default_tmp_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    if env.get("FIGMOVIE_TMPDIR"):
        return Path(env["FIGMOVIE_TMPDIR"])
    return Path(tempfile.gettempdir()) / TMP_DIRNAME


@dataclass(frozen=True)
class RecorderConfig:
    ffmpeg: str = field(default_factory=find_ffmpeg)
    ffmpeg_options: Union[str, Sequence[str]] = DEFAULT_FFMPEG_OPTIONS
    keep_frames: bool = False
    tmp_root: Path = field(default_factory=default_tmp_root)

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        opts = self.ffmpeg_options
        if isinstance(opts, str):
            opts = shlex.split(opts)
        object.__setattr__(self, "ffmpeg_options", tuple(str(o) for o in opts))
        object.__setattr__(self, "keep_frames", _str2bool(self.keep_frames))
        object.__setattr__(self, "tmp_root", Path(self.tmp_root))
        if not self.ffmpeg:
            raise InvalidArgument("ffmpeg executable must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "RecorderConfig":
        env = os.environ if environ is None else environ
        values = {
            "ffmpeg": find_ffmpeg(env),
            "keep_frames": _str2bool(env.get("FIGMOVIE_KEEP_FRAMES", False)),
            "tmp_root": default_tmp_root(env),
        }
        values.update(overrides)
        return cls(**values)


def parse_geometry(text: str) -> Tuple[int, int]:
    """Parse '<width>x<height>' into a tuple of positive integers."""
    try:
        width, height = [int(value) for value in text.lower().split("x")]
    except ValueError:
        raise InvalidArgument(f'Invalid video size: "{text}" (expected WIDTHxHEIGHT)') from None
    if width <= 0 or height <= 0:
        raise InvalidArgument(f'Invalid video size: "{text}"')
    return width, height
