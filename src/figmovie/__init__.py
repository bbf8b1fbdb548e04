"""Record a sequence of matplotlib figures as an MP4 or WebM video using ffmpeg."""

from .config import RecorderConfig, find_ffmpeg
from .errors import (
    EncodingFailed,
    FigmovieError,
    InsufficientFrames,
    InvalidArgument,
    ResourceError,
    UnsupportedFormat,
)
from .recorder import FrameRecorder

__version__ = "0.1.0"

__all__ = [
    "FrameRecorder",
    "RecorderConfig",
    "find_ffmpeg",
    "FigmovieError",
    "ResourceError",
    "InvalidArgument",
    "UnsupportedFormat",
    "InsufficientFrames",
    "EncodingFailed",
]
