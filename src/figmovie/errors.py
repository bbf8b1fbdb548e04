"""
Exceptions raised by figmovie.
"""

from __future__ import annotations


class FigmovieError(Exception):
    pass


class ResourceError(FigmovieError, OSError):
    """The temporary frame workspace could not be created or is gone."""


class InvalidArgument(FigmovieError, ValueError):
    pass


class UnsupportedFormat(FigmovieError, ValueError):
    """The output filename does not end with a known container extension."""


class InsufficientFrames(FigmovieError, RuntimeError):
    pass


class EncodingFailed(FigmovieError, RuntimeError):
    """ffmpeg could not be started or exited with a non-zero status."""

    def __init__(self, message: str, cmd=None, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.cmd = list(cmd) if cmd is not None else []
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stderr:
            msg = f"{msg}\n{self.stderr.strip()}"
        return msg
