"""
FrameRecorder: capture matplotlib figures as numbered PNG frames in a private
temporary directory and turn them into an MP4 or WebM video with ffmpeg.

Example:
    x = np.arange(1, np.pi, 0.01)
    with FrameRecorder() as rec:
        for k in range(1, 21):
            plt.cla()
            plt.plot(x, np.sin(k * x))
            rec.capture()
        rec.write_movie("sin.mp4", fps=5)

With FrameRecorder((width, height)) every figure is resized to exactly
width x height pixels while it is exported; otherwise the video takes the
size of the first frame.
"""

from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

from . import ffmpeg, frames
from .config import RecorderConfig
from .errors import InsufficientFrames, InvalidArgument, ResourceError

logger = logging.getLogger(__name__)

MIN_FRAMES = 2
DEFAULT_FPS = 30


class FrameRecorder:
    def __init__(self, size: Optional[Sequence[float]] = None, config: Optional[RecorderConfig] = None):
        self.config = config if config is not None else RecorderConfig.from_env()
        self.size: Optional[Tuple[int, int]] = frames.check_size(size) if size is not None else None
        self.frame_count = 0
        self.closed = False
        self.workspace = self._make_workspace(self.config.tmp_root)
        logger.info("Recording frames to %s", self.workspace)

    @staticmethod
    def _make_workspace(root: Path) -> Path:
        stamp = time.strftime("%Y-%m-%d--%H-%M-%S-")
        try:
            root.mkdir(parents=True, exist_ok=True)
            # mkdtemp never reuses an existing directory
            return Path(tempfile.mkdtemp(prefix=stamp, dir=root))
        except OSError as exc:
            raise ResourceError(f'could not create temporary directory in "{root}": {exc}') from exc

    @property
    def resize_figure(self) -> bool:
        return self.size is not None

    def __enter__(self) -> "FrameRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(workspace={str(self.workspace)!r}, "
                f"frames={self.frame_count}, size={self.size})")

    def frame_path(self, index: int) -> Path:
        """Path of the index-th frame, counting from 1."""
        return self.workspace / ffmpeg.FRAME_PATTERN.replace("%d", str(index))

    def frame_paths(self) -> list[Path]:
        return [self.frame_path(i) for i in range(1, self.frame_count + 1)]

    def _check_open(self) -> None:
        if self.closed:
            raise ResourceError(f"recorder is closed, {self.workspace} no longer exists")

    def capture(self, figure=None) -> Path:
        """
        Add the current state of figure to the video.

        figure defaults to the current pyplot figure. Anything that is not a
        Figure is reported and replaced by the current figure, so that one bad
        handle does not abort a capture loop.
        """
        self._check_open()
        if figure is None:
            fig = frames.current_figure()
        else:
            try:
                fig = frames.check_figure(figure)
            except InvalidArgument as exc:
                logger.warning("%s, falling back to the current figure", exc)
                fig = frames.current_figure()

        path = self.frame_path(self.frame_count + 1)
        frames.export_frame(fig, path, self.size)
        self.frame_count += 1
        return path

    def video_size(self) -> Tuple[int, int]:
        if self.size is not None:
            return self.size
        return frames.frame_size(self.frame_path(1))

    def write_movie(self, filename, fps: float = DEFAULT_FPS, extra_args: Sequence[str] = ()) -> Path:
        """
        Encode all frames captured so far into filename (.mp4 or .webm).

        Frames are kept when ffmpeg fails so that the call can be retried.
        """
        output = Path(filename)
        ffmpeg.codec_args(output)
        if self.frame_count < MIN_FRAMES:
            raise InsufficientFrames(
                f"cannot create a video from {self.frame_count} frame(s), "
                f"at least {MIN_FRAMES} are needed"
            )
        if not frames.is_positive_number(fps):
            raise InvalidArgument(f"fps must be a positive number, got: {fps!r}")
        self._check_open()

        cmd = ffmpeg.build_command(
            self.config.ffmpeg,
            self.workspace,
            output,
            fps,
            self.video_size(),
            options=self.config.ffmpeg_options,
            extra_args=extra_args,
        )
        output.parent.mkdir(parents=True, exist_ok=True)
        ffmpeg.run(cmd)
        logger.info("Wrote %s (%d frames at %s fps)", output, self.frame_count, ffmpeg.format_fps(fps))
        return output

    def close(self) -> None:
        """Remove the frames and the workspace unless config.keep_frames is set."""
        if self.closed:
            return
        self.closed = True
        if self.config.keep_frames:
            logger.info("Keeping %d frame(s) in %s", self.frame_count, self.workspace)
            return
        for path in self.frame_paths():
            path.unlink(missing_ok=True)
        try:
            self.workspace.rmdir()
        except OSError as exc:
            logger.warning("Could not remove %s: %s", self.workspace, exc)
            return
        try:
            # shared with other recorders, only removed once empty
            self.config.tmp_root.rmdir()
        except OSError:
            pass
        logger.info("Removed %s", self.workspace)
