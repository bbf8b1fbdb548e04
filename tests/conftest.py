import logging
import subprocess

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from figmovie.config import RecorderConfig


@pytest.fixture
def config(tmp_path):
    return RecorderConfig(ffmpeg="ffmpeg", tmp_root=tmp_path / "figmovie")


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run in figmovie.ffmpeg; records every call."""
    calls = []

    def _run(cmd, **kwargs):
        calls.append({"cmd": cmd, **kwargs})
        return subprocess.CompletedProcess(cmd, fake_run_result["returncode"], "", fake_run_result["stderr"])

    fake_run_result = {"returncode": 0, "stderr": ""}
    monkeypatch.setattr("figmovie.ffmpeg.subprocess.run", _run)
    _run.calls = calls
    _run.result = fake_run_result
    return _run


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture(autouse=True)
def restore_figmovie_logger():
    """cli.setup_logging replaces handlers and stops propagation; undo it."""
    logger = logging.getLogger("figmovie")
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield
    logger.handlers, logger.propagate, logger.level = saved[0], saved[1], saved[2]
