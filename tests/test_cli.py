"""Tests for the figmovie command line."""

import logging
import sys

import pytest

from figmovie import cli


class TestParse:
    test_cases = [
        ["out.mp4"],
        ["out.webm", "--frames", "5"],
        ["out.mp4", "--fps", "12.5", "--size", "320x240"],
        ["out.mp4", "--keep-frames"],
        ["out.mp4", "--no-keep-frames"],
        ["out.mp4", "--ffmpeg", "/opt/local/bin/ffmpeg", "-v"],
    ]

    def test_parse(self):
        parser = cli.build_parser()
        for args in self.test_cases:
            parsed = parser.parse_args(args)
            assert parsed.output == args[0]

    def test_size(self):
        assert cli.build_parser().parse_args(["o.mp4", "--size", "320x240"]).size == (320, 240)

    def test_keep_frames_flag(self):
        parser = cli.build_parser()
        assert parser.parse_args(["o.mp4"]).keep_frames is None
        assert parser.parse_args(["o.mp4", "--keep-frames"]).keep_frames is True
        assert parser.parse_args(["o.mp4", "--no-keep-frames"]).keep_frames is False

    @pytest.mark.parametrize("args", [[], ["o.mp4", "--size", "320"], ["o.mp4", "--fps", "0"]])
    def test_invalid(self, args):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(args)


class TestMain:
    def test_records_demo(self, fake_run, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("FIGMOVIE_TMPDIR", str(tmp_path / "frames"))
        out = tmp_path / "sin.mp4"
        rc = cli.main([str(out), "--frames", "3", "--fps", "5", "--size", "64x48", "--ffmpeg", "ff"])
        assert rc == 0
        cmd = fake_run.calls[0]["cmd"]
        assert cmd[0] == "ff"
        assert cmd[cmd.index("-r") + 1] == "5"
        assert cmd[cmd.index("-s") + 1] == "64:48"
        assert f"Wrote {out}" in capsys.readouterr().out
        assert not (tmp_path / "frames").exists()

    def test_keep_frames(self, fake_run, tmp_path, monkeypatch):
        monkeypatch.setenv("FIGMOVIE_TMPDIR", str(tmp_path / "frames"))
        rc = cli.main([str(tmp_path / "sin.webm"), "--frames", "2", "--size", "32x32", "--keep-frames"])
        assert rc == 0
        (workspace,) = (tmp_path / "frames").iterdir()
        assert sorted(p.name for p in workspace.iterdir()) == ["1.png", "2.png"]

    def test_library_error_exit_code(self, fake_run, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("FIGMOVIE_TMPDIR", str(tmp_path / "frames"))
        rc = cli.main([str(tmp_path / "sin.avi"), "--frames", "2"])
        assert rc == 1
        assert ".mp4" in capsys.readouterr().err
        assert fake_run.calls == []

    def test_single_frame(self, fake_run, tmp_path, monkeypatch):
        monkeypatch.setenv("FIGMOVIE_TMPDIR", str(tmp_path / "frames"))
        assert cli.main([str(tmp_path / "sin.mp4"), "--frames", "1"]) == 1
        assert fake_run.calls == []


class TestSetupLogging:
    def test_messages_not_duplicated_through_root(self, capsys):
        root = logging.getLogger()
        root_handler = logging.StreamHandler(sys.stderr)
        root.addHandler(root_handler)
        try:
            cli.setup_logging(verbose=False)
            logging.getLogger("figmovie.recorder").info("hello")
        finally:
            root.removeHandler(root_handler)
        assert capsys.readouterr().err.count("hello") == 1

    def test_verbose_level(self):
        cli.setup_logging(verbose=True)
        logger = logging.getLogger("figmovie")
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 1
