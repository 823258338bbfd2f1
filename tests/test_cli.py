# tests/test_cli.py
from __future__ import annotations

import json
from pathlib import Path

import pytest
from PIL import Image

import streamprep.cli as cli
from streamprep.common.settings import Settings
from streamprep.domain.dataclasses.reports import ConversionReport
from streamprep.domain.enums.watermark_position import WatermarkPosition
from streamprep.domain.errors import ConfigError, GeometryError


class FakeService:
    """Stands in for ConversionService; `outcome` is a report or an exception."""
    outcome = None
    seen = {}

    def __init__(self, settings, **kwargs):
        type(self).seen["settings"] = settings

    def run(self, options):
        type(self).seen["options"] = options
        if isinstance(type(self).outcome, Exception):
            raise type(self).outcome
        return type(self).outcome


@pytest.fixture
def fake_service(monkeypatch):
    FakeService.outcome = None
    FakeService.seen = {}
    monkeypatch.setattr(cli, "ConversionService", FakeService)
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None))
    return FakeService


def _report(**kw) -> ConversionReport:
    rpt = ConversionReport(**kw)
    rpt.start()
    rpt.stop()
    return rpt


def test_parse_args_flags():
    args = cli.parse_args(
        ["in.mov", "out/scene", "-f", "-t", "-q", "-n", "-a", "0.5", "-k", "keys.txt", "-p", "a.xml", "-p", "b.xml"]
    )
    assert args.input_file == Path("in.mov")
    assert args.output_prefix == Path("out/scene")
    assert args.force and args.test and args.quiet and args.dry_run
    assert args.adelay == 0.5
    assert args.keyframe_file == Path("keys.txt")
    assert args.profiles_path == ["a.xml", "b.xml"]
    assert args.json_report is False


def test_parse_args_defaults():
    args = cli.parse_args(["in.mov"])
    assert args.output_prefix is None
    assert args.adelay == 0.0
    assert args.watermark is None
    assert args.profiles_path is None


def test_main_success_prints_outputs(fake_service, capsys):
    fake_service.outcome = _report(outputs=[Path("/out/clip_1128k_s.mp4")])
    assert cli.main(["in.mov"]) == 0
    assert capsys.readouterr().out.strip() == "/out/clip_1128k_s.mp4"
    opts = fake_service.seen["options"]
    assert opts.input_file == Path("in.mov")
    assert opts.watermark is None


def test_main_profiles_override_settings(fake_service):
    fake_service.outcome = _report()
    cli.main(["in.mov", "-p", "/abs/custom.xml"])
    assert fake_service.seen["settings"].profile_files == [Path("/abs/custom.xml")]


def test_main_dry_run_prints_commands(fake_service, capsys):
    fake_service.outcome = _report(commands=[["ffmpeg", "-i", "in clip.mov", "out.mp4"]])
    assert cli.main(["in clip.mov", "-n"]) == 0
    assert "ffmpeg -i 'in clip.mov' out.mp4" in capsys.readouterr().out


def test_main_json_report(fake_service, capsys):
    fake_service.outcome = _report(planned=2, encoded=2)
    assert cli.main(["in.mov", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["planned"] == 2
    assert data["errors"] == []


def test_main_rendition_errors_exit_nonzero(fake_service):
    rpt = _report()
    rpt.add_error("/out/clip_1128k_s.mp4", "Command failed (status: 1)")
    fake_service.outcome = rpt
    assert cli.main(["in.mov"]) == 1


@pytest.mark.parametrize("exc", [GeometryError("crop mismatch"), ConfigError("Path ffmpeg:/x doesn't exist")])
def test_main_fatal_errors_exit_nonzero(fake_service, exc):
    fake_service.outcome = exc
    assert cli.main(["in.mov"]) == 1


def test_main_watermark_is_validated_up_front(fake_service, tmp_path):
    fake_service.outcome = _report()
    assert cli.main(["in.mov", "-w", str(tmp_path / "missing.png")]) == 1
    assert "options" not in fake_service.seen

    logo = tmp_path / "logo.png"
    Image.new("RGB", (100, 20)).save(logo, format="PNG")
    assert cli.main(["in.mov", "-w", f"{logo}:C:20"]) == 0
    wm = fake_service.seen["options"].watermark
    assert wm.position is WatermarkPosition.C
    assert wm.width_percent == 20.0
