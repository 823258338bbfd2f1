# tests/services/test_fms_page.py
from __future__ import annotations

from pathlib import Path

from streamprep.common.settings import Settings
from streamprep.domain.entities.geometry import Geometry
from streamprep.services.filesystem.local_file_ops import LocalFileOps
from streamprep.services.publish.fms_page import FmsPublisher, player_width, render_template


class FakeRunner:
    def __init__(self, agent: bool = False):
        self.agent = agent
        self.calls = []

    def run(self, cmd, *, env=None, ok_codes=(0,)):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        if cmd[0] == "pgrep":
            return "4242\n" if self.agent else ""
        if cmd[0].endswith("mediainfo"):
            return "Format : MPEG-4 <Base Media>\n"
        return ""


def _geometry() -> Geometry:
    return Geometry(
        real_width=720, real_height=480, source_width=704, source_height=480,
        pixel_aspect_ratio=10 / 11, square_width=640, square_height=480,
    )


def _settings(tmp_path: Path, **kw) -> Settings:
    return Settings(
        _env_file=None,
        fms_url="rtmp://media.example/vod/",
        fms_html_dir="host:/var/www",
        fms_content_dir="host:/srv/media",
        **kw,
    )


def _touch(p: Path) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(b"mp4")
    return p


def test_player_width_keeps_display_aspect():
    assert player_width(_geometry(), 480) == 640
    assert player_width(_geometry(), 240) == 320


def test_render_template_replaces_every_marker():
    out = render_template("<!-- A -->/<!-- B -->/<!-- A -->", {"A": "1", "B": "2"})
    assert out == "1/2/1"


def test_publish_writes_page_without_agent(tmp_path):
    out = _touch(tmp_path / "out" / "clip_1128k_s.mp4")
    work = tmp_path / "work"
    work.mkdir()
    runner = FakeRunner(agent=False)

    pub = FmsPublisher(_settings(tmp_path), runner, LocalFileOps())
    assert pub.publish([out], _geometry(), work) == 1

    page = out.with_suffix(".html").read_text(encoding="utf-8")
    assert 'url: "mp4:clip_1128k_s.mp4"' in page
    assert "rtmp://media.example/vod/" in page
    assert "width:640px;height:480px" in page
    assert "MPEG-4 &lt;Base Media&gt;" in page
    assert not any(c[0] == "scp" for c in runner.calls)


def test_publish_copies_with_agent_and_keeps_existing_page(tmp_path):
    out = _touch(tmp_path / "out" / "clip_1128k_s.mp4")
    html_file = out.with_suffix(".html")
    html_file.write_text("old", encoding="utf-8")
    work = tmp_path / "work"
    work.mkdir()
    runner = FakeRunner(agent=True)

    pub = FmsPublisher(_settings(tmp_path), runner, LocalFileOps())
    assert pub.publish([out], _geometry(), work) == 0
    assert html_file.read_text(encoding="utf-8") == "old"
    assert ["scp", str(html_file), "host:/var/www"] in runner.calls
    assert ["scp", str(out), "host:/srv/media"] in runner.calls


def test_publish_force_rewrites_page(tmp_path):
    out = _touch(tmp_path / "out" / "clip_564k_Mobile-HLS_s.mp4")
    out.with_suffix(".html").write_text("old", encoding="utf-8")
    work = tmp_path / "work"
    work.mkdir()

    pub = FmsPublisher(_settings(tmp_path), FakeRunner(), LocalFileOps(), force=True)
    assert pub.publish([out], _geometry(), work) == 1
    assert "clip_564k_Mobile-HLS_s.mp4" in out.with_suffix(".html").read_text(encoding="utf-8")


def test_custom_template(tmp_path):
    tpl = tmp_path / "page.in"
    tpl.write_text("<!-- MP4_FILE --> <!-- WIDTH -->x<!-- HEIGHT -->", encoding="utf-8")
    out = _touch(tmp_path / "out" / "clip_1128k_s.mp4")
    work = tmp_path / "work"
    work.mkdir()

    pub = FmsPublisher(_settings(tmp_path, fms_template=tpl, flowplayer_height=240), FakeRunner(), LocalFileOps())
    pub.publish([out], _geometry(), work)
    assert out.with_suffix(".html").read_text(encoding="utf-8") == "clip_1128k_s.mp4 320x240"
