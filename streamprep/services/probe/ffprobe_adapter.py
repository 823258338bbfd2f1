# streamprep/services/probe/ffprobe_adapter.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from streamprep.common.logging import get_logger
from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.enums.probe_source import ProbeSource
from streamprep.domain.errors import ProbeError
from streamprep.domain.ports.probe import MediaProbePort
from streamprep.services.probe.tool import load_json, require_file, run_probe_tool

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort):
    """
    Stream-level probe using `ffprobe -show_streams`.
    Fields: video_index, width, height, pixel_format, sample_aspect_ratio,
    display_aspect_ratio (first video stream) and audio_index (first audio stream).
    """
    source = ProbeSource.stream

    def __init__(self, ffprobe_bin: Path | str = "ffprobe", timeout_sec: int = 120):
        self.ffprobe_bin = str(ffprobe_bin)
        self.timeout_sec = int(timeout_sec)

    # ---- Port API -------------------------------------------------------------
    def build_cmd(self, path: Path | str) -> list[str]:
        return [
            self.ffprobe_bin,
            "-v", "quiet",
            "-print_format", "json",
            "-show_streams",
            str(path),
        ]

    def probe(self, path: Path) -> ProbeResult:
        src = require_file(path, tool="ffprobe")
        out = run_probe_tool(self.build_cmd(src), timeout_sec=self.timeout_sec, tool="ffprobe")
        return self.parse(load_json(out, tool="ffprobe"))

    # ---- Parsing helpers ------------------------------------------------------
    @staticmethod
    def parse(data: Dict[str, Any]) -> ProbeResult:
        if not isinstance(data, dict):
            raise ProbeError("ffprobe output is not a JSON object")
        streams = list(data.get("streams") or [])

        vstream: Optional[dict] = next((s for s in streams if s.get("codec_type") == "video"), None)
        astream: Optional[dict] = next((s for s in streams if s.get("codec_type") == "audio"), None)

        fields: Dict[str, Any] = {}
        if vstream is not None:
            fields.update(
                video_index=vstream.get("index"),
                width=vstream.get("width"),
                height=vstream.get("height"),
                pixel_format=vstream.get("pix_fmt"),
                sample_aspect_ratio=vstream.get("sample_aspect_ratio"),
                display_aspect_ratio=vstream.get("display_aspect_ratio"),
            )
        else:
            logger.warning("ffprobe found no video stream")
        if astream is not None:
            fields["audio_index"] = astream.get("index")

        return ProbeResult(source=ProbeSource.stream, fields=fields)
