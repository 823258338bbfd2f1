# streamprep/services/probe/mediainfo_adapter.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from streamprep.common.logging import get_logger
from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.enums.probe_source import ProbeSource
from streamprep.domain.errors import ProbeError
from streamprep.domain.ports.probe import MediaProbePort
from streamprep.services.probe.tool import load_json, require_file, run_probe_tool

logger = get_logger(__name__)

# mediainfo (raw language) field name -> logical field name
FIELD_MAP: Dict[str, str] = {
    "ID": "track_id",
    "Width": "width",
    "Height": "height",
    "Width_CleanAperture": "clean_aperture_width",
    "Height_CleanAperture": "clean_aperture_height",
    "ScanType": "scan_type",
    "ChromaSubsampling": "chroma_subsampling",
    "PixelAspectRatio": "pixel_aspect_ratio",
}


class MediaInfoAdapter(MediaProbePort):
    """Container-level probe using `mediainfo -f --Language=raw --Output=JSON`."""
    source = ProbeSource.container

    def __init__(self, mediainfo_bin: Path | str = "mediainfo", timeout_sec: int = 120):
        self.mediainfo_bin = str(mediainfo_bin)
        self.timeout_sec = int(timeout_sec)

    def build_cmd(self, path: Path | str) -> list[str]:
        return [self.mediainfo_bin, "-f", "--Language=raw", "--Output=JSON", str(path)]

    def probe(self, path: Path) -> ProbeResult:
        src = require_file(path, tool="mediainfo")
        out = run_probe_tool(self.build_cmd(src), timeout_sec=self.timeout_sec, tool="mediainfo")
        return self.parse(load_json(out, tool="mediainfo"))

    @staticmethod
    def parse(data: Dict[str, Any]) -> ProbeResult:
        if not isinstance(data, dict):
            raise ProbeError("mediainfo output is not a JSON object")
        media = data.get("media") or {}
        tracks: List[dict] = list(media.get("track") or []) if isinstance(media, dict) else []

        video: Optional[dict] = next((t for t in tracks if t.get("@type") == "Video"), None)
        if video is None:
            logger.warning("mediainfo found no Video track")
            return ProbeResult(source=ProbeSource.container)

        fields = {logical: _scalar(video.get(raw)) for raw, logical in FIELD_MAP.items()}
        return ProbeResult(source=ProbeSource.container, fields=fields)


def _scalar(value: Any) -> Any:
    # full (-f) output may repeat a field; the first entry is the raw value
    if isinstance(value, list):
        return value[0] if value else None
    return value
