# streamprep/services/probe/exiftool_adapter.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from streamprep.common.logging import get_logger
from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.enums.probe_source import ProbeSource
from streamprep.domain.errors import ProbeError
from streamprep.domain.ports.probe import MediaProbePort
from streamprep.services.probe.tool import require_file, run_probe_tool

logger = get_logger(__name__)


class ExifToolAdapter(MediaProbePort):
    """
    Tag-level probe using `exiftool -j -G1 -a`. Per-track QuickTime tags come
    back as "Track<N>:<Tag>" keys.

    Tag metadata is frequently absent or malformed, so this adapter never
    raises from probe(): failures are logged and an empty result is returned.
    """
    source = ProbeSource.tag

    def __init__(
        self,
        exiftool_bin: Path | str = "exiftool",
        config_file: Optional[Path | str] = None,
        timeout_sec: int = 120,
    ):
        self.exiftool_bin = str(exiftool_bin)
        self.config_file = str(config_file) if config_file else None
        self.timeout_sec = int(timeout_sec)

    def build_cmd(self, path: Path | str) -> list[str]:
        cmd = [self.exiftool_bin]
        if self.config_file:
            cmd += ["-config", self.config_file]
        cmd += ["-j", "-G1", "-a", str(path)]
        return cmd

    def probe(self, path: Path) -> ProbeResult:
        try:
            src = require_file(path, tool="exiftool")
            out = run_probe_tool(self.build_cmd(src), timeout_sec=self.timeout_sec, tool="exiftool")
        except ProbeError as e:
            logger.warning("exiftool probe failed, continuing without tag data: %s", e)
            return ProbeResult(source=ProbeSource.tag)
        return self.parse_text(out)

    @classmethod
    def parse_text(cls, text: str) -> ProbeResult:
        try:
            data = json.loads(text or "[]")
        except json.JSONDecodeError:
            logger.warning("exiftool produced invalid JSON; ignoring tag data")
            return ProbeResult(source=ProbeSource.tag)
        return cls.parse(data)

    @staticmethod
    def parse(data: Any) -> ProbeResult:
        # exiftool -j always emits a list with one object per input file
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            logger.warning("Unexpected exiftool output shape %s; ignoring tag data", type(data).__name__)
            return ProbeResult(source=ProbeSource.tag)
        fields = {str(k): v for k, v in data.items() if not isinstance(v, (dict, list))}
        return ProbeResult(source=ProbeSource.tag, fields=fields)
