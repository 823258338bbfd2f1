# streamprep/domain/policies/keyframes.py
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Tuple

from streamprep.common.logging import get_logger
from streamprep.domain.dataclasses.warnings import PipelineWarning
from streamprep.domain.enums.warning_kind import WarningKind
from streamprep.domain.errors import ConfigError

logger = get_logger(__name__)

TIMECODE_RE = re.compile(r"^\d{2}:\d{2}:\d{2}\.\d{3}$")


def parse_timecode_lines(lines: Iterable[str]) -> Tuple[List[str], List[PipelineWarning]]:
    """
    Keep HH:MM:SS.mmm entries; skip blank and '#' comment lines.
    Anything else is dropped with a warning.
    """
    timecodes: List[str] = []
    warnings: List[PipelineWarning] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line or line.startswith("#"):
            continue
        if TIMECODE_RE.match(line):
            timecodes.append(line)
            continue
        msg = f"Invalid timecode entry: {line}"
        logger.warning(msg)
        warnings.append(PipelineWarning(WarningKind.malformed_timecode, line, msg))
    return timecodes, warnings


def load_timecode_file(path: Path | str) -> Tuple[List[str], List[PipelineWarning]]:
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Timecode file {p} doesn't exist.")
    try:
        # undecodable bytes become U+FFFD and fail the timecode pattern
        with p.open("r", encoding="utf-8", errors="replace") as fh:
            timecodes, warnings = parse_timecode_lines(fh)
    except OSError as exc:
        raise ConfigError(f"can't open {p}: {exc}") from exc
    if timecodes:
        logger.debug("Timecodes: %s", ",".join(timecodes))
    return timecodes, warnings


def force_keyframes_expr(timecodes: Iterable[str] = ()) -> str:
    """Value for -force_key_frames: chapter marks plus any listed timecodes."""
    extra = ",".join(timecodes)
    return f"chapters,{extra}" if extra else "chapters"
