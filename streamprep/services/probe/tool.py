# streamprep/services/probe/tool.py
from __future__ import annotations

import json
import shlex
import subprocess
from pathlib import Path
from typing import Any, List

from streamprep.common.logging import get_logger
from streamprep.domain.errors import ProbeError

logger = get_logger(__name__)


def run_probe_tool(cmd: List[str], *, timeout_sec: int, tool: str) -> str:
    """Run a probe command and return its stdout. Raises ProbeError on any failure."""
    logger.debug("%s cmd: %s", tool, " ".join(shlex.quote(p) for p in cmd))
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_sec,
            check=False,  # we handle rc manually to attach stderr
        )
    except subprocess.TimeoutExpired as e:
        raise ProbeError(f"{tool} timed out after {timeout_sec}s") from e
    except OSError as e:
        raise ProbeError(f"Failed to execute {tool}: {e}") from e

    if proc.returncode != 0:
        raise ProbeError(
            f"{tool} returned non-zero exit code {proc.returncode}: {(proc.stderr or '').strip()}"
        )
    return proc.stdout or ""


def load_json(text: str, *, tool: str) -> Any:
    try:
        return json.loads(text or "{}")
    except json.JSONDecodeError as e:
        raise ProbeError(f"{tool} produced invalid JSON") from e


def require_file(path: Path | str, *, tool: str) -> Path:
    if not path:
        raise ProbeError(f"No path provided to {tool}.")
    p = Path(path)
    if not p.is_file():
        raise ProbeError(f"File not found: {p}")
    return p
