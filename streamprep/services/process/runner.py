# streamprep/services/process/runner.py
from __future__ import annotations

import os
import shlex
import subprocess
import time
from typing import Collection, Mapping, Optional, Sequence

from streamprep.common.logging import get_logger
from streamprep.domain.errors import CommandError
from streamprep.domain.ports.process import CommandRunnerPort

logger = get_logger(__name__)


class SubprocessRunner(CommandRunnerPort):
    """
    Runs external programs with stdout and stderr combined.
    Safe for the sequential encode loop; no shell is involved.
    """

    def __init__(self, base_env: Optional[Mapping[str, str]] = None) -> None:
        self.base_env = dict(base_env) if base_env is not None else None

    def run(
        self,
        cmd: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        ok_codes: Collection[int] = (0,),
    ) -> str:
        cmd = [str(c) for c in cmd]
        cmd_str = " ".join(shlex.quote(c) for c in cmd)
        logger.debug("running command '%s'", cmd_str)

        full_env = None
        if self.base_env is not None or env:
            full_env = dict(os.environ)
            full_env.update(self.base_env or {})
            full_env.update(env or {})

        start = time.monotonic()
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                env=full_env,
                check=False,
            )
        except OSError as e:
            raise CommandError(f"Failed to execute '{cmd_str}': {e}", cmd=cmd) from e
        elapsed = time.monotonic() - start

        # progress meters use carriage returns
        output = (proc.stdout or "").replace("\r", "\n")
        logger.debug("output: %s", output)
        logger.debug("run time: %.1fs", elapsed)

        if proc.returncode not in ok_codes:
            raise CommandError(
                f"Command '{cmd_str}' failed", cmd=cmd, output=output, rc=proc.returncode
            )
        return output
