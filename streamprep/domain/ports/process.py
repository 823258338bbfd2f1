from __future__ import annotations

from typing import Collection, Mapping, Optional, Protocol, Sequence


class CommandRunnerPort(Protocol):
    def run(
        self,
        cmd: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        ok_codes: Collection[int] = (0,),
    ) -> str: ...
