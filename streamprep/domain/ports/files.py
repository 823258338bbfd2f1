from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileOpsPort(Protocol):
    def ensure_dir(self, path: Path) -> None: ...
    def move_file(self, src: Path, dst: Path, *, overwrite: bool = False) -> None: ...
    def file_exists(self, path: Path) -> bool: ...
    def remove_file(self, path: Path) -> None: ...
