# streamprep/services/filesystem/local_file_ops.py
from __future__ import annotations

import os
import shutil
from pathlib import Path

from streamprep.common.logging import get_logger
from streamprep.domain.ports.files import FileOpsPort

logger = get_logger(__name__)

PARTIAL_SUFFIX = ".part"


def _same_device(src: Path, dst_dir: Path) -> bool:
    return os.stat(src).st_dev == os.stat(dst_dir).st_dev


class LocalFileOps(FileOpsPort):
    """
    FileOpsPort on the local disk.

    Renditions are encoded under the temp directory and then published next
    to the input, often on another mount. A published file only ever appears
    under its final name complete: cross-device moves are copied to a
    hidden ".part" sibling first and renamed into place.
    """

    def ensure_dir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def move_file(self, src: Path, dst: Path, *, overwrite: bool = False) -> None:
        src, dst = Path(src), Path(dst)
        if not src.is_file():
            raise FileNotFoundError(f"Source file not found: {src}")
        if dst.exists() and not overwrite:
            raise FileExistsError(f"Destination exists: {dst}")
        self.ensure_dir(dst.parent)

        if _same_device(src, dst.parent):
            os.replace(src, dst)
            return

        staged = dst.with_name(f".{dst.name}{PARTIAL_SUFFIX}")
        logger.debug("Copying %s across devices via %s", src, staged)
        try:
            shutil.copy2(src, staged)
            os.replace(staged, dst)
        except OSError:
            staged.unlink(missing_ok=True)
            raise
        src.unlink()

    def file_exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def remove_file(self, path: Path) -> None:
        logger.debug("Removing %s", path)
        Path(path).unlink()
