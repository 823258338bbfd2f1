# tests/services/test_local_file_ops.py
import pytest

from streamprep.services.filesystem import local_file_ops
from streamprep.services.filesystem.local_file_ops import LocalFileOps


def _encoded(tmp_path, data=b"new"):
    src = tmp_path / "tmp" / "clip.mp4"
    src.parent.mkdir(parents=True, exist_ok=True)
    src.write_bytes(data)
    return src


def test_move_creates_parent_and_respects_overwrite(tmp_path):
    ops = LocalFileOps()
    src = _encoded(tmp_path)
    dst = tmp_path / "out" / "clip_1128k.mp4"

    ops.move_file(src, dst)
    assert dst.read_bytes() == b"new"
    assert not ops.file_exists(src)

    src = _encoded(tmp_path, b"newer")
    with pytest.raises(FileExistsError):
        ops.move_file(src, dst)
    assert dst.read_bytes() == b"new"
    ops.move_file(src, dst, overwrite=True)
    assert dst.read_bytes() == b"newer"


def test_move_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalFileOps().move_file(tmp_path / "nope.mp4", tmp_path / "out.mp4")


def test_cross_device_move_stages_then_renames(tmp_path, monkeypatch):
    monkeypatch.setattr(local_file_ops, "_same_device", lambda src, dst_dir: False)
    src = _encoded(tmp_path)
    dst = tmp_path / "out" / "clip_1128k.mp4"
    dst.parent.mkdir()
    dst.write_bytes(b"old")

    LocalFileOps().move_file(src, dst, overwrite=True)

    assert dst.read_bytes() == b"new"
    assert not src.exists()
    assert sorted(p.name for p in dst.parent.iterdir()) == ["clip_1128k.mp4"]


def test_failed_cross_device_copy_keeps_destination(tmp_path, monkeypatch):
    monkeypatch.setattr(local_file_ops, "_same_device", lambda src, dst_dir: False)

    def short_copy(src, dst):
        dst.write_bytes(b"ne")
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(local_file_ops.shutil, "copy2", short_copy)
    src = _encoded(tmp_path)
    dst = tmp_path / "out" / "clip_1128k.mp4"
    dst.parent.mkdir()
    dst.write_bytes(b"old")

    with pytest.raises(OSError, match="No space"):
        LocalFileOps().move_file(src, dst, overwrite=True)

    assert dst.read_bytes() == b"old"
    assert src.exists()
    assert sorted(p.name for p in dst.parent.iterdir()) == ["clip_1128k.mp4"]


def test_file_exists_and_remove(tmp_path):
    ops = LocalFileOps()
    f = tmp_path / "a.mp4"
    assert not ops.file_exists(f)
    assert not ops.file_exists(tmp_path)
    f.write_bytes(b"x")
    assert ops.file_exists(f)
    ops.remove_file(f)
    assert not f.exists()
    with pytest.raises(FileNotFoundError):
        ops.remove_file(f)
