from pathlib import Path

import pytest
from pydantic import ValidationError

from streamprep.common.settings import PACKAGE_DIR, Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("STREAMPREP_PROFILES_PATH", raising=False)
    monkeypatch.delenv("STREAMPREP_FMS_ENABLED", raising=False)
    cfg = Settings(_env_file=None)

    assert cfg.profiles_path == ["profiles-movie-scenes.xml"]
    assert cfg.conf_dir == PACKAGE_DIR / "conf"
    assert cfg.profile_files == [PACKAGE_DIR / "conf" / "profiles-movie-scenes.xml"]
    assert cfg.profile_files[0].is_absolute()
    assert cfg.name_suffix == "s"
    assert cfg.fms_enabled is False
    assert cfg.template_file.name == "fms.html.in"
    assert set(cfg.tool_paths()) == {"ffmpeg", "flvcheck", "mediainfo", "ffprobe", "exiftool", "tmpdir"}


def test_settings_env_csv_profiles(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAMPREP_CONF_DIR", str(tmp_path))
    monkeypatch.setenv("STREAMPREP_PROFILES_PATH", "a.xml, /abs/b.xml ,,")
    monkeypatch.setenv("STREAMPREP_FMS_ENABLED", "yes")

    cfg = get_settings()
    assert cfg.profiles_path == ["a.xml", "/abs/b.xml"]
    # relative entries resolve against conf_dir, absolute ones are kept
    assert cfg.profile_files == [tmp_path / "a.xml", Path("/abs/b.xml")]
    assert cfg.fms_enabled is True
    # cached accessor
    assert get_settings() is cfg


def test_settings_are_frozen_but_copyable():
    cfg = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        cfg.name_suffix = "x"

    other = cfg.model_copy(update={"profiles_path": ["other.xml"]})
    assert other.profile_files[-1].name == "other.xml"
    assert cfg.profiles_path != other.profiles_path
