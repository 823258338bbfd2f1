# streamprep/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Dict, List, Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from streamprep.common.strings.splitters import csv_to_list

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class Settings(BaseSettings):
    # -------- App / logging --------
    app_name: str = "streamprep"
    log_level: str = "INFO"

    # -------- External tools --------
    path_ffmpeg: Path = Path("/usr/bin/ffmpeg")
    # checks whether the file is streamable by the media server
    path_flvcheck: Path = Path("/usr/bin/flvcheck")
    path_mediainfo: Path = Path("/usr/bin/mediainfo")
    path_ffprobe: Path = Path("/usr/bin/ffprobe")
    # reads clean aperture quicktime track settings
    path_exiftool: Path = Path("/usr/bin/exiftool")

    # directory for intermediate files
    path_tmpdir: Path = Path("/tmp")

    probe_timeout_sec: int = Field(120, ge=1, description="Timeout for each probe tool")
    exiftool_config: Optional[Path] = Field(
        default=None, description="exiftool -config file (enables large file support)"
    )

    # -------- Encoding --------
    # relative profiles_path entries resolve here
    conf_dir: Path = PACKAGE_DIR / "conf"
    preset_dir: Optional[Path] = Field(default=None, description="FFMPEG_DATADIR for -vpre presets")
    video_preset: str = "default"
    profiles_path: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["profiles-movie-scenes.xml"]
    )
    # appended to output file names
    name_suffix: str = "s"

    # -------- Media server publishing --------
    fms_enabled: bool = False
    fms_url: str = "rtmp://localhost/vod/media/"
    fms_content_dir: str = "/opt/adobe/ams/applications/vod/media"
    fms_html_dir: str = "/opt/adobe/ams/webroot"
    fms_template: Optional[Path] = None
    flowplayer_height: int = Field(480, ge=2)

    model_config = SettingsConfigDict(
        env_prefix="STREAMPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("profiles_path", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)

    @field_validator("fms_enabled", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)

    # ===== Derived paths =====
    @computed_field  # type: ignore[misc]
    @property
    def profile_files(self) -> List[Path]:
        out: List[Path] = []
        for entry in self.profiles_path:
            p = Path(entry)
            out.append(p if p.is_absolute() else self.conf_dir / p)
        return out

    @computed_field  # type: ignore[misc]
    @property
    def template_file(self) -> Path:
        if self.fms_template:
            return Path(self.fms_template)
        return PACKAGE_DIR / "templates" / "fms.html.in"

    def tool_paths(self) -> Dict[str, Path]:
        """Every external program the run depends on, keyed by tool name."""
        return {
            "ffmpeg": self.path_ffmpeg,
            "flvcheck": self.path_flvcheck,
            "mediainfo": self.path_mediainfo,
            "ffprobe": self.path_ffprobe,
            "exiftool": self.path_exiftool,
            "tmpdir": self.path_tmpdir,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Only the CLI should call this; the
    pipeline receives the Settings object explicitly:
        from streamprep.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings reads STREAMPREP_* and .env
