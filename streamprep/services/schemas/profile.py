# services/schemas/profile.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from streamprep.common.numeric.bitrates import bitrate_magnitude
from streamprep.domain.entities.profile import EncodingProfile, parse_target_dimensions

_FALSEY = {"", "0", "false", "no", "n", "off"}


class EncodingProfileSchema(BaseModel):
    """One <profile> element of a profile definition file."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    enabled: bool = Field(False, examples=[True])
    device: str = Field("", examples=["Mobile-HLS", "desktop", ""])
    dimensions: str = Field(..., examples=["640xauto", "1280x720"])
    vbitrate: str = Field(..., examples=["1000k"])
    vbufsize: Optional[str] = Field(None, examples=["2000k"])
    abitrate: str = Field(..., examples=["128k"])

    @field_validator("enabled", mode="before")
    @classmethod
    def _boolify(cls, v):
        if isinstance(v, bool):
            return v
        return str(v if v is not None else "").strip().lower() not in _FALSEY

    @field_validator("device", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return v or ""

    @field_validator("vbufsize", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None or not str(v).strip():
            return None
        return v

    @field_validator("dimensions")
    @classmethod
    def _check_dimensions(cls, v: str) -> str:
        parse_target_dimensions(v)
        return v

    @field_validator("vbitrate", "abitrate", "vbufsize")
    @classmethod
    def _check_bitrate(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            bitrate_magnitude(v)
        return v

    def to_entity(self) -> EncodingProfile:
        return EncodingProfile(
            enabled=self.enabled,
            device=self.device,
            dimensions=self.dimensions,
            vbitrate=self.vbitrate,
            vbufsize=self.vbufsize,
            abitrate=self.abitrate,
        )
