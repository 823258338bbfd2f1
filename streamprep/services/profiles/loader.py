# streamprep/services/profiles/loader.py
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from streamprep.common.logging import get_logger
from streamprep.domain.entities.profile import EncodingProfile
from streamprep.domain.errors import ProfileError
from streamprep.services.schemas.profile import EncodingProfileSchema

logger = get_logger(__name__)

PROFILE_FIELDS = ("enabled", "device", "dimensions", "vbitrate", "vbufsize", "abitrate")


def parse_profiles_xml(text: str | bytes, *, origin: str = "<string>") -> List[EncodingProfile]:
    """
    Parse a profile definition document:

        <profiles>
          <profile>
            <enabled>1</enabled>
            <device>Mobile-HLS</device>
            <dimensions>640xauto</dimensions>
            <vbitrate>500k</vbitrate>
            <abitrate>64k</abitrate>
          </profile>
        </profiles>

    Profiles come back in document order, disabled ones included.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ProfileError(f"Unparsable profile definitions in {origin}: {e}") from e
    if root.tag != "profiles":
        raise ProfileError(f"Expected <profiles> root element in {origin}, found <{root.tag}>")

    out: List[EncodingProfile] = []
    for pos, node in enumerate(root.findall("profile"), start=1):
        raw = {}
        for name in PROFILE_FIELDS:
            child = node.find(name)
            if child is not None:
                raw[name] = (child.text or "").strip()
        try:
            out.append(EncodingProfileSchema(**raw).to_entity())
        except (ValidationError, ValueError) as e:
            raise ProfileError(f"Invalid profile #{pos} in {origin}: {e}") from e
    return out


def load_profile_file(path: Path | str) -> List[EncodingProfile]:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise ProfileError(f"Can't read profile definitions {p}: {e}") from e
    profiles = parse_profiles_xml(data, origin=str(p))
    logger.debug("Loaded %d profile(s) from %s", len(profiles), p)
    return profiles


def load_profiles(paths: Iterable[Path | str]) -> List[EncodingProfile]:
    """Concatenate profiles from every file, preserving declaration order."""
    out: List[EncodingProfile] = []
    for p in paths:
        out.extend(load_profile_file(p))
    return out
