# tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, Optional

import pytest

from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.enums.probe_source import ProbeSource


def make_container(**overrides: Any) -> ProbeResult:
    fields: Dict[str, Any] = {
        "track_id": "1",
        "width": "1920",
        "height": "1080",
        "scan_type": "Progressive",
        "chroma_subsampling": "4:2:0",
        "pixel_aspect_ratio": "1.000",
    }
    fields.update(overrides)
    return ProbeResult(source=ProbeSource.container, fields=fields)


def make_stream(**overrides: Any) -> ProbeResult:
    fields: Dict[str, Any] = {
        "video_index": 0,
        "audio_index": 1,
        "width": 1920,
        "height": 1080,
        "pixel_format": "yuv420p",
        "sample_aspect_ratio": "1:1",
        "display_aspect_ratio": "16:9",
    }
    fields.update(overrides)
    return ProbeResult(source=ProbeSource.stream, fields=fields)


def make_tags(track_id: Optional[int] = None, **track_fields: Any) -> ProbeResult:
    fields: Dict[str, Any] = {"SourceFile": "clip.mov"}
    if track_id is not None:
        fields[f"Track{track_id}:TrackID"] = track_id
        for name, value in track_fields.items():
            fields[f"Track{track_id}:{name}"] = value
    return ProbeResult(source=ProbeSource.tag, fields=fields)


@pytest.fixture
def container_probe():
    return make_container


@pytest.fixture
def stream_probe():
    return make_stream


@pytest.fixture
def tag_probe():
    return make_tags
