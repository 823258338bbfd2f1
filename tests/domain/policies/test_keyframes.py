import pytest

from streamprep.domain.enums.warning_kind import WarningKind
from streamprep.domain.errors import ConfigError
from streamprep.domain.policies.keyframes import (
    force_keyframes_expr,
    load_timecode_file,
    parse_timecode_lines,
)


def test_parse_timecode_lines_skips_comments_and_flags_garbage():
    lines = ["00:00:10.000\n", "\n", "# chapter marks\n", "10:00\n", "01:02:03.456\r\n"]
    timecodes, warnings = parse_timecode_lines(lines)

    assert timecodes == ["00:00:10.000", "01:02:03.456"]
    assert len(warnings) == 1
    assert warnings[0].kind is WarningKind.malformed_timecode
    assert warnings[0].subject == "10:00"


def test_load_timecode_file(tmp_path):
    p = tmp_path / "keys.txt"
    p.write_text("00:00:05.000\nnope\n", encoding="utf-8")
    timecodes, warnings = load_timecode_file(p)
    assert timecodes == ["00:00:05.000"]
    assert [w.subject for w in warnings] == ["nope"]


def test_load_timecode_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="doesn't exist"):
        load_timecode_file(tmp_path / "missing.txt")


def test_force_keyframes_expr():
    assert force_keyframes_expr() == "chapters"
    assert force_keyframes_expr(["00:00:05.000"]) == "chapters,00:00:05.000"


def test_load_timecode_file_tolerates_undecodable_bytes(tmp_path):
    p = tmp_path / "keys.txt"
    p.write_bytes(b"# caf\xe9 chapter list\n00:00:01.000\n\xff\xfe00:00:02.000\n")
    timecodes, warnings = load_timecode_file(p)

    assert timecodes == ["00:00:01.000"]
    assert len(warnings) == 1
    assert warnings[0].kind is WarningKind.malformed_timecode
