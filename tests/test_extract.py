import pytest

from qrc_ass.ass.extract import extract_lrc, strip_overrides
from qrc_ass.errors import FormatError
from qrc_ass.lrc.export import export_lrc

ASS = [
    "[Events]",
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
    r"Dialogue: 0,0:00:05.00,0:00:06.00,Default,,0,0,0,,{\k100}b",
    r"Dialogue: 0,0:00:05.00,0:00:06.00,trans,x-lang:zh-Hans,0,0,0,,第二行",
    r"Dialogue: 0,0:00:01.00,0:00:02.00,ts,x-lang:zh-Hans,0,0,0,,{\i1}第一行",
    r"Dialogue: 0,0:00:01.00,0:00:02.00,roma,,0,0,0,,{\k50}mo{\k50}no",
    r"Dialogue: 0,0:00:01.00,0:00:02.00,trans,,0,0,0,,no language tag",
    r"Dialogue: 0,0:00:03.00,0:00:04.00,trans,x-lang:en,0,0,0,,{\an8}",
]


def test_extract_groups_by_language():
    found = extract_lrc(ASS)
    assert sorted(found) == ["roma", "zh-hans"]
    assert [(e.t_ms, e.text) for e in found["zh-hans"].events] == [(1000, "第一行"), (5000, "第二行")]
    assert export_lrc(found["roma"]) == "[00:01.00]mono\n"


def test_extract_nothing():
    assert extract_lrc(ASS[:3]) == {}


def test_extract_bad_time():
    with pytest.raises(FormatError):
        extract_lrc([r"Dialogue: 0,1.00,0:00:02.00,roma,,0,0,0,,x"])


def test_strip_overrides():
    assert strip_overrides(r"{\k10}a{\k20}b{\an8}") == "ab"


def test_extract_carries_meta_tags():
    lines = ASS[:2] + [
        "Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,musicName:故事",
        "Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,artists:someone",
    ] + ASS[2:]
    found = extract_lrc(lines)
    assert found["roma"].tags == {"ti": "故事", "ar": "someone"}
    assert export_lrc(found["roma"]) == "[ti:故事]\n[ar:someone]\n[00:01.00]mono\n"
    assert export_lrc(found["roma"], include_tags=False) == "[00:01.00]mono\n"
