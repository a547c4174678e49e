from qrc_ass.ass.export import EVENTS_FORMAT, export_ass, export_dialogue
from qrc_ass.config import AssStyle
from qrc_ass.lrc.export import export_lrc
from qrc_ass.lrc.model import LrcDocument, LyricEvent
from qrc_ass.model import Document, Line, Syllable
from qrc_ass.qrc.export import export_qrc, export_qrc_line


def _line(*syllables, span=None):
    return Line(syllables=tuple(Syllable(*s) for s in syllables), span=span)


def test_export_qrc_line_header_from_span():
    line = _line(("Re ", 1000, 500), ("", 1500, 0), ("mem", 1500, 1000), span=(1000, 3000))
    assert export_qrc_line(line) == "[1000,2000]Re (1000,500)(1500,0)mem(1500,1000)"


def test_export_qrc_line_derived_header_without_span():
    line = _line(("Re ", 1000, 500), ("mem", 1500, 1000))
    assert export_qrc_line(line) == "[1000,1500]Re (1000,500)mem(1500,1000)"


def test_export_qrc_tags_first():
    doc = Document(lines=(_line(("a", 0, 10)),), tags={"ti": "t", "ar": "a"})
    assert export_qrc(doc) == ["[ti:t]", "[ar:a]", "[0,10]a(0,10)"]
    assert export_qrc(doc, include_tags=False) == ["[0,10]a(0,10)"]


def test_export_dialogue_defaults():
    line = _line(("故", 29260, 390), ("事", 29650, 390), span=(29260, 30040))
    assert export_dialogue(line) == r"Dialogue: 0,0:00:29.26,0:00:30.04,Default,,0,0,0,,{\k39}故{\k39}事"


def test_export_dialogue_without_span_rounds_durations():
    line = _line(("a", 1004, 448))
    assert export_dialogue(line) == r"Dialogue: 0,0:00:01.00,0:00:01.45,Default,,0,0,0,,{\k45}a"


def test_export_dialogue_custom_style():
    style = AssStyle(layer=1, style="Karaoke", name="v1", margin_l=10, margin_r=10, margin_v=60)
    line = _line(("a", 0, 100))
    assert export_dialogue(line, style) == r"Dialogue: 1,0:00:00.00,0:00:00.10,Karaoke,v1,10,10,60,,{\k10}a"


def test_export_ass_header_and_meta():
    doc = Document(lines=(_line(("a", 0, 100)),), tags={"ti": "故事", "offset": "0"})
    out = export_ass(doc)
    assert out == [
        "[Events]",
        EVENTS_FORMAT,
        "Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,musicName:故事",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\k10}a",
    ]


def test_export_ass_full_header():
    out = export_ass(Document(lines=(_line(("a", 0, 100)),)), AssStyle(style="Karaoke"), full_header=True)
    assert out[0] == "[Script Info]"
    assert any(s.startswith("Style: Karaoke,") for s in out)
    assert out.index("[Events]") < out.index(EVENTS_FORMAT)


def test_export_lrc_basic():
    doc = LrcDocument(events=(LyricEvent(1000, "hello"), LyricEvent(61_234, "world")), tags={"ti": "t"})
    assert export_lrc(doc) == "[ti:t]\n[00:01.00]hello\n[01:01.23]world\n"
    assert export_lrc(LrcDocument(events=())) == ""
