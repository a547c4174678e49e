import pytest

from qrc_ass.ass.parse import has_special_names, parse_ass, parse_dialogue, split_event
from qrc_ass.errors import DURATION_MISMATCH, FormatError


def test_parse_dialogue_accumulates_starts():
    line, warnings = parse_dialogue(
        r"Dialogue: 0,0:00:29.26,0:00:30.49,Default,,0,0,0,,{\k39}故{\k39}事{\k45}的", line_no=12
    )
    assert [s.text for s in line.syllables] == ["故", "事", "的"]
    assert [s.start_ms for s in line.syllables] == [29260, 29650, 30040]
    assert [s.duration_ms for s in line.syllables] == [390, 390, 450]
    assert line.span == (29260, 30490)
    assert line.style == "Default"
    assert line.line_no == 12
    assert warnings == []


def test_zero_width_syllable_and_trailing_space():
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:01.00,0:00:02.50,Default,,0,0,0,,{\k50}Re {\k0}{\k100}mem")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("Re ", 500), ("", 0), ("mem", 1000)]
    assert line.text == "Re mem"


def test_kf_and_other_overrides():
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.30,Default,,0,0,0,,{\an8}{\kf10}a{\i1}b{\K20}c")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("ab", 100), ("c", 200)]


def test_karaoke_tag_inside_combined_block():
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.30,Default,,0,0,0,,{\k10\i1}a{\k20}b")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("a", 100), ("b", 200)]

    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\1c&HFFFFFF&\k10}a")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("a", 100)]

    # not the first block of the line either
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.30,Default,,0,0,0,,{\k10}a{\i1\kf20}b")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("a", 100), ("b", 200)]


def test_kt_is_not_a_duration():
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\kt50\k10}a")
    assert [(s.text, s.duration_ms) for s in line.syllables] == [("a", 100)]


def test_text_field_may_contain_commas():
    line, _ = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:00.20,Default,,0,0,0,,{\k10}a, {\k10}b")
    assert line.text == "a, b"


def test_duration_mismatch_is_a_warning():
    _, warnings = parse_dialogue(r"Dialogue: 0,0:00:00.00,0:00:05.00,Default,,0,0,0,,{\k10}a")
    assert [w.kind for w in warnings] == [DURATION_MISMATCH]


@pytest.mark.parametrize(
    "line",
    [
        r"Comment: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,{\k10}a",
        r"Dialogue: 0,0:0:00.00,0:00:00.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,0:00:00.0,0:00:00.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,0:00:61.00,0:00:62.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\kx}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\k}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\i1\kx}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,{\k10a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,lead{\k10}a",
        r"Dialogue: 0,0:00:00.00,0:00:00.10,Default,,0,0,0,,plain text",
    ],
)
def test_malformed_dialogue(line):
    with pytest.raises(FormatError):
        parse_dialogue(line, line_no=4)


def test_split_event_field_count():
    fields = split_event("Dialogue: 0,a,b,c,d,e,f,g,h,text,with,commas")
    assert len(fields) == 10
    assert fields[9] == "text,with,commas"


def test_parse_ass_document():
    text = "\n".join(
        [
            "[Script Info]",
            "ScriptType: v4.00+",
            "",
            "[Events]",
            "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
            "Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,musicName:故事",
            "Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,unknownKey:x",
            r"Dialogue: 0,0:00:01.00,0:00:01.20,Default,,0,0,0,,{\k10}a{\k10}b",
            r"Dialogue: 0,0:00:01.00,0:00:01.20,trans,x-lang:en,0,0,0,,story",
            r"Dialogue: 0,0:00:02.00,0:00:02.10,Default,,0,0,0,,{\k10}c",
        ]
    )
    doc, warnings, stats = parse_ass(text.splitlines())
    assert doc.tags == {"ti": "故事"}
    assert [line.text for line in doc.lines] == ["ab", "c"]
    assert [line.line_no for line in doc.lines] == [8, 10]
    assert warnings == []
    assert stats.records == 2
    assert stats.tags == 1
    assert stats.lines_ignored == 7


def test_parse_ass_aborts_with_line_number():
    lines = [
        r"Dialogue: 0,0:00:01.00,0:00:01.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,bad,0:00:01.10,Default,,0,0,0,,{\k10}a",
    ]
    with pytest.raises(FormatError) as ei:
        parse_ass(lines)
    assert ei.value.line_no == 2
    assert ei.value.line == lines[1]


def test_parse_ass_validates_aux_times():
    lines = [
        r"Dialogue: 0,0:00:01.00,0:00:01.10,Default,,0,0,0,,{\k10}a",
        r"Dialogue: 0,bad,0:00:01.10,trans,x-lang:en,0,0,0,,A",
    ]
    with pytest.raises(FormatError) as ei:
        parse_ass(lines)
    assert ei.value.line_no == 2


def test_has_special_names():
    assert has_special_names([r"Dialogue: 0,0:00:01.00,0:00:01.10,Default,x-duet,0,0,0,,{\k10}a"])
    assert has_special_names([r"Dialogue: 0,0:00:01.00,0:00:01.10,Default,背 chorus,0,0,0,,{\k10}a"])
    assert not has_special_names([r"Dialogue: 0,0:00:01.00,0:00:01.10,Default,,0,0,0,,{\k10}a"])
    assert not has_special_names([r"Dialogue: 0,0:00:01.00,0:00:01.10,roma,v1,0,0,0,,a"])
