from __future__ import annotations

import io

from logpretty.prettifier import Prettifier, prettify_stream
from logpretty.styles import AnsiDecorator


def test_plain_text_lines_are_preserved() -> None:
    p = Prettifier()
    out = p.write("this is not json\nit's just regular output\n")
    out += p.end()

    assert out == ["this is not json", "it's just regular output"]


def test_unterminated_record_is_emitted_on_end() -> None:
    p = Prettifier()
    assert p.write('{"hello":"world"}') == []
    assert p.end() == ['{"hello":"world"}']


def test_scalar_inputs_without_newline() -> None:
    for text in ["null", "undefined", "true"]:
        p = Prettifier()
        assert p.write(text) == []
        assert p.end() == [text]


def test_records_split_across_writes(make_line) -> None:
    line = make_line("hello world", a="b") + "\n"
    p = Prettifier()
    blocks = []
    for i in range(0, len(line), 7):
        blocks += p.write(line[i : i + 7])
    blocks += p.end()

    assert len(blocks) == 1
    assert blocks[0].split("\n")[0].endswith("hello world")
    assert blocks[0].split("\n")[1] == '    a: "b"'
    assert p.lines_seen == 1


def test_mixed_stream_keeps_order(make_line) -> None:
    source = io.BytesIO(("before\n" + make_line("middle") + "\n\nafter").encode("utf-8"))
    sink = io.StringIO()

    n = prettify_stream(source, sink)

    lines = sink.getvalue().split("\n")
    assert n == 4
    assert lines[0] == "before"
    assert lines[1].endswith("middle")
    assert lines[2] == ""
    assert lines[3] == "after"
    assert lines[4] == ""


def test_ansi_decorator_wraps_level_and_message(make_line) -> None:
    p = Prettifier(decorator=AnsiDecorator())
    out = p.write(make_line("hello world", level=50) + "\n")[0]

    assert "\x1b[" in out
    assert "ERROR" in out
    assert "hello world" in out


def test_lone_surrogates_do_not_stop_the_stream() -> None:
    raw = io.BytesIO()
    sink = io.TextIOWrapper(raw, encoding="utf-8")
    source = io.BytesIO(b'{"level":30,"msg":"bad \\ud800 char"}\nnext line\n')

    n = prettify_stream(source, sink)

    lines = raw.getvalue().decode("utf-8").split("\n")
    assert n == 2
    assert lines[0] == "INFO: bad \\ud800 char"
    assert lines[1] == "next line"
