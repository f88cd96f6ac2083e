from parsing.inline import parse_inline, strip_inline_markup
from schemas.internal.blocks import InlineRun


def test_plain_text_is_single_run() -> None:
    assert parse_inline("just text") == [InlineRun(text="just text")]


def test_bold_and_code_spans_split_in_order() -> None:
    runs = parse_inline("Some **bold** and `code` text.")

    assert [run.text for run in runs] == ["Some ", "bold", " and ", "code", " text."]
    assert [run.bold for run in runs] == [False, True, False, False, False]
    assert [run.monospace for run in runs] == [False, False, False, True, False]


def test_spans_at_line_edges_have_no_empty_runs() -> None:
    runs = parse_inline("**Start** middle `end`")

    assert runs[0] == InlineRun(text="Start", bold=True)
    assert runs[-1] == InlineRun(text="end", monospace=True)
    assert all(run.text for run in runs)


def test_overlapping_span_keeps_first_match() -> None:
    runs = parse_inline("**a `b** c`")

    assert runs[0] == InlineRun(text="a `b", bold=True)
    assert runs[1] == InlineRun(text=" c`")


def test_unclosed_markers_stay_literal() -> None:
    assert parse_inline("**not bold") == [InlineRun(text="**not bold")]


def test_strip_inline_markup() -> None:
    assert strip_inline_markup("**Priority**: `P0`") == "Priority: P0"
