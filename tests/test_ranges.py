from mdreflow.ranges import Indent, TextRange, Verbatim, fill_markdown_ranges, indent_width, split_lines


def test_filling_ranges():
    text = '\ntext\nmore text\n\neven more text\n'
    filled = fill_markdown_ranges([range(1, 6), range(22, 26), range(31, 32)], text)
    assert filled == [
        TextRange(range(0, 1), Verbatim()),
        TextRange(range(1, 6), Indent(0)),
        TextRange(range(6, 22), Verbatim()),
        TextRange(range(22, 26), Indent(5)),
        TextRange(range(26, 31), Verbatim()),
        TextRange(range(31, 32), Indent(14)),
    ]


def test_no_wrap_ranges_leaves_one_verbatim_range():
    assert fill_markdown_ranges([], 'abc\n') == [TextRange(range(0, 4), Verbatim())]


def test_empty_text_has_no_ranges():
    assert fill_markdown_ranges([], '') == []


def test_indent_expands_tabs():
    assert indent_width('\tx', 0, 1) == 4
    assert indent_width('- \tx', 0, 3) == 4


def test_split_lines_keeps_newlines():
    assert split_lines('a\nb\n') == ['a\n', 'b\n']
    assert split_lines('a\n\nb') == ['a\n', '\n', 'b']
    assert split_lines('') == []
