import pytest

from mdreflow.events import Kind, Tag, line_starts, link_end, markdown_events
from mdreflow.parse import ParseCfg

CONTAINERS = (Tag.PARAGRAPH, Tag.LIST, Tag.ITEM)


def events(text, cfg=ParseCfg()):
    return [(event.kind, event.tag, text[span.start:span.stop])
            for event, span in markdown_events(text, cfg) if event.tag not in CONTAINERS]


def kinds(text, cfg=ParseCfg()):
    return {(kind, tag) for kind, tag, _ in events(text, cfg)}


def test_emphasis():
    assert events('Some *emphasized* text.') == [
        (Kind.TEXT, None, 'Some '),
        (Kind.START, Tag.EMPHASIS, '*emphasized*'),
        (Kind.TEXT, None, 'emphasized'),
        (Kind.END, Tag.EMPHASIS, '*'),
        (Kind.TEXT, None, ' text.'),
    ]


def test_strong_and_strikethrough():
    found = events('A **bold** and ~~gone~~ word.')
    assert (Kind.START, Tag.STRONG, '**bold**') in found
    assert (Kind.START, Tag.STRIKETHROUGH, '~~gone~~') in found


def test_inline_link():
    assert events('A [link text](http://x.y "title") here.') == [
        (Kind.TEXT, None, 'A '),
        (Kind.START, Tag.LINK, '[link text](http://x.y "title")'),
        (Kind.TEXT, None, 'link text'),
        (Kind.END, Tag.LINK, '](http://x.y "title")'),
        (Kind.TEXT, None, ' here.'),
    ]


def test_reference_link():
    text = 'A [full][ref] link.\n\n[ref]: http://x.y\n'
    assert (Kind.START, Tag.LINK, '[full][ref]') in events(text)


def test_autolink():
    assert events('See <http://a.b> now.') == [
        (Kind.TEXT, None, 'See '),
        (Kind.START, Tag.LINK, '<http://a.b>'),
        (Kind.END, Tag.LINK, '>'),
        (Kind.TEXT, None, ' now.'),
    ]


def test_code_span():
    assert events('Use `code` now.') == [
        (Kind.TEXT, None, 'Use '),
        (Kind.CODE, None, '`code`'),
        (Kind.TEXT, None, ' now.'),
    ]


def test_escape_keeps_its_source():
    assert events('a \\* b') == [
        (Kind.TEXT, None, 'a '),
        (Kind.TEXT, None, '\\*'),
        (Kind.TEXT, None, ' b'),
    ]


def test_image():
    assert events('An ![alt *text*](img.png) here.') == [
        (Kind.TEXT, None, 'An '),
        (Kind.START, Tag.IMAGE, '![alt *text*](img.png)'),
        (Kind.END, Tag.IMAGE, ''),
        (Kind.TEXT, None, ' here.'),
    ]


def test_soft_break_in_list_item():
    assert events('- foo\n  bar\n') == [
        (Kind.TEXT, None, 'foo'),
        (Kind.SOFT_BREAK, None, '\n  '),
        (Kind.TEXT, None, 'bar'),
    ]


def test_task_list_marker():
    assert events('- [ ] todo\n') == [
        (Kind.TASK_LIST_MARKER, None, '[ ]'),
        (Kind.TEXT, None, 'todo'),
    ]
    assert events('- [ ] todo\n', ParseCfg(detect_tasklists=False)) == [(Kind.TEXT, None, '[ ] todo')]


def test_task_list_marker_only_at_item_start():
    assert (Kind.TASK_LIST_MARKER, None) not in kinds('[x] not in a list\n')


def test_heading():
    assert events('# Title\n') == [
        (Kind.START, Tag.HEADING, '# Title\n'),
        (Kind.TEXT, None, 'Title'),
        (Kind.END, Tag.HEADING, '# Title\n'),
    ]


def test_fenced_code():
    text = '```\ncode\n```\n'
    assert events(text) == [(Kind.START, Tag.CODE_BLOCK, text), (Kind.END, Tag.CODE_BLOCK, text)]


def test_html_block():
    text = '<div>\nx\n</div>\n'
    assert events(text) == [(Kind.HTML, None, text)]


def test_inline_html():
    assert (Kind.INLINE_HTML, None, '<b>') in events('Text <b>bold</b> here.')


def test_thematic_break():
    assert events('***\n') == [(Kind.RULE, None, '***\n')]


def test_block_quote():
    found = events('> quoted\n')
    assert found[0] == (Kind.START, Tag.BLOCK_QUOTE, '> quoted\n')
    assert (Kind.TEXT, None, 'quoted') in found


def test_tables_can_be_disabled():
    text = '| a | b |\n|---|---|\n| c | d |\n'
    assert (Kind.START, Tag.TABLE) in kinds(text)
    assert (Kind.START, Tag.TABLE) not in kinds(text, ParseCfg(detect_tables=False))


def test_definition_list():
    found = events('Term\n: Definition here.\n')
    assert (Kind.START, Tag.DEFINITION_LIST_TITLE) in {(kind, tag) for kind, tag, _ in found}
    assert (Kind.TEXT, None, 'Term') in found
    assert (Kind.TEXT, None, 'Definition here.') in found


def test_footnotes():
    cfg = ParseCfg(detect_footnotes=True)
    text = 'Text[^1] more.\n\n[^1]: Note.\n'
    assert (Kind.FOOTNOTE_REFERENCE, None, '[^1]') in events(text, cfg)
    assert (Kind.START, Tag.FOOTNOTE_DEFINITION) in kinds(text, cfg)


def test_inline_math():
    assert (Kind.INLINE_MATH, None, '$a. b$') in events('Math $a. b$ here.', ParseCfg(detect_math=True))


def test_line_starts():
    assert line_starts('a\r\nb\rc\nd') == [0, 3, 5, 7]
    assert line_starts('') == [0]


@pytest.mark.parametrize('src, pos, expected', [
    ('](u) x', 1, 4),
    ('](<a b> "t") x', 1, 12),
    ('](a(b)c) x', 1, 8),
    ('][ref] x', 1, 6),
    ('] x', 1, 1),
])
def test_link_end(src, pos, expected):
    assert link_end(src, pos) == expected
