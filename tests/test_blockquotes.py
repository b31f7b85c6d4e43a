from mdreflow.blockquotes import BlockQuotes


def test_finds_outermost_quotes():
    text = 'Text.\n\n> Quoted.\n> > Nested.\n'
    quotes = BlockQuotes(text).quotes
    assert quotes == [(range(7, len(text)), 0)]


def test_column_of_indented_quote():
    text = '- item\n\n  > quoted\n'
    quotes = BlockQuotes(text).quotes
    assert quotes == [(range(10, len(text)), 2)]


def test_strip_prefix():
    assert BlockQuotes.strip_prefix('> one\n>\n> > two\n', 0) == 'one\n\n> two\n'
    assert BlockQuotes.strip_prefix('> one\n  > two\n', 2) == 'one\ntwo\n'


def test_add_prefix():
    assert BlockQuotes.add_prefix('one\n\ntwo\n', 0) == '> one\n>\n> two\n'
    assert BlockQuotes.add_prefix('one\ntwo', 2) == '> one\n  > two'


def test_apply_to_matches_and_join():
    text = 'Text.\n\n> quoted\n> more\n\nAfter.\n'
    seen = []

    def upper(content, indent):
        seen.append(indent)
        return content.upper()

    assert BlockQuotes(text).apply_to_matches_and_join(upper) == 'Text.\n\n> QUOTED\n> MORE\n\nAfter.\n'
    assert seen == [2]


def test_text_without_quotes_is_unchanged():
    text = 'Just text.\n'
    assert BlockQuotes(text).apply_to_matches_and_join(lambda content, indent: 'x') == text
