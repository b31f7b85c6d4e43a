from mdreflow.replace import collate_link_defs_at_end, outsource_inline_links, replace_spaces_in_links_by_nbsp


def test_spaces_in_inline_links():
    text = 'Some text [link with spaces](http://some-url) and more.'
    expected = 'Some text [link\u00a0with\u00a0spaces](http://some-url) and more.'
    assert replace_spaces_in_links_by_nbsp(text) == expected


def test_runs_of_whitespace_become_one_nbsp():
    text = 'A [link  with\nbreak](u) here.'
    assert replace_spaces_in_links_by_nbsp(text) == 'A [link\u00a0with\u00a0break](u) here.'


def test_existing_nbsp_is_merged():
    text = 'A [link\u00a0 text](u).'
    assert replace_spaces_in_links_by_nbsp(text) == 'A [link\u00a0text](u).'


def test_reference_links_and_definitions():
    text = ('[link ref]\n\n[named link ref][named link]\n\n'
            '[link ref]: http://some-link\n[named link]: http://other-link\n')
    expected = ('[link\u00a0ref]\n\n[named\u00a0link\u00a0ref][named\u00a0link]\n\n'
                '[link\u00a0ref]: http://some-link\n[named\u00a0link]: http://other-link\n')
    assert replace_spaces_in_links_by_nbsp(text) == expected


def test_text_without_links_is_unchanged():
    text = 'No links here. [Not a link] either.'
    assert replace_spaces_in_links_by_nbsp(text) == text


def test_links_in_code_are_left_alone():
    text = 'Some `[code link](u)` here.\n'
    assert replace_spaces_in_links_by_nbsp(text) == text


def test_collate_moves_definitions_to_the_end():
    text = ('[link ref]\n\n[named link]: http://other-link\n[link ref]: http://some-link\n\n'
            '[named link ref][named link]\n')
    expected = ('[link ref]\n\n[named link ref][named link]\n\n'
                '[link ref]: http://some-link\n[named link]: http://other-link\n')
    assert collate_link_defs_at_end(text) == expected


def test_collate_keeps_text_without_definitions():
    text = 'Some text.\n\nMore text.\n'
    assert collate_link_defs_at_end(text) == text


def test_collate_sorts_a_document_of_only_definitions():
    text = '[b]: http://b\n[A]: http://a\n[c]: http://c\n'
    assert collate_link_defs_at_end(text) == '[A]: http://a\n[b]: http://b\n[c]: http://c\n'


def test_collate_keeps_empty_lines_in_code_blocks():
    text = '```\n[not a def]: http://x\n\n\n```\n\n[def]: http://y\n\nText.\n'
    expected = '```\n[not a def]: http://x\n\n\n```\n\nText.\n\n[def]: http://y\n'
    assert collate_link_defs_at_end(text) == expected


def test_collate_without_final_newline():
    assert collate_link_defs_at_end('[link ref]: http://some-link\n\n[link ref]') == \
        '\n[link ref]\n\n[link ref]: http://some-link\n'


def test_collate_groups_definitions_by_category():
    text = ('[link ref]\n\n[another link ref]\n\n[named link ref][named link]\n\n'
            '[another named link ref][another named link]\n\n'
            '<!-- link-category: zzz -->\n\n'
            '[named link]: http://other-link\n[another named link]: http://yet-another-link\n\n'
            '<!-- link-category: asdf -->\n\n'
            '[link ref]: http://some-link\n[another link ref]: http://another-link\n')
    expected = ('[link ref]\n\n[another link ref]\n\n[named link ref][named link]\n\n'
                '[another named link ref][another named link]\n\n'
                '<!-- link-category: asdf -->\n\n'
                '[another link ref]: http://another-link\n[link ref]: http://some-link\n\n'
                '<!-- link-category: zzz -->\n\n'
                '[another named link]: http://yet-another-link\n[named link]: http://other-link\n')
    assert collate_link_defs_at_end(text) == expected


def test_collate_puts_uncategorised_definitions_last():
    text = ('[named link ref][named link]\n\n[link ref]\n\n'
            '[named link]: http://other-link\n\n'
            '<!-- link-category: asdf -->\n\n'
            '[link ref]: http://some-link\n')
    expected = ('[named link ref][named link]\n\n[link ref]\n\n'
                '<!-- link-category: asdf -->\n\n'
                '[link ref]: http://some-link\n\n'
                '<!-- link-category: DEFAULT UNDEFINED CATEGORY -->\n\n'
                '[named link]: http://other-link\n')
    assert collate_link_defs_at_end(text) == expected


def test_outsource_inline_links():
    text = 'See [the docs](http://docs) and [more](<http://more>).\n'
    expected = ('See [the docs] and [more].\n\n'
                '[the docs]: http://docs\n[more]: http://more\n')
    assert outsource_inline_links(text) == expected


def test_outsource_reuses_existing_definitions():
    text = 'See [here](http://docs) and [docs](http://docs).\n\n[docs]: http://docs\n'
    expected = 'See [here][docs] and [docs].\n\n[docs]: http://docs\n'
    assert outsource_inline_links(text) == expected


def test_outsource_avoids_taken_names():
    text = 'A [docs](http://new).\n\n[docs]: http://old\n'
    expected = 'A [docs][docs-].\n\n[docs]: http://old\n[docs-]: http://new\n'
    assert outsource_inline_links(text) == expected


def test_outsource_leaves_anchors_titles_and_markup_inline():
    text = 'See [top](#top), [t](http://t "title") and [*em*](http://em).\n'
    assert outsource_inline_links(text) == text


def test_outsource_with_collation_adds_default_category():
    text = 'A [b](http://b) [a](http://a)'
    expected = ('A [b] [a]\n\n<!-- link-category: DEFAULT UNDEFINED CATEGORY -->\n\n'
                '[a]: http://a\n[b]: http://b\n')
    assert outsource_inline_links(text, collate_link_defs=True) == expected
