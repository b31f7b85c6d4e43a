"""Link rewrites: nbsp inside links, outsourcing inline links, collating link definitions.

Link definitions are `[label]: url` lines the parser did not turn into any
other construct. Collated definitions are sorted and may be grouped under
category comments:

    <!-- link-category: docs -->

    [api]: https://example.com/api
"""

import logging
from typing import Iterator, List, Optional, Set, Tuple

from .events import EventRange, Kind, Tag, inline_destination, markdown_events
from .parse import ParseCfg
from .ranges import split_lines
from .whitespace import WhitespaceDetector

logger = logging.getLogger(__name__)

NBSP = '\u00a0'
LINK_ACTIONS = ('none', 'outsource-inline', 'collate-defs', 'both')
DEFAULT_CATEGORY = 'DEFAULT UNDEFINED CATEGORY'
CATEGORY_PREFIX = 'link-category:'

# nbsp counts as whitespace here
WHITESPACE = WhitespaceDetector(keep_nbsp=False)

EMPTY = 'empty'
LINK_DEF = 'link_def'
CATEGORY = 'category'
OTHER = 'other'


def _ascii_whitespace(text: str) -> str:
    return ''.join(' ' if ch.isspace() and not ch.isascii() else ch for ch in text)


def _lines(text: str) -> Iterator[Tuple[int, str]]:
    offset = 0
    for line in split_lines(text):
        yield offset, line
        offset += len(line)


def covered_positions(events: List[EventRange]) -> Set[int]:
    covered = set()
    for _, span in events:
        covered.update(span)
    return covered


def _is_link_def(line: str, start: int, covered: Set[int]) -> bool:
    return line.startswith('[') and start not in covered and ']:' in line


def url_and_name(line: str) -> Optional[Tuple[str, str]]:
    """(url, label) of a `[label]: url` line, None for anything else."""
    if not line.startswith('['):
        return None
    idx = line.find(']: ')
    if idx < 0:
        return None
    words = line[idx + 2:].split()
    if not words:
        return None
    return words[0], line[1:idx]


def link_positions(text: str, cfg: ParseCfg = ParseCfg()) -> set:
    """Offsets inside links and inside the labels of link reference definitions."""
    normalized = _ascii_whitespace(text)
    events = markdown_events(normalized, cfg)
    covered = covered_positions(events)
    in_links = set()
    for event, span in events:
        if event.kind is Kind.START and event.tag is Tag.LINK:
            in_links.update(span)
    for offset, line in _lines(normalized):
        if _is_link_def(line, offset, covered):
            in_links.update(range(offset, offset + line.find(']:')))
    return in_links


def replace_spaces_in_links_by_nbsp(text: str, cfg: ParseCfg = ParseCfg()) -> str:
    in_links = link_positions(text, cfg)
    if not in_links:
        return text
    out = []
    replaced = False
    for idx, ch in enumerate(text):
        if idx in in_links and WHITESPACE.is_whitespace(ch):
            if not replaced:
                out.append(NBSP)
            replaced = True
        else:
            out.append(ch)
            replaced = False
    return ''.join(out)


def _single_text_child(events: List[EventRange], idx: int) -> Optional[range]:
    """Span of the only child of the link starting at idx, None unless it is plain text."""
    inner = events[idx + 1:idx + 3]
    if len(inner) < 2 or inner[0][0].kind is not Kind.TEXT:
        return None
    if inner[1][0].kind is not Kind.END or inner[1][0].tag is not Tag.LINK:
        return None
    return inner[0][1]


def _is_blank(line: str) -> bool:
    return all(WHITESPACE.is_whitespace(ch) for ch in line)


def outsource_inline_links(text: str, collate_link_defs: bool = False, cfg: ParseCfg = ParseCfg()) -> str:
    """Replace inline links by reference links and append the new definitions.

    Existing definitions for the same url are reused. Links to anchors in the
    document, links with a title and links whose text is more than plain text
    stay inline.
    """
    events = markdown_events(text, cfg)
    covered = covered_positions(events)
    link_defs = {}
    for offset, line in _lines(text):
        if offset not in covered:
            found = url_and_name(line)
            if found is not None:
                link_defs[found[0]] = found[1]
    names = set(link_defs.values())
    logger.debug('found %d link definitions', len(link_defs))

    out = []
    last = 0
    new_defs = []
    for idx, (event, span) in enumerate(events):
        if event.kind is not Kind.START or event.tag is not Tag.LINK:
            continue
        url = inline_destination(text[span.start:span.stop])
        if not url or url.startswith('#'):
            continue
        child = _single_text_child(events, idx)
        if child is None:
            continue
        title = text[child.start:child.stop]
        out.append(text[last:span.start])
        last = span.stop
        if url in link_defs:
            name = link_defs[url]
            logger.debug('reusing link definition %r for %s', name, url)
            out.append(f'[{title}]' if title == name else f'[{title}][{name}]')
            continue
        name = title
        while name in names:
            name += '-'
        logger.debug('creating link definition %r for %s', name, url)
        link_defs[url] = name
        names.add(name)
        new_defs.append((url, name))
        out.append(f'[{name}]' if name == title else f'[{title}][{name}]')
    out.append(text[last:])
    result = ''.join(out)
    if not new_defs:
        return result

    lines = split_lines(result)
    separator = ''
    if lines:
        last_line = lines[-1]
        separator = '' if last_line.endswith('\n') else '\n'
        if not (_is_blank(last_line) or url_and_name(last_line) is not None):
            separator += '\n'
    block = []
    if collate_link_defs:
        block.append(f'<!-- link-category: {DEFAULT_CATEGORY} -->\n\n')
    for url, name in sorted(new_defs, key=lambda item: item[0].lower()):
        block.append(f'[{name}]: {url}\n')
    return result + separator + ''.join(block)


def _link_category(line: str) -> Optional[str]:
    body = line.rstrip('\n')
    if not (body.startswith('<!--') and body.endswith('-->')):
        return None
    body = body[len('<!--'):-len('-->')].strip()
    if not body.startswith(CATEGORY_PREFIX) or '-->' in body:
        return None
    return body[len(CATEGORY_PREFIX):].strip()


def _line_types(text: str, cfg: ParseCfg) -> List[Tuple[str, Optional[str]]]:
    covered = covered_positions(markdown_events(text, cfg))
    types = []
    for offset, line in _lines(text):
        if _is_blank(line):
            types.append((EMPTY, None))
        elif _is_link_def(line, offset, covered):
            types.append((LINK_DEF, None))
        else:
            category = _link_category(line)
            types.append((OTHER, None) if category is None else (CATEGORY, category))
    return types


def collate_link_defs_at_end(text: str, cfg: ParseCfg = ParseCfg()) -> str:
    """Move all link definitions to the end of text, sorted and grouped by category.

    Categories named in the document are all kept, even when empty. The
    default category only shows up when a document has named ones and
    definitions outside of them.
    """
    lines = split_lines(text)
    types = _line_types(text, cfg)
    kinds = [kind for kind, _ in types] + [None]

    kept = []
    last_kept_is_empty = True
    for idx, line in enumerate(lines):
        kind, next_kind = kinds[idx], kinds[idx + 1]
        if kind == OTHER or (kind == EMPTY and next_kind not in (LINK_DEF, CATEGORY)):
            kept.append(line)
            last_kept_is_empty = kind == EMPTY
    result = ''.join(kept)

    current = DEFAULT_CATEGORY
    defs = []
    for line, (kind, category) in zip(lines, types):
        if kind == CATEGORY:
            current = category
        elif kind == LINK_DEF:
            defs.append((current, line if line.endswith('\n') else line + '\n'))
    defs.sort(key=lambda item: item[1].lower())
    categories = sorted({category for kind, category in types if kind == CATEGORY and category != DEFAULT_CATEGORY},
                        key=str.lower)
    logger.debug('collating %d link definitions in %d categories', len(defs), len(categories))

    separator = ''
    if defs and result:
        separator = ('' if last_kept_is_empty else '\n') + ('' if result.endswith('\n') else '\n')

    if not categories:
        return result + separator + ''.join(link_def for _, link_def in defs)

    block = []
    had_entries = False
    for category in categories:
        gap = '\n' if had_entries else ''
        block.append(f'{gap}<!-- link-category: {category} -->\n\n')
        entries = [link_def for cat, link_def in defs if cat == category]
        block.extend(entries)
        had_entries = bool(entries)
    uncategorised = [link_def for cat, link_def in defs if cat == DEFAULT_CATEGORY]
    if uncategorised:
        gap = '\n' if had_entries else ''
        block.append(f'{gap}<!-- link-category: {DEFAULT_CATEGORY} -->\n\n')
        block.extend(uncategorised)
    return result + separator + ''.join(block)
