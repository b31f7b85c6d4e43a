"""Turn markdown-it tokens into a flat stream of (Event, range) pairs.

markdown-it only knows line maps for block tokens. Inline tokens are located by
searching their source text left to right inside the inline content and mapping
content positions back onto document positions line by line. Whenever a child
cannot be located, the inline token yields no events and stays verbatim.

Usage:
    for event, span in markdown_events(text, ParseCfg()):
        print(event.kind, text[span.start:span.stop])
"""

import bisect
import enum
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from markdown_it import MarkdownIt
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin

logger = logging.getLogger(__name__)

LINE_END_RE = re.compile(r'\r\n?|\n')
TASK_RE = re.compile(r'\[[ xX]\](?=[ \t]|$)')


class Kind(enum.Enum):
    START = 'start'
    END = 'end'
    TEXT = 'text'
    CODE = 'code'
    HTML = 'html'
    INLINE_HTML = 'inline_html'
    SOFT_BREAK = 'soft_break'
    HARD_BREAK = 'hard_break'
    RULE = 'rule'
    TASK_LIST_MARKER = 'task_list_marker'
    FOOTNOTE_REFERENCE = 'footnote_reference'
    INLINE_MATH = 'inline_math'
    DISPLAY_MATH = 'display_math'


class Tag(enum.Enum):
    PARAGRAPH = 'paragraph'
    HEADING = 'heading'
    BLOCK_QUOTE = 'block_quote'
    CODE_BLOCK = 'code_block'
    LIST = 'list'
    ITEM = 'item'
    FOOTNOTE_DEFINITION = 'footnote_definition'
    TABLE = 'table'
    TABLE_HEAD = 'table_head'
    TABLE_ROW = 'table_row'
    TABLE_CELL = 'table_cell'
    EMPHASIS = 'emphasis'
    STRONG = 'strong'
    STRIKETHROUGH = 'strikethrough'
    LINK = 'link'
    IMAGE = 'image'
    DEFINITION_LIST = 'definition_list'
    DEFINITION_LIST_TITLE = 'definition_list_title'
    DEFINITION_LIST_DEFINITION = 'definition_list_definition'


@dataclass(frozen=True)
class Event:
    kind: Kind
    tag: Optional[Tag] = None
    content: str = ''


EventRange = Tuple[Event, range]

BLOCK_TAGS = {
    'paragraph': Tag.PARAGRAPH,
    'heading': Tag.HEADING,
    'blockquote': Tag.BLOCK_QUOTE,
    'bullet_list': Tag.LIST,
    'ordered_list': Tag.LIST,
    'list_item': Tag.ITEM,
    'table': Tag.TABLE,
    'thead': Tag.TABLE_HEAD,
    'tr': Tag.TABLE_ROW,
    'th': Tag.TABLE_CELL,
    'td': Tag.TABLE_CELL,
    'dl': Tag.DEFINITION_LIST,
    'dt': Tag.DEFINITION_LIST_TITLE,
    'dd': Tag.DEFINITION_LIST_DEFINITION,
    'footnote_reference': Tag.FOOTNOTE_DEFINITION,
    'footnote': Tag.FOOTNOTE_DEFINITION,
}

INLINE_TAGS = {
    'em': Tag.EMPHASIS,
    'strong': Tag.STRONG,
    's': Tag.STRIKETHROUGH,
}


class UnmappedToken(Exception):
    """An inline token whose source text could not be found."""


def build_parser(cfg) -> MarkdownIt:
    md = MarkdownIt('commonmark', {'typographer': False})
    md.enable('strikethrough')
    if cfg.detect_tables:
        md.enable('table')
    # keep escapes and entities as separate tokens that still carry their source
    md.disable('text_join', ignoreInvalid=True)
    if cfg.detect_definition_lists:
        md.use(deflist_plugin)
    if cfg.detect_footnotes:
        md.use(footnote_plugin)
    if cfg.detect_math:
        md.use(dollarmath_plugin)
    return md


def line_starts(text: str) -> List[int]:
    """Offsets of every line start, counting line ends the way markdown-it does."""
    return [0] + [m.end() for m in LINE_END_RE.finditer(text)]


def _line_start(starts: List[int], line: int, text: str) -> int:
    return starts[line] if line < len(starts) else len(text)


def _line_text(starts: List[int], line: int, text: str) -> Optional[str]:
    if line >= len(starts):
        return None
    end = starts[line + 1] if line + 1 < len(starts) else len(text)
    return text[starts[line]:end].rstrip('\r\n')


class _ContentMap:
    """Map offsets in an inline token's content onto document offsets."""

    def __init__(self, content_starts: List[int], doc_starts: List[int]):
        self.content_starts = content_starts
        self.doc_starts = doc_starts

    @classmethod
    def build(cls, content: str, text: str, starts: List[int], first_line: int):
        content_starts = []
        doc_starts = []
        offset = 0
        for idx, line in enumerate(content.split('\n')):
            doc_line = _line_text(starts, first_line + idx, text)
            if doc_line is None:
                raise UnmappedToken(f'inline content runs past line {first_line + idx}')
            body = line.lstrip(' \t')
            lead = len(line) - len(body)
            col = doc_line.rfind(body) if body else len(doc_line)
            if col < 0:
                raise UnmappedToken(f'{body!r} not found on line {first_line + idx}')
            content_starts.append(offset)
            doc_starts.append(starts[first_line + idx] + col - lead)
            offset += len(line) + 1
        return cls(content_starts, doc_starts)

    def to_doc(self, pos: int) -> int:
        line = bisect.bisect_right(self.content_starts, pos) - 1
        return self.doc_starts[line] + pos - self.content_starts[line]

    def span(self, start: int, end: int) -> range:
        return range(self.to_doc(start), self.to_doc(end))


def _find(src: str, needle: str, start: int) -> int:
    pos = src.find(needle, start)
    if pos < 0:
        raise UnmappedToken(f'{needle!r} not found after offset {start}')
    return pos


def _find_backtick_run(src: str, run: str, start: int) -> int:
    pos = src.find(run, start)
    while pos >= 0:
        end = pos + len(run)
        if (pos == start or src[pos - 1] != '`') and (end >= len(src) or src[end] != '`'):
            return pos
        pos = src.find(run, end)
    raise UnmappedToken(f'no run of {len(run)} backticks after offset {start}')


def _closing_bracket(src: str, pos: int) -> int:
    """Index of the ']' matching the '[' at pos, -1 if there is none."""
    level = 0
    idx = pos
    while idx < len(src):
        ch = src[idx]
        if ch == '\\':
            idx += 2
            continue
        if ch == '[':
            level += 1
        elif ch == ']':
            level -= 1
            if level == 0:
                return idx
        idx += 1
    return -1


def _skip_spaces(src: str, pos: int) -> int:
    while pos < len(src) and src[pos] in ' \t\n':
        pos += 1
    return pos


def _skip_destination(src: str, pos: int) -> int:
    if pos < len(src) and src[pos] == '<':
        pos += 1
        while pos < len(src):
            ch = src[pos]
            if ch == '\\':
                pos += 2
                continue
            if ch == '>':
                return pos + 1
            if ch in '<\n':
                return -1
            pos += 1
        return -1
    level = 0
    while pos < len(src):
        ch = src[pos]
        if ch == '\\':
            pos += 2
            continue
        if ch.isspace():
            break
        if ch == '(':
            level += 1
        elif ch == ')':
            if level == 0:
                break
            level -= 1
        pos += 1
    return pos


def _skip_title(src: str, pos: int) -> int:
    if pos >= len(src) or src[pos] not in '"\'(':
        return pos
    closing = ')' if src[pos] == '(' else src[pos]
    pos += 1
    while pos < len(src):
        ch = src[pos]
        if ch == '\\':
            pos += 2
            continue
        if ch == closing:
            return pos + 1
        pos += 1
    return -1


def _inline_tail(src: str, pos: int) -> int:
    """End of '(destination "title")' starting at pos, -1 if it is none."""
    if pos >= len(src) or src[pos] != '(':
        return -1
    pos = _skip_destination(src, _skip_spaces(src, pos + 1))
    if pos < 0:
        return -1
    pos = _skip_title(src, _skip_spaces(src, pos))
    if pos < 0:
        return -1
    pos = _skip_spaces(src, pos)
    if pos < len(src) and src[pos] == ')':
        return pos + 1
    return -1


def link_end(src: str, pos: int) -> int:
    """End of a link or image whose label closes right before pos."""
    end = _inline_tail(src, pos)
    if end >= 0:
        return end
    if pos < len(src) and src[pos] == '[':
        close = _closing_bracket(src, pos)
        if close >= 0:
            return close + 1
    return pos


def inline_destination(src: str) -> Optional[str]:
    """Destination of the inline link src, None for other links and for links with a title."""
    if not src.startswith('['):
        return None
    close = _closing_bracket(src, 0)
    if close < 0 or _inline_tail(src, close + 1) != len(src):
        return None
    start = _skip_spaces(src, close + 2)
    end = _skip_destination(src, start)
    if src[_skip_spaces(src, end)] != ')':
        return None
    destination = src[start:end]
    if destination.startswith('<'):
        destination = destination[1:-1]
    return destination


class _InlineScanner:
    """Locate the children of one inline token inside its content."""

    def __init__(self, token, cfg, item_start: bool):
        self.src = token.content
        self.children = token.children or []
        self.cfg = cfg
        self.item_start = item_start
        self.cursor = 0
        self.events = []
        self.open_tags = []

    def emit(self, event: Event, start: int, end: int) -> int:
        self.events.append((event, start, end))
        self.cursor = max(self.cursor, end)
        return len(self.events) - 1

    def open(self, tag: Tag, start: int, end: int):
        idx = self.emit(Event(Kind.START, tag), start, end)
        self.open_tags.append((tag, idx, start))

    def close(self, tag: Tag, start: int, end: int):
        if not self.open_tags or self.open_tags[-1][0] is not tag:
            raise UnmappedToken(f'unbalanced inline {tag.value}')
        _, idx, open_start = self.open_tags.pop()
        self.events[idx] = (self.events[idx][0], open_start, end)
        self.emit(Event(Kind.END, tag), start, end)

    def scan(self):
        idx = 0
        while idx < len(self.children):
            child = self.children[idx]
            if child.type == 'link_open' and child.info == 'auto':
                idx = self.autolink(idx)
                continue
            self.child(child, idx)
            idx += 1
        if self.open_tags:
            raise UnmappedToken('inline tags left open')
        return self.events

    def autolink(self, idx: int) -> int:
        start = _find(self.src, '<', self.cursor)
        end = _find(self.src, '>', start) + 1
        self.open(Tag.LINK, start, end)
        idx += 1
        while idx < len(self.children) and self.children[idx].type != 'link_close':
            idx += 1
        self.close(Tag.LINK, end - 1, end)
        return idx + 1

    def child(self, child, idx: int):
        src = self.src
        kind = child.type
        if kind == 'text':
            if not child.content:
                return
            start = _find(src, child.content, self.cursor)
            end = start + len(child.content)
            if idx == 0 and self.item_start and self.cfg.detect_tasklists and TASK_RE.match(child.content):
                self.emit(Event(Kind.TASK_LIST_MARKER), start, start + 3)
                start += 3
                while start < end and src[start] in ' \t':
                    start += 1
            if start < end:
                self.emit(Event(Kind.TEXT, content=src[start:end]), start, end)
        elif kind == 'text_special':
            start = _find(src, child.markup or child.content, self.cursor)
            self.emit(Event(Kind.TEXT, content=child.content), start, start + len(child.markup or child.content))
        elif kind in ('softbreak', 'hardbreak'):
            end = _find(src, '\n', self.cursor) + 1
            event = Kind.SOFT_BREAK if kind == 'softbreak' else Kind.HARD_BREAK
            self.emit(Event(event), self.cursor, end)
        elif kind == 'code_inline':
            start = _find_backtick_run(src, child.markup, self.cursor)
            close = _find_backtick_run(src, child.markup, start + len(child.markup))
            self.emit(Event(Kind.CODE, content=child.content), start, close + len(child.markup))
        elif kind == 'html_inline':
            start = _find(src, child.content, self.cursor)
            self.emit(Event(Kind.INLINE_HTML, content=child.content), start, start + len(child.content))
        elif kind.endswith('_open') and kind[:-5] in INLINE_TAGS:
            start = _find(src, child.markup, self.cursor)
            self.open(INLINE_TAGS[kind[:-5]], start, start + len(child.markup))
        elif kind.endswith('_close') and kind[:-6] in INLINE_TAGS:
            start = _find(src, child.markup, self.cursor)
            self.close(INLINE_TAGS[kind[:-6]], start, start + len(child.markup))
        elif kind == 'link_open':
            start = _find(src, '[', self.cursor)
            self.open(Tag.LINK, start, start + 1)
        elif kind == 'link_close':
            close = _find(src, ']', self.cursor)
            self.close(Tag.LINK, close, link_end(src, close + 1))
        elif kind == 'image':
            start = _find(src, '![', self.cursor)
            close = start + 1 + len(child.content) + 1
            if close >= len(src) or src[close] != ']':
                close = _closing_bracket(src, start + 1)
                if close < 0:
                    raise UnmappedToken('image label is not closed')
            end = link_end(src, close + 1)
            self.emit(Event(Kind.START, Tag.IMAGE), start, end)
            self.emit(Event(Kind.END, Tag.IMAGE), end, end)
        elif kind == 'footnote_ref':
            start = min((pos for pos in (src.find('[^', self.cursor), src.find('^[', self.cursor)) if pos >= 0),
                        default=-1)
            if start < 0:
                raise UnmappedToken('footnote reference not found')
            bracket = start if src[start] == '[' else start + 1
            close = _closing_bracket(src, bracket)
            if close < 0:
                raise UnmappedToken('footnote reference is not closed')
            self.emit(Event(Kind.FOOTNOTE_REFERENCE), start, close + 1)
        elif kind.startswith('math_inline'):
            markup = child.markup or '$'
            start = _find(src, markup, self.cursor)
            close = start + len(markup) + len(child.content)
            if not src.startswith(markup, close):
                close = _find(src, markup, start + len(markup))
            self.emit(Event(Kind.INLINE_MATH, content=child.content), start, close + len(markup))
        else:
            raise UnmappedToken(f'unsupported inline token {kind}')


def _inline_events(token, text: str, starts: List[int], cfg, item_start: bool) -> List[EventRange]:
    try:
        content_map = _ContentMap.build(token.content, text, starts, token.map[0])
        located = _InlineScanner(token, cfg, item_start).scan()
    except UnmappedToken as err:
        logger.debug('keeping inline content on line %d verbatim: %s', token.map[0] + 1, err)
        return []
    return [(event, content_map.span(start, end)) for event, start, end in located]


def _block_range(token, text: str, starts: List[int], parents: List[range]) -> range:
    if token.map:
        return range(_line_start(starts, token.map[0], text), _line_start(starts, token.map[1], text))
    if parents:
        return parents[-1]
    return range(0, 0)


def markdown_events(text: str, cfg) -> List[EventRange]:
    """Parse text and return its structural events with their source ranges."""
    tokens = build_parser(cfg).parse(text)
    starts = line_starts(text)
    events = []
    parents = []
    for idx, token in enumerate(tokens):
        kind = token.type
        if kind == 'inline':
            if token.map is None:
                continue
            item_start = idx >= 2 and tokens[idx - 1].type == 'paragraph_open' \
                and tokens[idx - 2].type == 'list_item_open'
            events.extend(_inline_events(token, text, starts, cfg, item_start))
        elif token.nesting == 1:
            span = _block_range(token, text, starts, parents)
            parents.append(span)
            tag = BLOCK_TAGS.get(kind[:-len('_open')])
            if tag is not None:
                events.append((Event(Kind.START, tag), span))
        elif token.nesting == -1:
            span = parents.pop() if parents else range(0, 0)
            tag = BLOCK_TAGS.get(kind[:-len('_close')])
            if tag is not None:
                events.append((Event(Kind.END, tag), span))
        elif kind in ('fence', 'code_block'):
            span = _block_range(token, text, starts, parents)
            events.append((Event(Kind.START, Tag.CODE_BLOCK), span))
            events.append((Event(Kind.END, Tag.CODE_BLOCK), span))
        elif kind == 'html_block':
            events.append((Event(Kind.HTML, content=token.content), _block_range(token, text, starts, parents)))
        elif kind == 'hr':
            events.append((Event(Kind.RULE), _block_range(token, text, starts, parents)))
        elif kind.startswith('math_block'):
            events.append((Event(Kind.DISPLAY_MATH, content=token.content),
                           _block_range(token, text, starts, parents)))
    return events
