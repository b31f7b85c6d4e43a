"""Find the parts of a markdown document that may be rewrapped."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .events import EventRange, Kind, Tag, markdown_events
from .ignore import IgnoreByHtmlComment
from .whitespace import WhitespaceDetector

logger = logging.getLogger(__name__)

# content of these is copied as-is
VERBATIM_TAGS = frozenset({
    Tag.BLOCK_QUOTE,
    Tag.CODE_BLOCK,
    Tag.FOOTNOTE_DEFINITION,
    Tag.HEADING,
    Tag.IMAGE,
    Tag.TABLE,
    Tag.TABLE_HEAD,
    Tag.TABLE_ROW,
    Tag.TABLE_CELL,
})

# wrappable as a whole, their insides are not wrapped on their own
TRANSPARENT_TAGS = frozenset({
    Tag.EMPHASIS,
    Tag.LINK,
    Tag.STRIKETHROUGH,
    Tag.STRONG,
})

NEVER_WRAPPED = frozenset({
    Kind.TASK_LIST_MARKER,
    Kind.FOOTNOTE_REFERENCE,
    Kind.RULE,
    Kind.INLINE_MATH,
    Kind.DISPLAY_MATH,
})


@dataclass(frozen=True)
class ParseCfg:
    keep_linebreaks: bool = False
    keep_nbsp: bool = True
    detect_definition_lists: bool = True
    detect_tasklists: bool = True
    detect_tables: bool = True
    detect_footnotes: bool = False
    detect_math: bool = False
    keep_inline_html: bool = False

    def whitespace(self) -> WhitespaceDetector:
        return WhitespaceDetector(keep_nbsp=self.keep_nbsp, keep_linebreaks=self.keep_linebreaks)


def _has_linebreak(text: str, span: range) -> bool:
    return '\n' in text[span.start:span.stop]


def to_be_wrapped(events: Iterable[EventRange], text: str, cfg: ParseCfg) -> List[range]:
    """Select the ranges of events that hold wrappable prose.

    A single pass over the event stream that tracks how deep inside verbatim
    or transparent tags it is and whether an ignore region is active.
    """
    verbatim_level = 0
    ignore = IgnoreByHtmlComment()
    wrappable = []
    for event, span in events:
        if event.kind is Kind.HTML:
            ignore.process_html(event.content)

        if event.kind is Kind.START:
            if event.tag in VERBATIM_TAGS:
                keep = False
                verbatim_level += 1
            elif event.tag in TRANSPARENT_TAGS:
                keep = verbatim_level == 0
                verbatim_level += 1
            else:
                keep = False
        elif event.kind is Kind.END:
            if event.tag in VERBATIM_TAGS or event.tag in TRANSPARENT_TAGS:
                if verbatim_level == 0:
                    raise RuntimeError('tags should be balanced')
                verbatim_level -= 1
            keep = False
        elif event.kind in NEVER_WRAPPED:
            keep = False
        elif event.kind is Kind.HTML:
            keep = verbatim_level == 0 and not _has_linebreak(text, span)
        elif event.kind is Kind.INLINE_HTML:
            keep = verbatim_level == 0 and not cfg.keep_inline_html and not _has_linebreak(text, span)
        else:
            keep = verbatim_level == 0

        if keep and not ignore.should_be_ignored():
            wrappable.append(span)
    return wrappable


def whitespace_indices(text: str, whitespace: WhitespaceDetector) -> Dict[int, str]:
    return {idx: ch for idx, ch in enumerate(text) if whitespace.is_whitespace(ch)}


def merge_ranges(ranges: Iterable[range], whitespaces: Dict[int, str]) -> List[range]:
    """Join ranges that are only separated by whitespace with at most one linebreak.

    Ranges contained in their predecessor are dropped, as is anything too
    short to be worth wrapping.
    """
    merged = []
    current = None
    for span in ranges:
        if current is None:
            current = span
            continue
        if span.start >= current.start and span.stop <= current.stop:
            continue
        gap = range(current.stop, span.start)
        linebreaks = sum(1 for idx in gap if whitespaces.get(idx) == '\n')
        if all(idx in whitespaces for idx in gap) and linebreaks <= 1:
            current = range(current.start, max(current.stop, span.stop))
        else:
            merged.append(current)
            current = span
    if current is not None:
        merged.append(current)
    return [span for span in merged if len(span) > 1]


def trim_ranges(ranges: Iterable[range], whitespaces: Dict[int, str]) -> List[range]:
    """Move whitespace at either end of each range out of it."""
    trimmed = []
    for span in ranges:
        start, stop = span.start, span.stop
        while start < stop and start in whitespaces:
            start += 1
        while stop > start and stop - 1 in whitespaces:
            stop -= 1
        if stop - start > 1:
            trimmed.append(range(start, stop))
    return trimmed


def parse_markdown(text: str, cfg: ParseCfg = ParseCfg()) -> List[range]:
    """Return the sorted, merged ranges of text that hold wrappable prose."""
    events = markdown_events(text, cfg)
    whitespaces = whitespace_indices(text, cfg.whitespace())
    wrappable = sorted(to_be_wrapped(events, text, cfg), key=lambda span: span.start)
    merged = trim_ranges(merge_ranges(wrappable, whitespaces), whitespaces)
    logger.debug('found %d wrappable ranges', len(merged))
    return merged
