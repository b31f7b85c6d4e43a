"""Cover a whole document with verbatim ranges and ranges to rewrap."""

from dataclasses import dataclass
from typing import Iterable, List, Union

TAB_WIDTH = 4


@dataclass(frozen=True)
class Verbatim:
    pass


@dataclass(frozen=True)
class Indent:
    width: int


WrapType = Union[Verbatim, Indent]


@dataclass(frozen=True)
class TextRange:
    span: range
    wrap: WrapType


def split_lines(text: str) -> List[str]:
    """Split text after every newline, keeping the newlines."""
    lines = text.split('\n')
    result = [line + '\n' for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result


def line_ranges(text: str) -> List[range]:
    ranges = []
    start = 0
    for line in split_lines(text):
        ranges.append(range(start, start + len(line)))
        start += len(line)
    return ranges


def find_line_start(point: int, lines: List[range]) -> int:
    for line in lines:
        if point in line:
            return line.start
    return point


def indent_width(text: str, line_start: int, point: int) -> int:
    """Column of point with tabs expanded."""
    return len(text[line_start:point].expandtabs(TAB_WIDTH))


def fill_markdown_ranges(wrap_ranges: Iterable[range], text: str) -> List[TextRange]:
    """Interleave the sorted wrap ranges with verbatim ranges covering the rest.

    Each wrap range is indented by the column it starts at.
    """
    lines = line_ranges(text)
    filled = []
    last_end = 0
    for span in list(wrap_ranges) + [range(len(text), len(text))]:
        filled.append(TextRange(range(last_end, span.start), Verbatim()))
        line_start = find_line_start(span.start, lines)
        filled.append(TextRange(span, Indent(indent_width(text, line_start, span.start))))
        last_end = span.stop
    return [text_range for text_range in filled if len(text_range.span) > 0]
