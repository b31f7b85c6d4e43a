"""Format the content of block quotes the way top level text is formatted."""

from typing import Callable, List, Tuple

from .events import Kind, Tag, markdown_events
from .parse import ParseCfg
from .ranges import split_lines

PREFIX = '> '
EMPTY_PREFIX = '>'


class BlockQuotes:
    """The outermost block quotes of a document and the column of their '>'.

    Usage:
        BlockQuotes(text).apply_to_matches_and_join(lambda content, indent: content)
    """

    def __init__(self, text: str, cfg: ParseCfg = ParseCfg()):
        self.text = text
        self.quotes: List[Tuple[range, int]] = []
        depth = 0
        for event, span in markdown_events(text, cfg):
            if event.tag is not Tag.BLOCK_QUOTE:
                continue
            if event.kind is Kind.START:
                if depth == 0:
                    marker = text.find('>', span.start, span.stop)
                    if marker >= 0:
                        self.quotes.append((range(marker, span.stop), marker - span.start))
                depth += 1
            elif event.kind is Kind.END:
                depth -= 1

    @staticmethod
    def strip_prefix(text: str, indent: int) -> str:
        out = []
        for idx, line in enumerate(split_lines(text)):
            if idx > 0:
                spaces = len(line) - len(line.lstrip(' '))
                line = line[min(spaces, indent):]
            if line.startswith('>'):
                line = line[1:]
                if line.startswith(' '):
                    line = line[1:]
            out.append(line)
        return ''.join(out)

    @staticmethod
    def add_prefix(text: str, indent: int) -> str:
        out = []
        for idx, line in enumerate(split_lines(text)):
            if idx > 0:
                out.append(' ' * indent)
            out.append(EMPTY_PREFIX if line == '\n' else PREFIX)
            out.append(line)
        return ''.join(out)

    def apply_to_matches_and_join(self, func: Callable[[str, int], str]) -> str:
        """Replace the content of every quote by func(content, indent).

        indent is the column the content starts at, i.e. after '> '.
        """
        out = []
        last = 0
        for span, indent in self.quotes:
            out.append(self.text[last:span.start])
            content = self.strip_prefix(self.text[span.start:span.stop], indent)
            out.append(self.add_prefix(func(content, indent + len(PREFIX)), indent))
            last = span.stop
        out.append(self.text[last:])
        return ''.join(out)
