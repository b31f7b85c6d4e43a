"""Greedy wrapping of sentence-per-line prose."""

import logging
from typing import Iterable, List, Optional

from .detect import BreakDetector
from .linebreak import insert_linebreaks_after_sentence_ends
from .log import TRACE
from .ranges import Indent, TextRange
from .whitespace import WhitespaceDetector

logger = logging.getLogger(__name__)


def wrap_sentence(sentence: str, idx: int, indent: str, max_width: Optional[int],
                  whitespace: WhitespaceDetector) -> List[str]:
    """Greedily pack the words of one sentence into lines of at most max_width.

    The first sentence (idx 0) continues at the caller's column, so its first
    word gets no indent while still counting it.
    """
    words = whitespace.split_whitespace(sentence)
    if not words:
        return ['']
    line = [words[0]] if idx == 0 else [indent, words[0]]
    line_len = len(indent) + len(words[0])
    lines = []
    for word in words[1:]:
        if not max_width or line_len + 1 + len(word) <= max_width:
            line.extend((' ', word))
            line_len += 1 + len(word)
        else:
            lines.append(''.join(line))
            line = [indent, word]
            line_len = len(indent) + len(word)
    lines.append(''.join(line))
    return lines


def wrap_range(text: str, indent_width: int, max_width: Optional[int], detector: BreakDetector) -> str:
    indent = ' ' * indent_width
    sentences = insert_linebreaks_after_sentence_ends(text, detector).split('\n')
    wrapped = []
    for idx, sentence in enumerate(sentences):
        wrapped.extend(wrap_sentence(sentence, idx, indent, max_width, detector.whitespace))
    return '\n'.join(wrapped)


def add_linebreaks_and_wrap(ranges: Iterable[TextRange], max_width: Optional[int],
                            detector: BreakDetector, text: str) -> str:
    """Rebuild text, rewrapping the Indent ranges and copying the rest."""
    out = []
    for text_range in ranges:
        chunk = text[text_range.span.start:text_range.span.stop]
        if isinstance(text_range.wrap, Indent):
            wrapped = wrap_range(chunk, text_range.wrap.width, max_width, detector)
            if logger.isEnabledFor(TRACE):
                logger.log(TRACE, 'wrapped %r into %r', chunk, wrapped)
            out.append(wrapped)
        else:
            out.append(chunk)
    return ''.join(out).rstrip()
