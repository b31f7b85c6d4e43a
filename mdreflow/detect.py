"""Sentence boundary detection."""

from dataclasses import dataclass
from typing import Optional

from .keep import KeepWords
from .whitespace import WhitespaceDetector

DEFAULT_END_MARKERS = '?!:.'


@dataclass(frozen=True)
class BreakCfg:
    allow_multiple_markers: bool = False
    allow_start_marker: bool = False
    keep_linebreaks: bool = False
    keep_nbsp: bool = True
    strict_word_start: bool = False


class BreakDetector:
    """Decide whether a character ends a sentence.

    Usage:
        detector = BreakDetector('e.g. i.e.', end_markers='.')
        detector.is_breaking_marker('s', '.', ' ')
    """

    def __init__(self, keep_words: str = '', ignores: str = '', preserve_case: bool = False,
                 end_markers: str = DEFAULT_END_MARKERS, cfg: Optional[BreakCfg] = None):
        cfg = cfg or BreakCfg()
        self.cfg = cfg
        self.end_markers = frozenset(end_markers)
        self.whitespace = WhitespaceDetector(keep_nbsp=cfg.keep_nbsp, keep_linebreaks=cfg.keep_linebreaks)
        self.keep_words = KeepWords(keep_words, ignores, preserve_case, cfg.strict_word_start)

    def is_breaking_marker(self, prev: Optional[str], ch: str, next_ch: Optional[str]) -> bool:
        if ch not in self.end_markers:
            return False
        if next_ch is None or not self.whitespace.is_whitespace(next_ch):
            return False
        if not self.cfg.allow_multiple_markers and prev is not None and prev in self.end_markers:
            return False
        if not self.cfg.allow_start_marker and (prev is None or prev == '\n'):
            return False
        return True

    def ends_with_keep_word(self, text: str, idx: int) -> bool:
        return self.keep_words.ends_with_keep_word(text, idx)
