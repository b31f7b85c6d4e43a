"""Words after which no sentence break may be inserted, e.g. abbreviations."""

from typing import List, Tuple

from .whitespace import SEPARATORS


def _fold(text: str, preserve_case: bool) -> str:
    return text if preserve_case else text.lower()


class KeepWords:
    """Set of (word, disp) pairs where disp is the word length minus one.

    A match ends at a candidate end marker and reaches disp characters back.
    """

    def __init__(self, words: str = '', ignores: str = '', preserve_case: bool = False,
                 strict_word_start: bool = False):
        self.preserve_case = preserve_case
        self.strict_word_start = strict_word_start
        dropped = {_fold(word, preserve_case) for word in ignores.split()}
        entries = set()
        for word in words.split():
            word = _fold(word, preserve_case)
            if word and word not in dropped:
                entries.add((word, len(word) - 1))
        self.entries: List[Tuple[str, int]] = sorted(entries, key=lambda e: (-e[1], e[0]))

    def __len__(self):
        return len(self.entries)

    def _starts_word(self, text: str, start: int) -> bool:
        if start == 0:
            return True
        before = text[start - 1]
        if self.strict_word_start:
            return before.isspace() and before not in SEPARATORS
        return not before.isalnum()

    def ends_with_keep_word(self, text: str, idx: int) -> bool:
        """Whether text[..idx] (inclusive) ends with one of the keep words."""
        if idx >= len(text):
            return False
        for word, disp in self.entries:
            if disp > idx:
                continue
            start = idx - disp
            if not self._starts_word(text, start):
                continue
            if self.preserve_case:
                candidate = text[start:idx + 1]
            else:
                candidate = ''.join(ch.lower() for ch in text[start:idx + 1])
            if all(a == b for a, b in zip(candidate, word)):
                return True
        return False
