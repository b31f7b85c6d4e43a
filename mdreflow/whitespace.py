"""What counts as whitespace while merging ranges and splitting words."""

NBSP = '\u00a0\u2007\u202f\u2060\ufeff'

# str.isspace accepts these information separators, Unicode White_Space does not
SEPARATORS = '\x1c\x1d\x1e\x1f'


class WhitespaceDetector:
    """Unicode whitespace minus the characters that should be kept as-is.

    Non-breaking spaces are kept by default, linebreaks only on request.
    """

    def __init__(self, keep_nbsp: bool = True, keep_linebreaks: bool = False):
        excluded = SEPARATORS
        if keep_nbsp:
            excluded += NBSP
        if keep_linebreaks:
            excluded += '\n'
        self.excluded = frozenset(excluded)
        self.keep_linebreaks = keep_linebreaks

    def is_whitespace(self, ch: str) -> bool:
        return ch.isspace() and ch not in self.excluded

    @staticmethod
    def is_nbsp(ch: str) -> bool:
        return ch in NBSP

    def split_whitespace(self, text: str):
        """Return the non-empty pieces of text between whitespace characters."""
        words = []
        start = None
        for idx, ch in enumerate(text):
            if self.is_whitespace(ch):
                if start is not None:
                    words.append(text[start:idx])
                    start = None
            elif start is None:
                start = idx
        if start is not None:
            words.append(text[start:])
        return words
