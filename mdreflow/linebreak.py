"""Put every sentence of a piece of prose onto its own line."""

from .detect import BreakDetector
from .whitespace import WhitespaceDetector


def merge_linebreaks(text: str, whitespace: WhitespaceDetector) -> str:
    """Replace each run of linebreaks by one space.

    A linebreak right after a non-breaking space is kept, as are all of them
    when the detector keeps linebreaks.
    """
    if whitespace.keep_linebreaks:
        return text
    out = []
    in_run = False
    for idx, ch in enumerate(text):
        if ch == '\n' and not (idx > 0 and whitespace.is_nbsp(text[idx - 1])):
            if not in_run:
                out.append(' ')
            in_run = True
        else:
            out.append(ch)
            in_run = False
    return ''.join(out)


def insert_linebreaks_after_sentence_ends(text: str, detector: BreakDetector) -> str:
    merged = merge_linebreaks(text, detector.whitespace)
    breaks = set()
    for idx, ch in enumerate(merged):
        prev = merged[idx - 1] if idx > 0 else None
        next_ch = merged[idx + 1] if idx + 1 < len(merged) else None
        if detector.is_breaking_marker(prev, ch, next_ch) and not detector.ends_with_keep_word(merged, idx):
            breaks.add(idx + 1)
    if not breaks:
        return merged
    return ''.join('\n' if idx in breaks else ch for idx, ch in enumerate(merged))
