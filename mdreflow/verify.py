"""Check that reformatting leaves the rendered HTML alone."""

import re

from markdown import markdown

EXTENSIONS = ['tables', 'fenced_code']
WHITESPACE_RE = re.compile(r'\s+')


class RenderingChanged(Exception):
    pass


def rendered(text: str) -> str:
    """HTML for text with all whitespace runs collapsed to one space."""
    html = markdown(text, extensions=EXTENSIONS)
    return WHITESPACE_RE.sub(' ', html).strip()


def renders_identically(original: str, processed: str) -> bool:
    return rendered(original) == rendered(processed)
