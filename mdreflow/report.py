"""What to tell the user about each processed file."""

import difflib
import shlex
import subprocess
import sys
import threading
from typing import Optional

# difflib has one algorithm, the named diffs are accepted for compatibility
DIFFS = ('diff', 'diff-myers', 'diff-patience', 'diff-lcs')
REPORTS = ('none', 'changed', 'state') + DIFFS
DIFF_CONTEXT = 4


def unified_diff(original: str, processed: str, filename: str) -> str:
    return ''.join(difflib.unified_diff(
        original.splitlines(keepends=True),
        processed.splitlines(keepends=True),
        fromfile=f'original:{filename}',
        tofile=f'processed:{filename}',
        n=DIFF_CONTEXT,
    ))


def generate_report(mode: str, processed: str, original: str, filename: str) -> Optional[str]:
    """Return the report for one file, None if there is nothing to print."""
    changed = processed != original
    if mode == 'none':
        return None
    if mode == 'changed':
        return filename if changed else None
    if mode == 'state':
        return f"{'C' if changed else 'U'}:{filename}"
    if mode in DIFFS:
        return unified_diff(original, processed, filename).rstrip('\n') if changed else None
    raise ValueError(f'unknown report mode {mode!r}')


class Printer:
    """Print whole reports from many threads, optionally through a pager.

    Usage:
        with Printer('less -R') as printer:
            printer.println('C:README.md')
    """

    def __init__(self, pager: Optional[str] = None):
        self.pager = pager
        self.lock = threading.Lock()
        self.process = None
        self.out = sys.stdout

    def __enter__(self):
        if self.pager:
            self.process = subprocess.Popen(shlex.split(self.pager), stdin=subprocess.PIPE, text=True)
            self.out = self.process.stdin
        return self

    def println(self, message: str):
        with self.lock:
            self.out.write(message + '\n')
            self.out.flush()

    def __exit__(self, exc_type, exc, tb):
        if self.process is not None:
            try:
                self.process.stdin.close()
            except BrokenPipeError:
                # the user quit the pager early
                pass
            self.process.wait()
            self.process = None
            self.out = sys.stdout
        return False
