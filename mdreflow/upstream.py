"""Run another formatter on a document before it is rewrapped."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    pass


def upstream_args(command: str, upstream: str, separator: str = '') -> List[str]:
    """Build the argv; without a command the first upstream word is the executable."""
    args = upstream.split(separator) if separator else upstream.split()
    args = [arg for arg in args if arg]
    if command:
        return [command] + args
    return args


def upstream_formatter(argv: List[str], text: str, workdir: Optional[Path] = None) -> str:
    """Pipe text through argv and return its output."""
    if not argv:
        raise UpstreamError('no upstream formatter given')
    logger.debug('running upstream formatter %s in %s', ' '.join(argv), workdir or Path.cwd())
    try:
        result = subprocess.run(argv, input=text, capture_output=True, text=True, cwd=workdir)
    except OSError as err:
        raise UpstreamError(f'cannot run upstream formatter {argv[0]}: {err}') from err
    if result.returncode != 0:
        raise UpstreamError(f'upstream formatter {argv[0]} exited with status {result.returncode}: '
                            f'{result.stderr.strip()}')
    return result.stdout
