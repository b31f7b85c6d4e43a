"""Find markdown files and the directories config files may live in."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Set

logger = logging.getLogger(__name__)

IGNORE_FILES = ('.ignore', '.gitignore')


def read_ignore_patterns(directory: Path) -> List[str]:
    """Glob patterns from the ignore files of directory, matched against names."""
    patterns = []
    for name in IGNORE_FILES:
        path = directory / name
        if not path.is_file():
            continue
        for line in path.read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if line and not line.startswith(('#', '!')):
                patterns.append(line.strip('/'))
    return patterns


def _walk(directory: Path, extension: str, inherited: List[str]) -> Iterator[Path]:
    patterns = inherited + read_ignore_patterns(directory)
    for entry in sorted(directory.iterdir()):
        if entry.name.startswith('.'):
            continue
        if any(fnmatch.fnmatch(entry.name, pattern) for pattern in patterns):
            logger.debug('ignoring %s', entry)
            continue
        if entry.is_dir():
            yield from _walk(entry, extension, patterns)
        elif entry.is_file() and entry.name.endswith(extension):
            yield entry


def find_files_with_extension(paths: Iterable[Path], extension: str) -> Set[Path]:
    """Files given explicitly plus all files with extension below given directories."""
    paths = [Path(path) for path in paths]
    missing = [str(path) for path in paths if not path.exists()]
    if missing:
        raise FileNotFoundError(f"no such files or directories: {', '.join(missing)}")
    found = set()
    for path in paths:
        if path.is_dir():
            found.update(_walk(path, extension, []))
        else:
            found.add(path)
    return found


def upwards_dirs(path: Path) -> Iterator[Path]:
    """The directory of path (or path itself if it is one) and all its parents."""
    path = Path(path).absolute()
    current = path if path.is_dir() else path.parent
    yield current
    yield from current.parents
