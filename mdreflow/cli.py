"""Put every sentence of markdown prose on its own line and wrap long lines.

Usage:
  mdreflow [options] [paths ...]

Without paths, the document is read from stdin and written to stdout.
Directories are searched for files with the given extension.

Exit codes:
  0: nothing to report
  1: files would change (check/both mode) or a file could not be processed
"""

import argparse
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import CONFIG_FILE, CASES, CfgFile, default_config_toml, load_config_file, merge_configs
from .features import FEATURES, KEEP_WHITESPACE
from .files import find_files_with_extension, upwards_dirs
from .frontmatter import frontmatter_config, split_frontmatter
from .log import init_logging
from .process import process
from .replace import LINK_ACTIONS
from .report import REPORTS, Printer, generate_report
from .upstream import UpstreamError
from .verify import RenderingChanged, renders_identically

logger = logging.getLogger(__name__)

ENV_PREFIX = 'MDREFLOW_'
MODES = ('format', 'check', 'both')
TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env(name: str, convert=str):
    value = os.environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    return convert(value)


def _env_flag(name: str):
    value = os.environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    return value.strip().lower() in TRUE_VALUES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mdreflow',
        description='Break markdown prose after every sentence and wrap it to a maximum width.',
        epilog=f'Options may also be set with {ENV_PREFIX}<OPTION> environment variables '
               f'and {CONFIG_FILE} files.',
    )
    parser.add_argument('paths', nargs='*', type=Path,
                        help='Markdown files or directories (default: read stdin)')
    parser.add_argument('-w', '--max-width', type=int, default=_env('MAX_WIDTH', int),
                        help='Maximum line width, 0 disables wrapping (default: 80)')
    parser.add_argument('-e', '--end-markers', default=_env('END_MARKERS'),
                        help='Characters that end a sentence (default: "?!:.")')
    parser.add_argument('-m', '--mode', choices=MODES, default=_env('MODE') or 'format',
                        help='Rewrite files, only check them, or both (default: format)')
    parser.add_argument('-l', '--lang', default=_env('LANG'),
                        help='Space separated languages whose abbreviations never end a sentence '
                             '(ac, de, en, es, fr, it or none; default: ac)')
    parser.add_argument('-s', '--suppressions', default=_env('SUPPRESSIONS'),
                        help='Additional space separated words that never end a sentence')
    parser.add_argument('-i', '--ignores', default=_env('IGNORES'),
                        help='Space separated words to drop from the built-in lists')
    parser.add_argument('--upstream-command', default=_env('UPSTREAM_COMMAND'),
                        help='Formatter to pipe each document through first')
    parser.add_argument('-u', '--upstream', default=_env('UPSTREAM'),
                        help='Arguments of the upstream formatter, or the whole command')
    parser.add_argument('--upstream-separator', default=_env('UPSTREAM_SEPARATOR'),
                        help='Split --upstream on this instead of whitespace')
    parser.add_argument('-c', '--case', choices=CASES, default=_env('CASE'),
                        help='Whether case matters for suppressions (default: ignore)')
    parser.add_argument('--features', default=_env('FEATURES'),
                        help=f"Comma separated features: {', '.join(FEATURES)}")
    parser.add_argument('--keep-whitespace', choices=KEEP_WHITESPACE, default=_env('KEEP_WHITESPACE'),
                        help='Whitespace to leave alone, overrides the matching features (default: none)')
    parser.add_argument('--format-block-quotes', action='store_true', default=_env_flag('FORMAT_BLOCK_QUOTES'),
                        help='Also format the content of block quotes')
    parser.add_argument('--link-actions', choices=LINK_ACTIONS, default=_env('LINK_ACTIONS'),
                        help='Turn inline links into reference links, move link definitions to the end, '
                             'or both (default: none)')
    parser.add_argument('--extension', default=_env('EXTENSION') or '.md',
                        help='Extension of files searched in directories (default: .md)')
    parser.add_argument('-j', '--jobs', type=int, default=_env('JOBS', int) or os.cpu_count() or 1,
                        help='Number of files processed in parallel (default: number of CPUs)')
    parser.add_argument('-r', '--report', choices=REPORTS, default=_env('REPORT') or 'none',
                        help='What to print for each file (default: none)')
    parser.add_argument('--diff-pager', default=_env('DIFF_PAGER'),
                        help='Command to page reports through, e.g. "less -R"')
    parser.add_argument('--stdin-filepath', type=Path, default=_env('STDIN_FILEPATH', Path),
                        help='Where the document read from stdin lives, to find its config')
    parser.add_argument('--verify', action='store_true',
                        help='Refuse changes that alter the rendered HTML')
    parser.add_argument('--default-config', action='store_true',
                        help='Print the default config file and exit')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log more, repeat for even more')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def cfg_from_args(args: argparse.Namespace) -> CfgFile:
    """The options given on the command line or in the environment."""
    cfg = CfgFile(
        max_width=args.max_width,
        end_markers=args.end_markers,
        lang=args.lang,
        suppressions=args.suppressions,
        ignores=args.ignores,
        upstream_command=args.upstream_command,
        upstream=args.upstream,
        upstream_separator=args.upstream_separator,
        case=args.case,
        features=args.features,
        keep_whitespace=args.keep_whitespace,
        format_block_quotes=args.format_block_quotes,
        link_actions=args.link_actions,
    )
    cfg.validate('command line')
    return cfg


class ConfigFiles:
    """Config files per directory, read once each."""

    def __init__(self):
        self.by_dir: Dict[Path, Optional[CfgFile]] = {}

    def chain(self, directory: Path) -> List[CfgFile]:
        """Config files from directory upwards, nearest first."""
        found = []
        for parent in upwards_dirs(directory):
            if parent not in self.by_dir:
                self.by_dir[parent] = load_config_file(parent / CONFIG_FILE)
            if self.by_dir[parent] is not None:
                found.append(self.by_dir[parent])
        return found


def resolve_cfg(cli_cfg: CfgFile, document: str, chain: List[CfgFile], source: str):
    frontmatter, _ = split_frontmatter(document)
    return merge_configs(cli_cfg, frontmatter_config(frontmatter, source), *chain).resolve()


def process_file(path: Path, args: argparse.Namespace, cli_cfg: CfgFile, chain: List[CfgFile],
                 printer: Printer) -> bool:
    """Process one file and return whether it changed."""
    document = path.read_text(encoding='utf-8')
    cfg = resolve_cfg(cli_cfg, document, chain, str(path))
    processed = process(document, cfg, path.parent)
    changed = processed != document
    if changed and args.verify and not renders_identically(document, processed):
        raise RenderingChanged(f'{path}: reformatting would change the rendered document')
    report = generate_report(args.report, processed, document, str(path))
    if report is not None:
        printer.println(report)
    if changed and args.mode in ('format', 'both'):
        path.write_text(processed, encoding='utf-8')
        logger.info('reformatted %s', path)
    return changed


def run_files(args: argparse.Namespace, cli_cfg: CfgFile) -> int:
    paths = sorted(find_files_with_extension(args.paths, args.extension))
    logger.info('processing %d files with %d jobs', len(paths), args.jobs)
    config_files = ConfigFiles()
    chains = {path: config_files.chain(path.parent) for path in paths}

    failed = False
    changed = False
    with Printer(args.diff_pager) as printer, ThreadPoolExecutor(max_workers=max(args.jobs, 1)) as pool:
        futures = {path: pool.submit(process_file, path, args, cli_cfg, chains[path], printer) for path in paths}
        for path, future in futures.items():
            try:
                changed |= future.result()
            except (OSError, ValueError, UpstreamError, RenderingChanged) as err:
                logger.error('failed to process %s: %s', path, err)
                failed = True
    if failed:
        return 1
    if changed and args.mode in ('check', 'both'):
        return 1
    return 0


def run_stdin(args: argparse.Namespace, cli_cfg: CfgFile) -> int:
    document = sys.stdin.read()
    directory = args.stdin_filepath.parent if args.stdin_filepath else Path.cwd()
    cfg = resolve_cfg(cli_cfg, document, ConfigFiles().chain(directory), '<stdin>')
    processed = process(document, cfg, directory)
    changed = processed != document
    if changed and args.verify and not renders_identically(document, processed):
        raise RenderingChanged('<stdin>: reformatting would change the rendered document')
    if args.mode in ('format', 'both'):
        sys.stdout.write(processed)
    elif args.report != 'none':
        report = generate_report(args.report, processed, document, str(args.stdin_filepath or '<stdin>'))
        if report is not None:
            print(report)
    if changed and args.mode in ('check', 'both'):
        return 1
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(args.verbose)
    if args.default_config:
        print(default_config_toml(), end='')
        return 0
    try:
        cli_cfg = cfg_from_args(args)
        if not args.paths:
            return run_stdin(args, cli_cfg)
        return run_files(args, cli_cfg)
    except (OSError, ValueError, UpstreamError, RenderingChanged) as err:
        logger.error('%s', err)
        return 1

