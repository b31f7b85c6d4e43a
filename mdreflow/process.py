"""Reformat one markdown document."""

import logging
from pathlib import Path
from typing import Optional

from .blockquotes import BlockQuotes
from .config import PerFileCfg
from .detect import BreakDetector
from .features import FeatureCfg
from .frontmatter import split_frontmatter
from .lang import keep_word_list
from .parse import ParseCfg, parse_markdown
from .ranges import fill_markdown_ranges
from .replace import collate_link_defs_at_end, outsource_inline_links, replace_spaces_in_links_by_nbsp
from .upstream import upstream_args, upstream_formatter
from .wrap import add_linebreaks_and_wrap

logger = logging.getLogger(__name__)


def build_detector(cfg: PerFileCfg, features: FeatureCfg) -> BreakDetector:
    keep_words = ' '.join((keep_word_list(cfg.lang), cfg.suppressions))
    detector = BreakDetector(keep_words, cfg.ignores, cfg.case == 'keep', cfg.end_markers, features.break_cfg)
    logger.debug('using %d keep words', len(detector.keep_words))
    return detector


def format_text(text: str, max_width: Optional[int], detector: BreakDetector,
                parse_cfg: ParseCfg = ParseCfg(), format_block_quotes: bool = False) -> str:
    """Break text after each sentence and wrap it, the trailing newline is dropped."""
    ranges = fill_markdown_ranges(parse_markdown(text, parse_cfg), text)
    formatted = add_linebreaks_and_wrap(ranges, max_width, detector, text)
    if not format_block_quotes:
        return formatted

    def format_quote(content: str, indent: int) -> str:
        width = None if max_width is None else max(max_width - indent, 1)
        result = format_text(content, width, detector, parse_cfg, format_block_quotes)
        if content.endswith('\n') and not result.endswith('\n'):
            result += '\n'
        return result

    return BlockQuotes(formatted, parse_cfg).apply_to_matches_and_join(format_quote)


def process(document: str, cfg: PerFileCfg = PerFileCfg(), workdir: Optional[Path] = None) -> str:
    """Return document reformatted according to cfg.

    workdir is where an upstream formatter runs, usually the document's directory.
    """
    features = FeatureCfg.from_str(cfg.features).with_keep_whitespace(cfg.keep_whitespace)
    detector = build_detector(cfg, features)
    frontmatter, text = split_frontmatter(document)
    if cfg.upstream_command or cfg.upstream:
        text = upstream_formatter(upstream_args(cfg.upstream_command, cfg.upstream, cfg.upstream_separator),
                                  text, workdir)
    if not features.keep_spaces_in_links:
        text = replace_spaces_in_links_by_nbsp(text, features.parse_cfg)
    body = format_text(text, cfg.max_width or None, detector, features.parse_cfg, cfg.format_block_quotes)
    if cfg.link_actions in ('outsource-inline', 'both'):
        body = outsource_inline_links(body, cfg.link_actions == 'both', features.parse_cfg)
    if cfg.link_actions in ('collate-defs', 'both'):
        body = collate_link_defs_at_end(body, features.parse_cfg)
    formatted = frontmatter + body
    if document.endswith('\n') and not formatted.endswith('\n'):
        formatted += '\n'
    return formatted
