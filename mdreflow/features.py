"""Feature switches given as a comma or space separated string."""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Optional

from .detect import BreakCfg
from .parse import ParseCfg

FEATURES = (
    'keep-spaces-in-links',
    'keep-inline-html',
    'keep-footnotes',
    'keep-math',
    'keep-linebreaks',
    'modify-nbsp',
    'modify-tasklists',
    'modify-tables',
    'modify-definition-lists',
    'breaking-multiple-markers',
    'breaking-start-marker',
    'strict-word-start',
)

KEEP_WHITESPACE = ('none', 'in-links', 'linebreaks', 'both')

SEPARATOR_RE = re.compile(r'[\s,]+')


@dataclass(frozen=True)
class FeatureCfg:
    keep_spaces_in_links: bool = False
    parse_cfg: ParseCfg = field(default_factory=ParseCfg)
    break_cfg: BreakCfg = field(default_factory=BreakCfg)

    @classmethod
    def from_str(cls, features: str) -> 'FeatureCfg':
        names = {name for name in SEPARATOR_RE.split(features) if name}
        unknown = sorted(names.difference(FEATURES))
        if unknown:
            raise ValueError(f"unknown features: {', '.join(unknown)}")
        keep_linebreaks = 'keep-linebreaks' in names
        keep_nbsp = 'modify-nbsp' not in names
        parse_cfg = ParseCfg(
            keep_linebreaks=keep_linebreaks,
            keep_nbsp=keep_nbsp,
            detect_definition_lists='modify-definition-lists' not in names,
            detect_tasklists='modify-tasklists' not in names,
            detect_tables='modify-tables' not in names,
            detect_footnotes='keep-footnotes' in names,
            detect_math='keep-math' in names,
            keep_inline_html='keep-inline-html' in names,
        )
        break_cfg = BreakCfg(
            allow_multiple_markers='breaking-multiple-markers' in names,
            allow_start_marker='breaking-start-marker' in names,
            keep_linebreaks=keep_linebreaks,
            keep_nbsp=keep_nbsp,
            strict_word_start='strict-word-start' in names,
        )
        return cls('keep-spaces-in-links' in names, parse_cfg, break_cfg)

    def with_keep_whitespace(self, keep_whitespace: Optional[str]) -> 'FeatureCfg':
        """Let an explicit keep-whitespace value override the legacy features."""
        if keep_whitespace is None or keep_whitespace == 'none':
            return self
        if keep_whitespace not in KEEP_WHITESPACE:
            raise ValueError(f'keep-whitespace must be one of {", ".join(KEEP_WHITESPACE)}, '
                             f'not {keep_whitespace!r}')
        in_links = keep_whitespace in ('in-links', 'both')
        linebreaks = keep_whitespace in ('linebreaks', 'both')
        return dataclasses.replace(
            self,
            keep_spaces_in_links=in_links,
            parse_cfg=dataclasses.replace(self.parse_cfg, keep_linebreaks=linebreaks),
            break_cfg=dataclasses.replace(self.break_cfg, keep_linebreaks=linebreaks),
        )
