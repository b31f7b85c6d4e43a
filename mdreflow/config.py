"""Options from config files, frontmatter, environment and command line.

Config files are named .mdreflow.toml and use the same names as the long
command line options:

    max-width = 100
    lang = "en de"
    features = "keep-footnotes"
"""

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .features import KEEP_WHITESPACE
from .replace import LINK_ACTIONS

logger = logging.getLogger(__name__)

CONFIG_FILE = '.mdreflow.toml'
CASES = ('ignore', 'keep')


@dataclass(frozen=True)
class PerFileCfg:
    max_width: int = 80
    end_markers: str = '?!:.'
    lang: str = 'ac'
    suppressions: str = ''
    ignores: str = ''
    upstream_command: str = ''
    upstream: str = ''
    upstream_separator: str = ''
    case: str = 'ignore'
    features: str = ''
    keep_whitespace: str = 'none'
    format_block_quotes: bool = False
    link_actions: str = 'none'


OPTION_TYPES: Dict[str, type] = {f.name: type(f.default) for f in fields(PerFileCfg)}
CHOICES = {
    'case': CASES,
    'keep_whitespace': KEEP_WHITESPACE,
    'link_actions': LINK_ACTIONS,
}


def option_key(name: str) -> str:
    return name.replace('_', '-')


@dataclass(frozen=True)
class CfgFile:
    """A partial set of options, None where unset."""

    max_width: Optional[int] = None
    end_markers: Optional[str] = None
    lang: Optional[str] = None
    suppressions: Optional[str] = None
    ignores: Optional[str] = None
    upstream_command: Optional[str] = None
    upstream: Optional[str] = None
    upstream_separator: Optional[str] = None
    case: Optional[str] = None
    features: Optional[str] = None
    keep_whitespace: Optional[str] = None
    format_block_quotes: Optional[bool] = None
    link_actions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = '<config>') -> 'CfgFile':
        values = {}
        for key, value in data.items():
            name = key.replace('-', '_')
            expected = OPTION_TYPES.get(name)
            if expected is None or '_' in key:
                raise ValueError(f'{source}: unknown option {key!r}')
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ValueError(f'{source}: {key} must be of type {expected.__name__}')
            values[name] = value
        cfg = cls(**values)
        cfg.validate(source)
        return cfg

    @classmethod
    def from_toml(cls, text: str, source: str = '<config>') -> 'CfgFile':
        return cls.from_dict(tomllib.loads(text), source)

    @classmethod
    def read(cls, path: Path) -> 'CfgFile':
        return cls.from_toml(path.read_text(encoding='utf-8'), str(path))

    def validate(self, source: str = '<config>'):
        for name, choices in CHOICES.items():
            value = getattr(self, name)
            if value is not None and value not in choices:
                raise ValueError(f'{source}: {option_key(name)} must be one of {", ".join(choices)}, '
                                 f'not {value!r}')
        if self.max_width is not None and self.max_width < 0:
            raise ValueError(f'{source}: max-width must not be negative')

    def merge_with(self, other: 'CfgFile') -> 'CfgFile':
        """Fill the options unset here from other."""
        return CfgFile(**{
            f.name: getattr(other, f.name) if getattr(self, f.name) is None else getattr(self, f.name)
            for f in fields(self)
        })

    def is_complete(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self))

    def resolve(self) -> PerFileCfg:
        defaults = PerFileCfg()
        return PerFileCfg(**{
            f.name: getattr(defaults, f.name) if getattr(self, f.name) is None else getattr(self, f.name)
            for f in fields(self)
        })


def load_config_file(path: Path) -> Optional[CfgFile]:
    """Read a config file, None if there is none or it is broken."""
    if not path.is_file():
        return None
    try:
        cfg = CfgFile.read(path)
    except (OSError, ValueError) as err:
        logger.error('ignoring config file %s: %s', path, err)
        return None
    logger.debug('read config file %s', path)
    return cfg


def merge_configs(*configs: Optional[CfgFile]) -> CfgFile:
    """Merge configs, earlier ones winning."""
    merged = CfgFile()
    for cfg in configs:
        if cfg is None:
            continue
        merged = merged.merge_with(cfg)
        if merged.is_complete():
            break
    return merged


def _toml_value(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def default_config_toml() -> str:
    defaults = PerFileCfg()
    return ''.join(f'{option_key(f.name)} = {_toml_value(getattr(defaults, f.name))}\n'
                   for f in fields(defaults))
