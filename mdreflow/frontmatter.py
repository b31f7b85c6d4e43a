"""YAML frontmatter at the top of a document.

The frontmatter is never reformatted. It may carry config for its document:

    ---
    title: Some page
    mdreflow-toml: |
      max-width = 100
    ---
"""

import logging
from typing import Optional, Tuple

import yaml

from .config import CfgFile

logger = logging.getLogger(__name__)

DELIMITER = '---\n'
CONFIG_KEY = 'mdreflow-toml'


def split_frontmatter(text: str) -> Tuple[str, str]:
    """Return (frontmatter, rest); frontmatter is empty if there is none."""
    if not text.startswith(DELIMITER):
        return '', text
    end = text.find('\n' + DELIMITER, len(DELIMITER) - 1)
    if end < 0:
        return '', text
    split = end + 1 + len(DELIMITER)
    return text[:split], text[split:]


def frontmatter_config(frontmatter: str, source: str = '<frontmatter>') -> Optional[CfgFile]:
    if not frontmatter:
        return None
    body = frontmatter[len(DELIMITER):-len(DELIMITER)]
    try:
        data = yaml.safe_load(body)
    except yaml.YAMLError as err:
        logger.warning('%s: ignoring unparsable frontmatter: %s', source, err)
        return None
    if not isinstance(data, dict) or CONFIG_KEY not in data:
        return None
    value = data[CONFIG_KEY]
    if not isinstance(value, str):
        logger.error('%s: %s must be a string holding TOML', source, CONFIG_KEY)
        return None
    try:
        return CfgFile.from_toml(value, f'{source} ({CONFIG_KEY})')
    except ValueError as err:
        logger.error('ignoring frontmatter config: %s', err)
        return None
