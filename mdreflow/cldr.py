"""Regenerate the built-in keep word lists from CLDR sentence break suppressions.

Usage:
  python -m mdreflow.cldr [--ref main] [--output-dir DIR] LANG ...

`ac` is not a CLDR language and is kept by hand.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from .lang import LANGUAGES, cldr_suppressions, format_word_list
from .log import init_logging

logger = logging.getLogger(__name__)

URL = ('https://raw.githubusercontent.com/unicode-org/cldr-json/{ref}/cldr-json/'
       'cldr-segments-full/segments/{lang}/suppressions.json')
CLDR_LANGUAGES = tuple(lang for lang in LANGUAGES if lang != 'ac')
TIMEOUT = 30.0


def fetch_suppressions(client: httpx.Client, lang: str, ref: str = 'main') -> List[str]:
    url = URL.format(ref=ref, lang=lang)
    logger.info('fetching %s', url)
    response = client.get(url)
    response.raise_for_status()
    words = cldr_suppressions(response.json())
    logger.debug('%s has %d suppressions', lang, len(words))
    return words


def update_languages(client: httpx.Client, langs: List[str], output_dir: Path, ref: str = 'main'):
    for lang in langs:
        words = fetch_suppressions(client, lang, ref)
        if not words:
            raise ValueError(f'no suppressions for {lang}')
        path = output_dir / f'{lang}.txt'
        path.write_text(format_word_list(words), encoding='utf-8')
        logger.info('wrote %d words to %s', len(words), path)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='python -m mdreflow.cldr', description=__doc__.splitlines()[0])
    parser.add_argument('langs', nargs='*', metavar='LANG',
                        help=f"Languages to regenerate, among {', '.join(CLDR_LANGUAGES)} (default: all)")
    parser.add_argument('--ref', default='main', help='Branch or tag of cldr-json (default: main)')
    parser.add_argument('--output-dir', type=Path, default=Path(__file__).parent / 'lang',
                        help='Where to write the word lists (default: the package data)')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Log more')
    args = parser.parse_args(argv)
    unknown = [lang for lang in args.langs if lang not in CLDR_LANGUAGES]
    if unknown:
        parser.error(f"unknown languages: {', '.join(unknown)}")
    init_logging(args.verbose + 1)
    try:
        with httpx.Client(timeout=TIMEOUT, follow_redirects=True) as client:
            update_languages(client, args.langs or list(CLDR_LANGUAGES), args.output_dir, args.ref)
    except (httpx.HTTPError, ValueError, OSError) as err:
        logger.error('%s', err)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
