"""Built-in keep words per language, shipped as package data."""

import textwrap
from importlib import resources
from typing import List, Optional

LANGUAGES = ('ac', 'de', 'en', 'es', 'fr', 'it')
NO_LANGUAGE = 'none'


def load(lang: str) -> Optional[str]:
    """Return the whitespace separated keep words for lang, None if unknown."""
    if lang not in LANGUAGES:
        return None
    return resources.files(__package__).joinpath('lang', f'{lang}.txt').read_text(encoding='utf-8')


def keep_word_list(langs: str) -> str:
    """Concatenate the keep words of all space separated languages in langs."""
    words = []
    unknown = []
    for lang in langs.split():
        if lang == NO_LANGUAGE:
            continue
        text = load(lang)
        if text is None:
            unknown.append(lang)
        else:
            words.append(text)
    if unknown:
        raise ValueError(f"unknown or unsupported languages: {', '.join(unknown)}; "
                         f"choose from {', '.join(LANGUAGES + (NO_LANGUAGE,))}")
    return ' '.join(words)


def cldr_suppressions(data: dict) -> List[str]:
    """Sentence break suppressions of a CLDR segments/<lang>/suppressions.json document."""
    try:
        entries = data['segments']['segmentations']['SentenceBreak']['standard']
    except (KeyError, TypeError) as err:
        raise ValueError(f'not a CLDR suppressions document: missing {err}') from err
    return [entry['suppression'] for entry in entries if entry.get('suppression')]


def format_word_list(words: List[str], width: int = 80) -> str:
    """Words in the layout of the package data files, one file per language."""
    return textwrap.fill(' '.join(words), width, break_long_words=False, break_on_hyphens=False) + '\n'
