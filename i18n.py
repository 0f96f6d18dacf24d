"""
Lightweight i18n module for Langterm.

Usage:
    import i18n
    i18n.init()                                   # detect locale, load strings
    i18n.t('cli.cancelled')                       # → "Cancelled."
    i18n.t('cli.running', command='ls -la')       # → "Running: ls -la"
"""

import json
import os
import sys
from pathlib import Path

_strings: dict = {}


def _detect_locale() -> str:
    """Detect language code from LANG environment variable."""
    lang = os.environ.get('LANG', '')
    # e.g. "es_ES.UTF-8" → "es_ES" → try exact then language-only
    code = lang.split('.')[0]
    return code if code and code not in ('C', 'POSIX') else 'en'


def _resolve_locale(code: str, locales_dir: Path) -> str:
    """Resolve locale code to an available JSON file.

    Resolution order: exact match (en_GB) → language only (en) → fallback 'en'.
    """
    if (locales_dir / f'{code}.json').is_file():
        return code
    lang = code.split('_')[0]
    if lang != code and (locales_dir / f'{lang}.json').is_file():
        return lang
    return 'en'


def _find_locales_dir() -> Path:
    """Locate the locales/ directory, handling source checkouts and installs."""
    local_dir = Path(__file__).resolve().parent / 'locales'
    if local_dir.is_dir():
        return local_dir
    # setup.py installs the catalogs as data_files under the prefix
    return Path(sys.prefix) / 'share' / 'langterm' / 'locales'


def init(locale_override: str = None):
    """Initialize i18n: detect locale, load base English + locale overlay."""
    global _strings

    locales_dir = _find_locales_dir()
    _strings = {}

    en_path = locales_dir / 'en.json'
    if en_path.is_file():
        with open(en_path, encoding='utf-8') as f:
            _strings = json.load(f)

    raw_code = locale_override or _detect_locale()
    code = _resolve_locale(raw_code, locales_dir)

    # Overlay locale-specific strings on top of English base
    if code != 'en':
        loc_path = locales_dir / f'{code}.json'
        if loc_path.is_file():
            with open(loc_path, encoding='utf-8') as f:
                _strings.update(json.load(f))


def t(key: str, **kwargs) -> str:
    """Look up a translated string by key, with optional placeholder interpolation.

    Placeholders use {name} syntax: t('cli.running', command='ls -la')
    Unknown keys come back unchanged so a missing catalog never hides output.
    """
    if not _strings:
        init()
    text = _strings.get(key, key)

    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass

    return text
