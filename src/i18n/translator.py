"""
src/i18n/translator.py
───────────────────────
JSON locale lookup for the dashboard (Chinese first, English second).

Usage:
    from src.i18n.translator import t, set_lang

    t("nav.overview")                          # → "总览"
    t("nav.overview", "en")                    # → "Overview"
    t("export.done", "en", rows=12, size="3 KB")
    set_lang("en")

Unknown languages resolve to Chinese; unknown keys resolve to the key itself
so a missing entry shows up on screen instead of failing a callback.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from config.settings import settings

_LOCALES_DIR = Path(__file__).parent / "locales"
SUPPORTED_LANGS = ("zh", "en")
FALLBACK_LANG = "zh"


def _normalize(lang: str | None) -> str:
    return lang if lang in SUPPORTED_LANGS else FALLBACK_LANG


_current_lang: str = _normalize(settings.DEFAULT_LANG)


@lru_cache(maxsize=len(SUPPORTED_LANGS))
def _load_locale(lang: str) -> dict:
    with open(_LOCALES_DIR / f"{lang}.json", encoding="utf-8") as f:
        return json.load(f)


def _lookup(locale: dict, key: str) -> str | None:
    node: dict | str = locale
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def set_lang(lang: str) -> None:
    """Set the module default language; anything unsupported becomes zh."""
    global _current_lang
    _current_lang = _normalize(lang)


def get_lang() -> str:
    return _current_lang


def t(key: str, lang: str | None = None, **params) -> str:
    """
    Translate a dot-separated key, e.g. "alarms.title".

    `params` fill `{name}` placeholders; a template whose placeholders are
    not all supplied is returned unformatted.
    """
    text = _lookup(_load_locale(_normalize(lang or _current_lang)), key)
    if text is None:
        return key
    if params:
        try:
            return text.format(**params)
        except KeyError:
            return text
    return text
