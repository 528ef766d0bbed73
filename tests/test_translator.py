"""
tests/test_translator.py
─────────────────────────
Tests for the JSON locale translator.
"""
import json
from pathlib import Path

import pytest

from src.i18n import translator
from src.i18n.translator import get_lang, set_lang, t

LOCALES = Path(translator.__file__).parent / "locales"


def _flat_keys(node: dict, prefix: str = "") -> set[str]:
    keys = set()
    for k, v in node.items():
        path = f"{prefix}{k}"
        if isinstance(v, dict):
            keys |= _flat_keys(v, f"{path}.")
        else:
            keys.add(path)
    return keys


@pytest.fixture
def restore_lang():
    previous = get_lang()
    yield
    set_lang(previous)


class TestTranslate:
    def test_explicit_lang(self):
        assert t("nav.overview", "zh") == "总览"
        assert t("nav.overview", "en") == "Overview"
        assert t("device.pd_source", "zh") == "局放源定位"

    def test_missing_key_returns_key(self):
        assert t("nav.nope", "en") == "nav.nope"
        assert t("nope.deeper.still", "zh") == "nope.deeper.still"

    def test_section_key_returns_key(self):
        assert t("nav", "en") == "nav"

    def test_unknown_lang_falls_back(self):
        assert t("nav.overview", "fr") == "总览"

    def test_params(self):
        assert t("export.done", "en", rows=12, size="3.00 KB") == "Exported 12 rows · 3.00 KB"
        assert t("export.done", "zh", rows=5, size="1 B") == "已导出 5 行 · 1 B"

    def test_missing_params_returns_template(self):
        assert t("export.done", "en", rows=3) == "Exported {rows} rows · {size}"

    def test_module_default(self, restore_lang):
        set_lang("en")
        assert get_lang() == "en"
        assert t("nav.overview") == "Overview"

    def test_invalid_set_lang(self, restore_lang):
        set_lang("de")
        assert get_lang() == "zh"


class TestLocaleFiles:
    def test_same_keys(self):
        zh = json.loads((LOCALES / "zh.json").read_text(encoding="utf-8"))
        en = json.loads((LOCALES / "en.json").read_text(encoding="utf-8"))
        assert _flat_keys(zh) == _flat_keys(en)
