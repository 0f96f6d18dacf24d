from __future__ import annotations

import json
from pathlib import Path

import pytest

import i18n


@pytest.fixture(autouse=True)
def _reset_catalog():
    yield
    i18n.init("en")


def test_lookup_with_placeholders() -> None:
    i18n.init("en")

    assert i18n.t("cli.running", command="ls -la") == "Running: ls -la"
    assert i18n.t("cli.version", version="1.0.0") == "langterm version 1.0.0"


def test_unknown_key_falls_back_to_key() -> None:
    i18n.init("en")

    assert i18n.t("no.such.key") == "no.such.key"


def test_missing_placeholder_leaves_text_alone() -> None:
    i18n.init("en")

    assert i18n.t("cli.running") == "Running: {command}"


def test_locale_overlay_and_language_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "en.json").write_text(
        json.dumps({"cli.cancelled": "Cancelled.", "cli.thinking": "Thinking…"}), encoding="utf-8"
    )
    (tmp_path / "es.json").write_text(json.dumps({"cli.cancelled": "Cancelado."}), encoding="utf-8")
    monkeypatch.setattr(i18n, "_find_locales_dir", lambda: tmp_path)

    i18n.init("es_ES")

    assert i18n.t("cli.cancelled") == "Cancelado."
    assert i18n.t("cli.thinking") == "Thinking…"


def test_detect_locale_defaults_to_english(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LANG", "C.UTF-8")
    assert i18n._detect_locale() == "en"

    monkeypatch.setenv("LANG", "de_DE.UTF-8")
    assert i18n._detect_locale() == "de_DE"


def test_unknown_language_uses_english_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "en.json").write_text(json.dumps({"cli.cancelled": "Cancelled."}), encoding="utf-8")
    (tmp_path / "es.json").write_text(json.dumps({"cli.cancelled": "Cancelado."}), encoding="utf-8")
    monkeypatch.setattr(i18n, "_find_locales_dir", lambda: tmp_path)

    i18n.init("es")
    i18n.init("fr_FR")

    assert i18n.t("cli.cancelled") == "Cancelled."
