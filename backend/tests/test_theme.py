"""Tests for theme resolution."""
from storefront.domain.theme import DEFAULT_THEME, resolve_theme


def test_missing_theme_resolves_to_defaults():
    assert resolve_theme(None) == DEFAULT_THEME
    assert resolve_theme({}) == DEFAULT_THEME
    assert DEFAULT_THEME.accent_color == "#ef4444"
    assert DEFAULT_THEME.font_family == "Inter"


def test_partial_overrides_merge_onto_defaults():
    theme = resolve_theme({"primary_color": "#123456"})
    assert theme.primary_color == "#123456"
    assert theme.background_color == DEFAULT_THEME.background_color


def test_unknown_and_blank_values_are_ignored():
    theme = resolve_theme({"primary_color": "", "font_family": 12, "sparkle": "yes"})
    assert theme == DEFAULT_THEME


def test_non_mapping_overrides_are_ignored():
    assert resolve_theme(["#fff"]) == DEFAULT_THEME
