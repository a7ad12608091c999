from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ThemeSettings:
    primary_color: str = "#000000"
    secondary_color: str = "#f5f5f5"
    accent_color: str = "#ef4444"
    background_color: str = "#ffffff"
    text_color: str = "#1f2937"
    font_family: str = "Inter"
    border_radius: str = "8px"
    button_style: str = "filled"

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_THEME = ThemeSettings()

THEME_KEYS = frozenset(f.name for f in fields(ThemeSettings))


def resolve_theme(overrides: Optional[Mapping[str, Any]]) -> ThemeSettings:
    """
    Merge persisted page overrides onto the default theme.

    Only known tokens with non-empty string values are taken; anything
    else falls back to the default so a theme is always resolvable.
    """
    if not overrides or not isinstance(overrides, Mapping):
        return DEFAULT_THEME

    picked = {
        key: value
        for key, value in overrides.items()
        if key in THEME_KEYS and isinstance(value, str) and value.strip()
    }
    return replace(DEFAULT_THEME, **picked)
