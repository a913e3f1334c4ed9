"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import crateback.core.theme as theme_module
import pytest
from crateback.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_theme,
    get_user_theme_path,
    load_theme,
)
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_accepts_short_and_long_hex(self) -> None:
        """#RGB and #RRGGBB are both valid."""
        colors = ThemeColors(text="#abc", header="#A1B2C3")
        assert colors.text == "#abc"
        assert colors.header == "#A1B2C3"

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("ffffff", "must start with '#'"),
            ("#ff", "must be #RGB or #RRGGBB"),
            ("#gggggg", "invalid hex color"),
        ],
    )
    def test_invalid_colors(self, value: str, message: str) -> None:
        """Malformed colors are rejected with a specific message."""
        with pytest.raises(ValueError, match=message):
            ThemeColors(text=value)

    def test_extra_fields_forbidden(self) -> None:
        """Unknown color names are rejected."""
        with pytest.raises(ValueError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_loads_colors(self, tmp_path: Path) -> None:
        """String values of the colors table are returned."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nsize = 3\n')
        assert _load_toml_colors(theme_file) == {"text": "#000000"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files give None."""
        assert _load_toml_colors(tmp_path / "nope.toml") is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Malformed TOML gives None."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml")
        assert _load_toml_colors(theme_file) is None

    def test_colors_not_a_table(self, tmp_path: Path) -> None:
        """A non-table colors key gives None."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')
        assert _load_toml_colors(theme_file) is None


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_bundled_theme(self, tmp_path: Path) -> None:
        """Without user theme the bundled colors apply."""
        with patch("crateback.core.theme.get_user_theme_path", return_value=tmp_path / "x.toml"):
            colors = load_theme()
        assert colors == ThemeColors()

    def test_user_overrides(self, tmp_path: Path) -> None:
        """User colors override bundled ones individually."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nadded = "#00ff00"\n')

        with patch("crateback.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors.added == "#00ff00"
        assert colors.removed == ThemeColors().removed

    def test_invalid_user_color_falls_back(self, tmp_path: Path) -> None:
        """An invalid user color falls back to defaults."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nadded = "green"\n')

        with patch("crateback.core.theme.get_user_theme_path", return_value=user_theme):
            colors = load_theme()

        assert colors == ThemeColors()

    def test_user_theme_path(self, isolated_dirs: Path) -> None:
        """The user theme lives in the config directory."""
        assert get_user_theme_path() == isolated_dirs / ".config" / "crateback" / "theme.toml"


class TestGetRichTheme:
    """Tests for Rich theme generation."""

    def test_styles(self) -> None:
        """Semantic and plan styles are defined."""
        theme = get_rich_theme(ThemeColors())
        assert isinstance(theme, Theme)
        for name in ("muted", "border", "success", "error", "added", "removed", "changed"):
            assert name in theme.styles
        assert theme.styles["error"].bold

    def test_get_theme_cached(self) -> None:
        """get_theme returns the same instance until the cache is reset."""
        with patch.object(theme_module, "_cached_theme", None):
            first = get_theme()
            assert get_theme() is first
