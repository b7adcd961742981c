"""Test theme loader functionality."""

import pytest
from md2svg.theme_loader import get_css, list_available_themes, validate_theme


def test_get_css_default():
    """Test that default theme loads and returns CSS content."""
    css = get_css("default")

    assert isinstance(css, str)
    assert len(css) > 0

    assert "body" in css
    assert ".md2svg-preview" in css
    assert "font-family" in css


def test_get_css_dark():
    """Test that dark theme loads and returns CSS content."""
    css = get_css("dark")

    assert ".md2svg-preview" in css
    assert "#1a1a1a" in css  # Dark background color


def test_get_css_invalid_theme():
    """Test that invalid theme names raise appropriate errors."""
    with pytest.raises(FileNotFoundError):
        get_css("nonexistent")

    # Invalid characters (path traversal attempt)
    with pytest.raises(ValueError):
        get_css("../evil")

    with pytest.raises(ValueError):
        get_css("theme/../../evil")

    with pytest.raises(ValueError):
        get_css("")


def test_list_available_themes():
    themes = list_available_themes()

    assert isinstance(themes, list)
    assert themes == sorted(themes)
    assert "default" in themes
    assert "dark" in themes


def test_validate_theme():
    assert validate_theme("default") is True
    assert validate_theme("dark") is True

    assert validate_theme("nonexistent") is False
    assert validate_theme("../evil") is False


def test_css_content_quality():
    """Both themes style the rendered markdown elements and differ."""
    default_css = get_css("default")
    dark_css = get_css("dark")

    for selector in ("h1", "h2", "pre", "code"):
        assert selector in default_css
        assert selector in dark_css

    assert dark_css != default_css
    assert len(default_css) > 100
    assert len(dark_css) > 100
