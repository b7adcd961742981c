"""Stylesheets for the HTML preview page, stored as ``themes/<name>.css``."""
from pathlib import Path
from typing import List

THEMES_DIR = Path(__file__).parent / "themes"


def get_css(theme: str = "default") -> str:
    """
    Return the preview stylesheet named *theme*.

    Raises:
        ValueError: If the name has characters other than letters, digits,
            ``_`` and ``-``
        FileNotFoundError: If no such stylesheet ships with md2svg
    """
    if not theme or not theme.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid theme name: {theme}")

    theme_path = THEMES_DIR / f"{theme}.css"
    if not theme_path.is_file():
        raise FileNotFoundError(
            f"Theme '{theme}' not found. Available themes: {list_available_themes()}"
        )
    return theme_path.read_text(encoding="utf-8")


def list_available_themes() -> List[str]:
    """Names accepted by ``--theme``, sorted."""
    return sorted(f.stem for f in THEMES_DIR.glob("*.css") if f.is_file())


def validate_theme(theme: str) -> bool:
    try:
        get_css(theme)
    except (FileNotFoundError, ValueError):
        return False
    return True
