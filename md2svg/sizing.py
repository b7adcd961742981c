"""Canvas width policies shared by the conversion methods."""

SVG_MAX_WIDTH = 400  # Maximum SVG width used across all methods
DEFAULT_WIDTH = 200
SHORT_CONTENT_LENGTH = 100
MEDIUM_CONTENT_LENGTH = 500
MEDIUM_CONTENT_WIDTH = 300
MIN_WIDTH = 100

NATIVE_PLACEHOLDER_HEIGHT = 600  # replaced by the real extent after layout
NATIVE_PADDING = 20
NATIVE_LINE_HEIGHT = 24


def _short_content_width(length: int) -> int:
    return max(length * 2, MIN_WIDTH)


def native_canvas_width(length: int) -> int:
    """
    Width for the native layout emitter.

    Short input (< 100 characters) gets ``max(2 * length, 100)``; anything
    longer stays at the 200 default.  Unlike :func:`html_canvas_width` there
    is no 300/400 tier here.
    """
    width = DEFAULT_WIDTH
    if length < SHORT_CONTENT_LENGTH:
        width = _short_content_width(length)
    return min(width, SVG_MAX_WIDTH)


def html_canvas_width(length: int) -> int:
    """Width for the foreignObject, canvas and dom-to-svg methods."""
    if length < SHORT_CONTENT_LENGTH:
        width = _short_content_width(length)
    elif length < MEDIUM_CONTENT_LENGTH:
        width = MEDIUM_CONTENT_WIDTH
    else:
        width = SVG_MAX_WIDTH
    return min(width, SVG_MAX_WIDTH)
