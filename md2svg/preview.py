"""
HTML preview helpers: natural content width and a standalone preview page.
"""

import logging
from pathlib import Path
from typing import Optional

from .browser import CONTAINER_ID, container_document, load_html, open_page
from .sizing import MIN_WIDTH, SVG_MAX_WIDTH
from .theme_loader import get_css

logger = logging.getLogger(__name__)

PREVIEW_PADDING = 10
# Block elements whose unwrapped width decides the preview width
MEASURED_BLOCKS = "p, h1, h2, h3, h4, h5, h6, ul, ol, li, blockquote, pre, table"

_NATURAL_WIDTH_JS = f"""() => {{
    const root = document.getElementById('{CONTAINER_ID}');
    const blocks = root.querySelectorAll('{MEASURED_BLOCKS}');
    let maxLineWidth = 0;
    if (blocks.length > 0) {{
        for (const element of blocks) {{
            const wrapper = document.createElement('div');
            wrapper.style.position = 'absolute';
            wrapper.style.visibility = 'hidden';
            wrapper.style.display = 'inline-block';
            wrapper.style.whiteSpace = 'nowrap';
            wrapper.appendChild(element.cloneNode(true));
            document.body.appendChild(wrapper);
            maxLineWidth = Math.max(maxLineWidth, wrapper.getBoundingClientRect().width);
            document.body.removeChild(wrapper);
        }}
    }} else {{
        root.style.whiteSpace = 'nowrap';
        maxLineWidth = root.getBoundingClientRect().width;
    }}
    return maxLineWidth;
}}"""


def clamp_preview_width(measured_width: float) -> float:
    """Add the preview gutter to a measured width and clamp it to [100, 400]."""
    return max(min(measured_width + 2 * PREVIEW_PADDING, SVG_MAX_WIDTH), MIN_WIDTH)


async def measure_natural_content_width(html_content: str, *, temp_dir: Optional[Path] = None,
                                        debug: bool = False) -> float:
    """
    Measure the widest unwrapped block of *html_content* in a browser.

    Returns:
        Preview width in pixels, between 100 and 400
    """
    document = container_document(
        html_content or "", None,
        extra_style="position: absolute; visibility: hidden; display: inline-block;",
    )
    async with open_page(debug=debug) as page:
        await load_html(page, document, temp_dir, "measure.html")
        measured = float(await page.evaluate(_NATURAL_WIDTH_JS))

    width = clamp_preview_width(measured)
    if debug:
        logger.info("Natural content width %.1fpx -> preview width %.1fpx", measured, width)
    return width


def build_preview_html(html_content: str, width: float, theme: str = "default") -> str:
    """Standalone HTML page showing *html_content* at the given preview width."""
    css = get_css(theme)
    width_px = f"{width:g}px"
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Markdown Preview</title>
<style>
{css}
</style>
</head>
<body>
<div class="md2svg-preview" style="width: {width_px}; max-width: {width_px}; padding: {PREVIEW_PADDING}px;">
{html_content}
</div>
</body>
</html>
"""
