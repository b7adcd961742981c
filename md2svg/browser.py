#!/usr/bin/env python3
"""
Headless browser helpers for the HTML based conversion methods.

Every call launches its own Chromium through Playwright and closes it when
the ``async with`` block exits, so concurrent conversions never share a
page.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    '--allow-file-access-from-files',
    '--disable-web-security',
    '--allow-file-access',
]

PREVIEW_FONT_FAMILY = "'Segoe UI', Tahoma, Geneva, Verdana, sans-serif"
CONTAINER_ID = "md2svg-container"


@asynccontextmanager
async def open_page(viewport: Optional[Dict] = None, device_scale_factor: Optional[float] = None,
                    debug: bool = False) -> AsyncIterator:
    """
    Launch a headless Chromium and yield a fresh page.

    Args:
        viewport: Optional ``{'width': ..., 'height': ...}`` in CSS pixels
        device_scale_factor: Pixel ratio for screenshots (e.g. 2)
        debug: Log browser lifecycle events
    """
    page_options = {}
    if viewport:
        page_options['viewport'] = viewport
    if device_scale_factor:
        page_options['device_scale_factor'] = device_scale_factor

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True, args=BROWSER_ARGS)
        try:
            page = await browser.new_page(**page_options)
            if debug:
                logger.info("Browser page opened (%s)", page_options or "default viewport")
            yield page
        finally:
            await browser.close()


async def load_html(page, html_document: str, temp_dir: Optional[Path] = None,
                    filename: str = "md2svg_page.html") -> None:
    """
    Load a full HTML document into *page*.

    With a *temp_dir* the document is written to disk and opened through a
    ``file://`` URL, which lets relative assets resolve; otherwise it is set
    directly as page content.
    """
    if temp_dir:
        html_file_path = os.path.join(str(temp_dir), filename)
        with open(html_file_path, 'w', encoding='utf-8') as f:
            f.write(html_document)
        await page.goto(f'file://{html_file_path}')
    else:
        await page.set_content(html_document)


def container_document(html_content: str, width: Optional[int], *, extra_style: str = "") -> str:
    """
    Wrap *html_content* in a measurement page.

    The content sits in a ``#md2svg-container`` div with the preview font
    and 10px padding, ``width`` pixels wide unless *width* is None.
    """
    style = ""
    if width is not None:
        style += f"width: {width}px; "
    style += (
        f"font-family: {PREVIEW_FONT_FAMILY}; "
        "padding: 10px; margin: 0; box-sizing: border-box; "
        f"{extra_style}"
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<style>
body {{ margin: 0; padding: 0; background: white; }}
</style>
</head>
<body>
<div id="{CONTAINER_ID}" style="{style}">{html_content}</div>
</body>
</html>"""
