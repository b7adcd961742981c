#!/usr/bin/env python3
"""
Converters facade tying the markdown parser to the four SVG methods.
"""

import logging
from pathlib import Path
from typing import Optional

from .html_svg import (
    DOM_TO_SVG_URL,
    html_to_canvas_svg,
    html_to_dom_to_svg_module_svg,
    html_to_foreign_object_svg,
)
from .markdown_parser import MarkdownParser
from .models import SvgDocument
from .native_svg import render_native_svg
from .preview import build_preview_html, measure_natural_content_width
from .theme_loader import get_css

logger = logging.getLogger(__name__)

METHOD_NATIVE = "native"
METHOD_FOREIGN_OBJECT = "foreignObject"
METHOD_CANVAS = "canvas"
METHOD_DOM_TO_SVG = "domToSvgModule"

METHODS = (METHOD_NATIVE, METHOD_FOREIGN_OBJECT, METHOD_CANVAS, METHOD_DOM_TO_SVG)


class Converters:
    """
    Markdown to SVG conversion methods.

    The native method is synchronous and self-contained.  The three HTML
    methods are coroutines that drive a headless browser.
    """

    def __init__(
        self,
        *,
        theme: str = "default",
        temp_dir: Optional[Path] = None,
        debug: bool = False,
        dom_to_svg_url: str = DOM_TO_SVG_URL,
        parser: Optional[MarkdownParser] = None,
    ):
        """
        Args:
            theme: Preview stylesheet name (see :mod:`md2svg.theme_loader`)
            temp_dir: Directory for browser scratch pages; None loads pages
                from memory
            debug: Enable verbose logging
            dom_to_svg_url: ES module URL the dom-to-svg method imports
            parser: Markdown parser to use instead of a default one
        """
        get_css(theme)  # fail fast on unknown themes
        self.theme = theme
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.debug = debug
        self.dom_to_svg_url = dom_to_svg_url
        self.parser = parser or MarkdownParser(debug=debug)

    def markdown_to_html(self, markdown_text: str) -> str:
        """Convert markdown to sanitized HTML."""
        return self.parser.parse(markdown_text)

    def render_native(self, markdown_text: str) -> SvgDocument:
        """Native layout of *markdown_text*, with its canvas size."""
        tokens = self.parser.lex(markdown_text or "")
        return render_native_svg(tokens, markdown_text or "", debug=self.debug)

    def markdown_to_native_svg(self, markdown_text: str) -> str:
        """Method 1: lay markdown out directly as native SVG elements."""
        return self.render_native(markdown_text).svg

    async def html_to_foreign_object_svg(self, html_content: str) -> str:
        """Method 2: embed HTML in a foreignObject."""
        return await html_to_foreign_object_svg(html_content, temp_dir=self.temp_dir, debug=self.debug)

    async def html_to_canvas_svg(self, html_content: str) -> str:
        """Method 3: rasterize HTML and embed the PNG."""
        return await html_to_canvas_svg(html_content, temp_dir=self.temp_dir, debug=self.debug)

    async def html_to_dom_to_svg_module_svg(self, html_content: str) -> str:
        """Method 4: serialize the rendered DOM with dom-to-svg."""
        return await html_to_dom_to_svg_module_svg(
            html_content,
            dom_to_svg_url=self.dom_to_svg_url,
            temp_dir=self.temp_dir,
            debug=self.debug,
        )

    async def measure_natural_content_width(self, html_content: str) -> float:
        return await measure_natural_content_width(html_content, temp_dir=self.temp_dir, debug=self.debug)

    async def preview_html(self, markdown_text: str) -> str:
        """Standalone HTML preview page sized to the content's natural width."""
        html = self.markdown_to_html(markdown_text)
        width = await self.measure_natural_content_width(html)
        return build_preview_html(html, width, self.theme)

    async def convert(self, markdown_text: str, method: str = METHOD_NATIVE) -> str:
        """
        Convert markdown with the named method.

        Unknown method names fall back to the native method.
        """
        if method not in METHODS:
            logger.warning("Unknown conversion method %r, using %s", method, METHOD_NATIVE)
            method = METHOD_NATIVE

        if self.debug:
            logger.info("Converting %d characters with the %s method", len(markdown_text or ""), method)

        if method == METHOD_NATIVE:
            return self.markdown_to_native_svg(markdown_text)

        html = self.markdown_to_html(markdown_text)
        if method == METHOD_FOREIGN_OBJECT:
            return await self.html_to_foreign_object_svg(html)
        if method == METHOD_CANVAS:
            return await self.html_to_canvas_svg(html)
        return await self.html_to_dom_to_svg_module_svg(html)
