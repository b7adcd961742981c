#!/usr/bin/env python3
"""
HTML to SVG conversion methods backed by a headless browser.

* foreignObject - embed the HTML, let the browser measure the height
* canvas        - rasterize the HTML and embed the PNG
* dom-to-svg    - serialize the rendered DOM with the ``dom-to-svg`` module

Layout is entirely the browser's; these functions only size the canvas and
wrap the result.
"""

import base64
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image
from playwright.async_api import Error as PlaywrightError

from .browser import CONTAINER_ID, PREVIEW_FONT_FAMILY, container_document, load_html, open_page
from .inline import escape_xml
from .sizing import SVG_MAX_WIDTH, html_canvas_width

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XHTML_NS = "http://www.w3.org/1999/xhtml"
XLINK_NS = "http://www.w3.org/1999/xlink"

CANVAS_SCALE = 2  # rasterize at twice the CSS resolution
MEASURE_VIEWPORT_HEIGHT = 600
ERROR_SVG_HEIGHT = 200

DOM_TO_SVG_URL = "https://cdn.jsdelivr.net/npm/dom-to-svg@0.12.2/+esm"
DOM_TO_SVG_LOAD_TIMEOUT_MS = 10000

CANVAS_ERROR_HINT = "Try a different conversion method or check console for details."
DOM_TO_SVG_ERROR_HINT = "This method requires serving the page via a web server due to ES module restrictions."

_SCROLL_HEIGHT_JS = f"() => document.getElementById('{CONTAINER_ID}').scrollHeight"

_DOM_TO_SVG_READY_JS = (
    "() => window.__md2svgDomToSvg !== undefined"
    " && typeof window.__md2svgDomToSvg.elementToSVG === 'function'"
)

_DOM_TO_SVG_SERIALIZE_JS = f"""(width) => {{
    const container = document.getElementById('{CONTAINER_ID}');
    const svgDocument = window.__md2svgDomToSvg.elementToSVG(container);
    if (svgDocument && svgDocument.documentElement) {{
        svgDocument.documentElement.setAttribute('width', width);
        svgDocument.documentElement.style.overflow = 'visible';
    }}
    return new XMLSerializer().serializeToString(svgDocument);
}}"""


class ConversionError(RuntimeError):
    """Raised when a browser based conversion cannot produce an SVG."""


class DomToSvgUnavailableError(ConversionError):
    """Raised when the dom-to-svg module cannot be loaded into the page."""


def error_svg(message: str, hint: str) -> str:
    """Visible placeholder SVG reporting a failed conversion."""
    return f"""<svg xmlns="{SVG_NS}" width="{SVG_MAX_WIDTH}" height="{ERROR_SVG_HEIGHT}" viewBox="0 0 {SVG_MAX_WIDTH} {ERROR_SVG_HEIGHT}">
    <text x="50" y="50" fill="red">Error: {escape_xml(message)}</text>
    <text x="50" y="80" fill="red">{escape_xml(hint)}</text>
</svg>"""


def _conversion_container(html_content: str, width: int) -> str:
    return container_document(
        html_content, width,
        extra_style="color: #333; max-width: 100%; background: white;",
    )


async def html_to_foreign_object_svg(html_content: str, *, temp_dir: Optional[Path] = None,
                                     debug: bool = False) -> str:
    """
    Embed HTML in an SVG ``foreignObject``.

    The width follows :func:`~md2svg.sizing.html_canvas_width`; the height is
    the ``scrollHeight`` the browser reports for the content at that width.
    Browser failures propagate to the caller.
    """
    html_content = html_content or ""
    width = html_canvas_width(len(html_content))

    document = container_document(html_content, width, extra_style="display: inline-block;")
    async with open_page(debug=debug) as page:
        await load_html(page, document, temp_dir, "foreign_object.html")
        height = int(await page.evaluate(_SCROLL_HEIGHT_JS))

    if debug:
        logger.info("foreignObject SVG canvas: %sx%s", width, height)

    div_style = (
        f"font-family: {PREVIEW_FONT_FAMILY}; color: #333; padding: 10px; margin: 0; "
        f"background-color: white; width: {width}px; height: {height}px; box-sizing: border-box;"
    )
    return f"""<svg xmlns="{SVG_NS}" width="{width}" height="{height}" viewBox="0 0 {width} {height}">
    <foreignObject width="{width}" height="{height}" x="0" y="0">
        <div xmlns="{XHTML_NS}" style="{div_style}">
            {html_content}
        </div>
    </foreignObject>
</svg>"""


async def html_to_canvas_svg(html_content: str, *, temp_dir: Optional[Path] = None,
                             debug: bool = False) -> str:
    """
    Rasterize HTML in the browser and embed the PNG in an SVG ``image``.

    The SVG is sized to the PNG's pixel dimensions (``CANVAS_SCALE`` times the
    CSS size).  Failures are logged and returned as an error SVG.
    """
    try:
        html_content = html_content or ""
        width = html_canvas_width(len(html_content))
        document = _conversion_container(html_content, width)

        viewport = {"width": width, "height": MEASURE_VIEWPORT_HEIGHT}
        async with open_page(viewport, device_scale_factor=CANVAS_SCALE, debug=debug) as page:
            await load_html(page, document, temp_dir, "canvas.html")

            # Grow the viewport to the content so the screenshot is not clipped
            content_height = int(await page.evaluate(_SCROLL_HEIGHT_JS))
            await page.set_viewport_size({"width": width, "height": max(content_height, 1)})

            element = await page.query_selector(f"#{CONTAINER_ID}")
            if element is None:
                raise ConversionError("Conversion container was not rendered")
            png_bytes = await element.screenshot(type="png", omit_background=False)

        with Image.open(io.BytesIO(png_bytes)) as image:
            canvas_width, canvas_height = image.size

        if debug:
            logger.info("Canvas SVG image: %sx%s", canvas_width, canvas_height)

        data_url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
        return f"""<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" width="{canvas_width}" height="{canvas_height}" viewBox="0 0 {canvas_width} {canvas_height}">
    <image width="{canvas_width}" height="{canvas_height}" xlink:href="{data_url}" />
</svg>"""
    except Exception as e:
        logger.error("Error in canvas to SVG conversion: %s", e)
        return error_svg(str(e), CANVAS_ERROR_HINT)


async def _load_dom_to_svg(page, url: str, timeout_ms: int) -> None:
    script = (
        f"import {{ elementToSVG }} from '{url}';\n"
        "window.__md2svgDomToSvg = { elementToSVG };"
    )
    try:
        await page.add_script_tag(content=script, type="module")
        await page.wait_for_function(_DOM_TO_SVG_READY_JS, timeout=timeout_ms)
    except PlaywrightError as e:
        raise DomToSvgUnavailableError(
            "dom-to-svg module not loaded properly. This method requires a server to work "
            "correctly due to ES module loading restrictions."
        ) from e


async def html_to_dom_to_svg_module_svg(html_content: str, *, dom_to_svg_url: str = DOM_TO_SVG_URL,
                                        temp_dir: Optional[Path] = None, debug: bool = False,
                                        load_timeout_ms: int = DOM_TO_SVG_LOAD_TIMEOUT_MS) -> str:
    """
    Serialize the rendered HTML with the ``dom-to-svg`` JavaScript module.

    The root ``width`` is forced to the computed canvas width and overflow
    is made visible; the module's viewBox is kept as produced so content at
    negative coordinates is preserved.  Failures are logged and returned as
    an error SVG.
    """
    try:
        html_content = html_content or ""
        width = html_canvas_width(len(html_content))
        document = _conversion_container(html_content, width)

        async with open_page(debug=debug) as page:
            await load_html(page, document, temp_dir, "dom_to_svg.html")
            await _load_dom_to_svg(page, dom_to_svg_url, load_timeout_ms)
            svg_string = await page.evaluate(_DOM_TO_SVG_SERIALIZE_JS, width)

        if not svg_string:
            raise ConversionError("dom-to-svg returned an empty document")

        if debug:
            logger.info("dom-to-svg SVG: width=%s, %d characters", width, len(svg_string))

        return svg_string
    except Exception as e:
        logger.error("Error in dom-to-svg module conversion: %s", e)
        return error_svg(str(e), DOM_TO_SVG_ERROR_HINT)
