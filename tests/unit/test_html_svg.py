"""Test the browser backed conversion methods against an in-memory page."""

import base64
import xml.etree.ElementTree as ET
from unittest import mock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from md2svg.browser import CONTAINER_ID
from md2svg.html_svg import (
    CANVAS_ERROR_HINT,
    DOM_TO_SVG_ERROR_HINT,
    DOM_TO_SVG_URL,
    error_svg,
    html_to_canvas_svg,
    html_to_dom_to_svg_module_svg,
    html_to_foreign_object_svg,
)

SVG = "{http://www.w3.org/2000/svg}"


def test_error_svg_escapes_message():
    svg = error_svg("bad <input> & more", "hint")
    root = ET.fromstring(svg)

    assert root.get("width") == "400"
    assert root.get("height") == "200"
    first, second = root.findall(f"{SVG}text")
    assert first.text == "Error: bad <input> & more"
    assert second.text == "hint"


def test_error_svg_drops_control_characters():
    root = ET.fromstring(error_svg("page\x0cbreak", "\x1b[0m"))
    first, second = root.findall(f"{SVG}text")
    assert first.text == "Error: pagebreak"
    assert second.text == "[0m"


class TestForeignObject:
    @pytest.mark.asyncio
    async def test_size_from_scroll_height(self, fake_browser):
        fake_browser.page.evaluate_results = [123]
        html = "<p>hi</p>"

        svg = await html_to_foreign_object_svg(html)
        root = ET.fromstring(svg)

        assert (root.get("width"), root.get("height")) == ("100", "123")
        assert root.get("viewBox") == "0 0 100 123"
        foreign = root.find(f"{SVG}foreignObject")
        assert foreign.get("width") == "100"
        assert foreign.get("height") == "123"
        div = foreign.find("{http://www.w3.org/1999/xhtml}div")
        assert "width: 100px; height: 123px" in div.get("style")
        assert "<p>hi</p>" in svg

        assert CONTAINER_ID in fake_browser.page.content
        assert "width: 100px" in fake_browser.page.content
        assert len(fake_browser.page.evaluated) == 1
        assert fake_browser.closed

    @pytest.mark.asyncio
    async def test_width_follows_html_policy(self, fake_browser):
        fake_browser.page.evaluate_results = [50]
        svg = await html_to_foreign_object_svg("<p>" + "x" * 300 + "</p>")
        assert 'width="300" height="50"' in svg

    @pytest.mark.asyncio
    async def test_loads_from_temp_dir(self, fake_browser, tmp_path):
        fake_browser.page.evaluate_results = [10]
        await html_to_foreign_object_svg("<p>x</p>", temp_dir=tmp_path)

        page_file = tmp_path / "foreign_object.html"
        assert page_file.exists()
        assert fake_browser.page.url == f"file://{page_file}"
        assert fake_browser.page.content is None

    @pytest.mark.asyncio
    async def test_browser_errors_propagate(self, fake_browser):
        fake_browser.page.evaluate = mock.AsyncMock(side_effect=PlaywrightError("page crashed"))

        with pytest.raises(PlaywrightError):
            await html_to_foreign_object_svg("<p>x</p>")
        assert fake_browser.closed


class TestCanvas:
    @pytest.mark.asyncio
    async def test_png_embedded_at_pixel_size(self, fake_browser, png_element):
        element = png_element(600, 400)
        png = element.png_bytes
        fake_browser.page.evaluate_results = [200]
        fake_browser.page.element = element
        html = "<p>" + "y" * 200 + "</p>"

        svg = await html_to_canvas_svg(html)
        root = ET.fromstring(svg)

        assert (root.get("width"), root.get("height")) == ("600", "400")
        assert root.get("viewBox") == "0 0 600 400"
        image = root.find(f"{SVG}image")
        href = image.get("{http://www.w3.org/1999/xlink}href")
        assert href.startswith("data:image/png;base64,")
        assert base64.b64decode(href.split(",", 1)[1]) == png

        assert fake_browser.page_options == {
            "viewport": {"width": 300, "height": 600},
            "device_scale_factor": 2,
        }
        assert fake_browser.page.viewport_sizes == [{"width": 300, "height": 200}]
        assert fake_browser.page.element.screenshot_options == {"type": "png", "omit_background": False}
        assert fake_browser.closed

    @pytest.mark.asyncio
    async def test_missing_container_returns_error_svg(self, fake_browser):
        fake_browser.page.evaluate_results = [100]
        fake_browser.page.element = None

        svg = await html_to_canvas_svg("<p>x</p>")

        assert 'width="400" height="200"' in svg
        assert "Conversion container was not rendered" in svg
        assert CANVAS_ERROR_HINT in svg

    @pytest.mark.asyncio
    async def test_launch_failure_returns_error_svg(self, fake_browser):
        fake_browser.playwright.chromium.launch.side_effect = PlaywrightError("no chromium")

        svg = await html_to_canvas_svg("<p>x</p>")

        assert "Error: no chromium" in svg
        assert CANVAS_ERROR_HINT in svg


class TestDomToSvg:
    @pytest.mark.asyncio
    async def test_module_output_returned(self, fake_browser):
        produced = '<svg xmlns="http://www.w3.org/2000/svg" width="100" viewBox="-5 0 110 40"></svg>'
        fake_browser.page.evaluate_results = [produced]

        svg = await html_to_dom_to_svg_module_svg("<p>hi</p>")

        assert svg == produced
        (script,) = fake_browser.page.script_tags
        assert script["type"] == "module"
        assert DOM_TO_SVG_URL in script["content"]
        ((_, width),) = fake_browser.page.evaluated
        assert width == 100

    @pytest.mark.asyncio
    async def test_custom_module_url(self, fake_browser):
        fake_browser.page.evaluate_results = ["<svg/>"]
        await html_to_dom_to_svg_module_svg("<p>x</p>", dom_to_svg_url="http://localhost:8000/dom-to-svg.js")
        assert "http://localhost:8000/dom-to-svg.js" in fake_browser.page.script_tags[0]["content"]

    @pytest.mark.asyncio
    async def test_module_not_loaded_returns_error_svg(self, fake_browser):
        fake_browser.page.wait_error = PlaywrightTimeoutError("Timeout 10000ms exceeded")

        svg = await html_to_dom_to_svg_module_svg("<p>x</p>")

        assert "dom-to-svg module not loaded properly" in svg
        assert DOM_TO_SVG_ERROR_HINT in svg
        assert fake_browser.page.evaluated == []
        assert fake_browser.closed

    @pytest.mark.asyncio
    async def test_empty_result_returns_error_svg(self, fake_browser):
        fake_browser.page.evaluate_results = [""]

        svg = await html_to_dom_to_svg_module_svg("<p>x</p>")

        assert "empty document" in svg
        assert 'width="400" height="200"' in svg
