import io
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

import pytest

# Ensure project root is on sys.path so `import md2svg` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def make_png(width, height):
    """Encode a blank PNG of the given pixel size."""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class FakeElement:
    def __init__(self, png_bytes):
        self.png_bytes = png_bytes
        self.screenshot_options = None

    async def screenshot(self, **options):
        self.screenshot_options = options
        return self.png_bytes


class FakePage:
    """Records what the conversion code asks of the browser page."""

    def __init__(self):
        self.evaluate_results = []
        self.evaluated = []
        self.content = None
        self.url = None
        self.viewport_sizes = []
        self.script_tags = []
        self.element = None
        self.wait_error = None

    async def set_content(self, html):
        self.content = html

    async def goto(self, url):
        self.url = url

    async def set_viewport_size(self, size):
        self.viewport_sizes.append(size)

    async def evaluate(self, expression, arg=None):
        self.evaluated.append((expression, arg))
        return self.evaluate_results.pop(0)

    async def query_selector(self, selector):
        return self.element

    async def add_script_tag(self, **options):
        self.script_tags.append(options)

    async def wait_for_function(self, expression, **options):
        if self.wait_error is not None:
            raise self.wait_error


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.page_options = None
        self.closed = False

    async def new_page(self, **options):
        self.page_options = options
        return self.page

    async def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self, browser):
        self.chromium = SimpleNamespace(launch=mock.AsyncMock(return_value=browser))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture
def png_element():
    """Factory for a screenshot target returning a blank PNG of the given size."""
    return lambda width, height: FakeElement(make_png(width, height))


@pytest.fixture
def fake_browser(monkeypatch):
    """Replace Playwright with an in-memory browser; yields the FakeBrowser."""
    import md2svg.browser

    browser = FakeBrowser(FakePage())
    playwright = FakePlaywright(browser)
    monkeypatch.setattr(md2svg.browser, "async_playwright", lambda: playwright)
    browser.playwright = playwright
    return browser
