"""md2svg – Markdown to SVG conversion

Exposes the public API (`Converters`, `render_native_svg`, etc.) **and** sets
up a minimal logging configuration so that every sub-module can call

```python
import logging
logger = logging.getLogger(__name__)
```

and honour a single environment variable `MD2SVG_LOG_LEVEL`.
"""

from __future__ import annotations

import logging
import os

# ------------------------------------------------------------------
# Default logging – honour env var, otherwise INFO.
# ------------------------------------------------------------------
LOG_LEVEL = os.getenv("MD2SVG_LOG_LEVEL", "INFO").upper()
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# Public API re-exports ------------------------------------------------
from .converters import Converters  # noqa: E402  (import after logger)
from .generator import SvgGenerator  # noqa: E402
from .html_svg import ConversionError, DomToSvgUnavailableError  # noqa: E402
from .inline import escape_xml, process_inline_elements  # noqa: E402
from .markdown_parser import MarkdownParser  # noqa: E402
from .models import BlockToken, ListItem, SvgDocument  # noqa: E402
from .native_svg import render_native_svg  # noqa: E402

__all__ = [
    "Converters",
    "SvgGenerator",
    "MarkdownParser",
    "BlockToken",
    "ListItem",
    "SvgDocument",
    "render_native_svg",
    "process_inline_elements",
    "escape_xml",
    "ConversionError",
    "DomToSvgUnavailableError",
]
