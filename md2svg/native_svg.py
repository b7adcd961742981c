#!/usr/bin/env python3
"""
Native markdown to SVG layout.

Block tokens are laid out top to bottom in a single pass.  Each token kind
has a rule that reads the current :class:`LayoutState`, returns the
primitives it places and the advanced state.  The document is serialized
once after the last token, so the declared height, the viewBox and the
background all describe the final content extent.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .inline import escape_xml, process_inline_elements
from .models import (
    BlockToken,
    CanvasGeometry,
    LayoutState,
    SvgDocument,
    SvgLine,
    SvgRect,
    SvgText,
    format_number,
)
from .sizing import (
    NATIVE_LINE_HEIGHT,
    NATIVE_PADDING,
    NATIVE_PLACEHOLDER_HEIGHT,
    native_canvas_width,
)

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

HTML_PLACEHOLDER = "[HTML content - view in HTML preview]"
TABLE_PLACEHOLDER = "[Table content - view in HTML preview]"
BULLET = "•"

NATIVE_STYLE = """
.heading1 { font-size: 28px; font-weight: bold; fill: #2c3e50; }
.heading2 { font-size: 24px; font-weight: bold; fill: #3498db; }
.heading3 { font-size: 20px; font-weight: bold; fill: #2980b9; }
.heading4 { font-size: 18px; font-weight: bold; fill: #2c3e50; }
.paragraph { font-size: 16px; fill: #333; }
.list-item { font-size: 16px; fill: #333; }
.bold { font-weight: bold; fill: #000; }
.italic { font-style: italic; }
.link { fill: #3498db; text-decoration: underline; }
.blockquote { font-size: 16px; fill: #7f8c8d; font-style: italic; }
.code { font-family: monospace; fill: #e74c3c; }
""".strip()

Primitive = object
LayoutRule = Callable[[LayoutState, BlockToken, CanvasGeometry], Tuple[LayoutState, List[Primitive]]]


def _layout_heading(state, token, geo):
    lh = geo.line_height
    state = state.advance(lh * 1.5)
    text = SvgText(geo.padding, state.y, f"heading{token.depth}", escape_xml(token.text))
    return state.advance(lh * (1 + 0.5 * token.depth)), [text]


def _layout_paragraph(state, token, geo):
    state = state.advance(geo.line_height)
    text = SvgText(geo.padding, state.y, "paragraph", process_inline_elements(token.text, geo.padding))
    return state.advance(geo.line_height), [text]


def _layout_list(state, token, geo):
    lh = geo.line_height
    state = state.advance(lh * 0.5)
    primitives = []
    bullet = f'<tspan x="{format_number(geo.padding)}" text-anchor="middle">{BULLET}</tspan>'
    for item in token.items:
        state = state.advance(lh)
        content = bullet + process_inline_elements(item.text, geo.padding + 25)
        primitives.append(SvgText(geo.padding + 20, state.y, "list-item", content))
    return state.advance(lh * 0.5), primitives


def _layout_blockquote(state, token, geo):
    lh = geo.line_height
    state = state.advance(lh)
    accent = SvgLine(
        geo.padding, state.y - lh * 0.8,
        geo.padding, state.y + lh * 0.5,
        stroke="#3498db", stroke_width=3,
    )
    text = SvgText(geo.padding + 10, state.y, "blockquote", process_inline_elements(token.text, geo.padding + 10))
    return state.advance(lh * 1.5), [accent, text]


def _layout_code(state, token, geo):
    lh = geo.line_height
    state = state.advance(lh)
    lines = token.lines
    background = SvgRect(
        geo.padding, state.y - lh * 0.8,
        geo.width - geo.padding * 2, lh * (len(lines) + 0.6),
        fill="#f5f5f5", rx=5, ry=5,
    )
    primitives = [background]
    for index, line in enumerate(lines):
        primitives.append(SvgText(geo.padding + 10, state.y + index * lh, "code", escape_xml(line)))
    return state.advance(lh * (len(lines) + 0.8)), primitives


def _layout_hr(state, token, geo):
    state = state.advance(geo.line_height)
    divider = SvgLine(geo.padding, state.y, geo.width - geo.padding, state.y, stroke="#ddd", stroke_width=2)
    return state.advance(geo.line_height), [divider]


def _layout_space(state, token, geo):
    return state.advance(geo.line_height * 0.5), []


def _layout_html(state, token, geo):
    state = state.advance(geo.line_height)
    return state.advance(geo.line_height), [SvgText(geo.padding, state.y, "paragraph", HTML_PLACEHOLDER)]


def _layout_table(state, token, geo):
    state = state.advance(geo.line_height)
    placeholder = SvgText(geo.padding, state.y, "paragraph", TABLE_PLACEHOLDER)
    return state.advance(geo.line_height * 1.5), [placeholder]


LAYOUT_RULES: Dict[str, LayoutRule] = {
    "heading": _layout_heading,
    "paragraph": _layout_paragraph,
    "list": _layout_list,
    "blockquote": _layout_blockquote,
    "code": _layout_code,
    "hr": _layout_hr,
    "space": _layout_space,
    "html": _layout_html,
    "table": _layout_table,
}


def iter_layout(tokens: Iterable[BlockToken], geometry: CanvasGeometry,
                start: Optional[LayoutState] = None) -> Iterator[Tuple[LayoutState, List[Primitive]]]:
    """
    Yield ``(state, primitives)`` after each token, in input order.

    Tokens without a layout rule yield the unchanged state and no primitives.
    """
    state = start or LayoutState(geometry.padding)
    for token in tokens:
        rule = LAYOUT_RULES.get(token.type)
        if rule is None:
            logger.debug("Skipping unsupported token type %r", token.type)
            yield state, []
            continue
        state, primitives = rule(state, token, geometry)
        yield state, primitives


def layout_tokens(tokens: Iterable[BlockToken], geometry: CanvasGeometry) -> Tuple[LayoutState, List[Primitive]]:
    """Lay out every token and return the final state with all placed primitives."""
    state = LayoutState(geometry.padding)
    primitives: List[Primitive] = []
    for state, placed in iter_layout(tokens, geometry, start=state):
        primitives.extend(placed)
    return state, primitives


def serialize_svg(width: float, height: float, primitives: Iterable[Primitive]) -> str:
    """Wrap positioned primitives in a complete SVG document."""
    w, h = format_number(width), format_number(height)
    parts = [
        f'<svg xmlns="{SVG_NS}" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
        f"<style>\n{NATIVE_STYLE}\n</style>",
        SvgRect(0, 0, width, height, fill="white").to_svg(),
    ]
    parts.extend(p.to_svg() for p in primitives)
    parts.append("</svg>")
    return "\n".join(parts)


def render_native_svg(tokens: Iterable[BlockToken], source_text: str, debug: bool = False) -> SvgDocument:
    """
    Lay out *tokens* as native SVG.

    Args:
        tokens: Block tokens in document order
        source_text: Raw markdown; only its length is used, to pick the width
        debug: Log the computed canvas

    Returns:
        :class:`SvgDocument` whose height is the laid out content extent
    """
    geometry = CanvasGeometry(
        width=native_canvas_width(len(source_text or "")),
        height=NATIVE_PLACEHOLDER_HEIGHT,
        padding=NATIVE_PADDING,
        line_height=NATIVE_LINE_HEIGHT,
    )
    final_state, primitives = layout_tokens(tokens, geometry)
    height = final_state.y + geometry.padding

    if debug:
        logger.info(
            "Native SVG canvas: %sx%s (%d primitives)",
            format_number(geometry.width), format_number(height), len(primitives),
        )

    svg = serialize_svg(geometry.width, height, primitives)
    return SvgDocument(svg=svg, width=geometry.width, height=height, primitives=tuple(primitives))
