"""
Data models for the Markdown to SVG converter.

Block tokens are produced by :class:`~md2svg.markdown_parser.MarkdownParser`
and consumed by the native layout emitter.  SVG primitives are the typed
records the emitter places on the canvas before the document is serialized.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .inline import escape_xml


BLOCK_TYPES = (
    "heading",
    "paragraph",
    "list",
    "blockquote",
    "code",
    "hr",
    "space",
    "html",
    "table",
)


@dataclass(frozen=True)
class ListItem:
    """A single list entry, holding the raw inline source of the item."""
    text: str = ""


@dataclass(frozen=True)
class BlockToken:
    """
    One block-level unit of parsed markdown.

    ``type`` selects the layout rule.  Any type outside :data:`BLOCK_TYPES`
    (e.g. ``front_matter`` from a parser plugin) is carried through as-is.
    """
    type: str
    text: str = ""
    depth: int = 0  # heading level
    items: Tuple[ListItem, ...] = ()
    raw: str = ""

    def is_known(self):
        """Check if the native layout has a rule for this token type."""
        return self.type in BLOCK_TYPES

    @property
    def lines(self) -> Tuple[str, ...]:
        """Physical lines of the token text."""
        return tuple(self.text.split("\n"))


@dataclass(frozen=True)
class CanvasGeometry:
    """Width and spacing fixed before layout; ``height`` is the provisional extent."""
    width: float
    height: float = 600
    padding: float = 20
    line_height: float = 24


@dataclass(frozen=True)
class LayoutState:
    """Vertical insertion point for the next primitive."""
    y: float

    def advance(self, amount: float) -> "LayoutState":
        return LayoutState(self.y + amount)


def format_number(value: float) -> str:
    """Render a coordinate without a trailing ``.0`` and with at most two decimals."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class SvgText:
    """``<text>`` element.  ``content`` is already SVG-safe markup."""
    x: float
    y: float
    css_class: str
    content: str = ""

    def to_svg(self) -> str:
        return (
            f'<text x="{format_number(self.x)}" y="{format_number(self.y)}" '
            f'class="{self.css_class}">{self.content}</text>'
        )


@dataclass(frozen=True)
class SvgRect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    rx: Optional[float] = None
    ry: Optional[float] = None

    def to_svg(self) -> str:
        attrs = [
            f'x="{format_number(self.x)}"',
            f'y="{format_number(self.y)}"',
            f'width="{format_number(self.width)}"',
            f'height="{format_number(self.height)}"',
            f'fill="{escape_xml(self.fill)}"',
        ]
        if self.rx is not None:
            attrs.append(f'rx="{format_number(self.rx)}"')
        if self.ry is not None:
            attrs.append(f'ry="{format_number(self.ry)}"')
        return f"<rect {' '.join(attrs)} />"


@dataclass(frozen=True)
class SvgLine:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float = 1

    def to_svg(self) -> str:
        return (
            f'<line x1="{format_number(self.x1)}" y1="{format_number(self.y1)}" '
            f'x2="{format_number(self.x2)}" y2="{format_number(self.y2)}" '
            f'stroke="{escape_xml(self.stroke)}" stroke-width="{format_number(self.stroke_width)}" />'
        )


@dataclass(frozen=True)
class SvgDocument:
    """A finished SVG document and the canvas size it declares."""
    svg: str
    width: float
    height: float
    primitives: Tuple[object, ...] = field(default=(), repr=False, compare=False)

    def __str__(self):
        return self.svg
