"""
Inline markdown to SVG ``tspan`` formatting and XML escaping.

Only a small, order-dependent subset of inline markdown is understood:
bold, italic, code and links, applied in that order with non-greedy
patterns that never cross a newline.  It is not a nested emphasis parser:
stray asterisks left by malformed input are matched by the italic rule
exactly as the substitution order dictates.
"""
import re

# Span markers.  They are XML 1.0 illegal control characters, so they are
# stripped from user text before formatting and cannot be forged.
SPAN_OPEN = "\x01"
SPAN_OPEN_END = "\x02"
SPAN_CLOSE = "\x03"

_ILLEGAL_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_CODE = re.compile(r"`(.+?)`")
_LINK = re.compile(r"\[(.+?)\]\((.+?)\)")

_MARKER = re.compile(f"{SPAN_OPEN}([a-z-]+){SPAN_OPEN_END}")

_XML_ESCAPES = (
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def strip_illegal_xml(text: str) -> str:
    """Remove characters XML 1.0 does not allow anywhere in a document."""
    return _ILLEGAL_XML_CHARS.sub("", text)


def _escape_entities(text: str) -> str:
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def escape_xml(unsafe) -> str:
    """
    Make *unsafe* safe as XML character data or an attribute value.

    Characters illegal in XML 1.0 are dropped and the five special
    characters become entities.  Falsy input gives an empty string.
    """
    if not unsafe:
        return ""
    return _escape_entities(strip_illegal_xml(str(unsafe)))


def _span(css_class: str) -> str:
    return rf"{SPAN_OPEN}{css_class}{SPAN_OPEN_END}\1{SPAN_CLOSE}"


def restore_spans(escaped: str) -> str:
    """Turn span markers in already escaped text back into ``tspan`` tags."""
    result = _MARKER.sub(r'<tspan class="\1">', escaped)
    return result.replace(SPAN_CLOSE, "</tspan>")


def process_inline_elements(text: str, x_position: float = 0) -> str:
    """
    Convert inline markdown in *text* into SVG-safe markup.

    Args:
        text: Raw inline markdown (e.g. a paragraph's source text)
        x_position: Horizontal offset of the enclosing text element.
            Currently unused; spans flow after the preceding text.

    Returns:
        Escaped text with ``<tspan class="bold|italic|code|link">`` spans.
        Link URLs are dropped, only the link text is kept.
    """
    if not text:
        return ""

    result = strip_illegal_xml(text)

    result = _BOLD.sub(_span("bold"), result)
    result = _ITALIC.sub(_span("italic"), result)
    result = _CODE.sub(_span("code"), result)
    result = _LINK.sub(_span("link"), result)

    return restore_spans(_escape_entities(result))
