"""
Markdown parsing built on markdown-it-py.

Two views of the same document are offered:

* :meth:`MarkdownParser.parse` renders sanitized HTML for the browser-based
  conversion methods and the preview.
* :meth:`MarkdownParser.lex` flattens the markdown-it token stream into the
  ordered :class:`~md2svg.models.BlockToken` sequence the native layout
  consumes.
"""
import logging
import re
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.container import container_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from .models import BlockToken, ListItem

logger = logging.getLogger(__name__)

# Elements removed outright during sanitization, content included
UNSAFE_TAGS = ["script", "style", "iframe", "object", "embed", "link", "meta", "base", "form"]
URL_ATTRIBUTES = ("href", "src", "xlink:href", "action", "formaction")

_URL_NOISE = re.compile(r"[\s\x00-\x1f]")

_TOKEN_TYPES = {
    "heading_open": "heading",
    "paragraph_open": "paragraph",
    "bullet_list_open": "list",
    "ordered_list_open": "list",
    "blockquote_open": "blockquote",
    "fence": "code",
    "code_block": "code",
    "hr": "hr",
    "html_block": "html",
    "table_open": "table",
}

# Trailing newlines a block absorbs before blank lines count as spacing,
# keyed by markdown-it token type; None means every trailing blank line.
# Blocks not listed end with their last line.
_CONSUMED_NEWLINES = {
    "heading_open": None,
    "hr": None,
    "code_block": None,
    "html_block": None,
    "table_open": None,
    "blockquote_open": 1,
}


def _is_unsafe_url(value) -> bool:
    url = _URL_NOISE.sub("", str(value)).lower()
    if url.startswith(("javascript:", "vbscript:")):
        return True
    return url.startswith("data:") and not url.startswith("data:image/")


def sanitize_html(html: str) -> str:
    """
    Strip active content from rendered HTML.

    Removes :data:`UNSAFE_TAGS`, every ``on*`` event handler attribute and
    script-capable URLs (``javascript:``, ``vbscript:`` and non-image
    ``data:``).
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(UNSAFE_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on"):
                del tag.attrs[attr]
            elif name in URL_ATTRIBUTES and _is_unsafe_url(tag.attrs[attr]):
                del tag.attrs[attr]

    return str(soup)


class MarkdownParser:
    """
    Markdown parser producing sanitized HTML and native layout block tokens.
    """

    def __init__(self, debug: bool = False):
        """
        Args:
            debug: Log the token summary of every lexed document
        """
        self.debug = debug

        self.markdown_processor = MarkdownIt('commonmark', {
            'html': True,          # Raw HTML passes through (sanitized afterwards)
            'typographer': False,  # Keep source characters for width measurement
        })
        self.markdown_processor.enable(['table', 'strikethrough'])

        # Plugin output that has no native layout rule (front matter, math
        # blocks, ``:::note`` containers) surfaces as extra block tokens and
        # is skipped by the layout emitter.
        self.markdown_processor = (
            self.markdown_processor
                .use(front_matter_plugin)
                .use(container_plugin, 'note')
                .use(dollarmath_plugin,
                     allow_space=False,
                     allow_digits=False,
                     double_inline=False)
        )

    def parse(self, markdown_text: str) -> str:
        """
        Convert markdown to sanitized HTML.

        Args:
            markdown_text: Raw markdown content

        Returns:
            HTML string safe to embed in a preview or SVG foreignObject
        """
        if not markdown_text:
            return ""
        raw_html = self.markdown_processor.render(markdown_text)
        return sanitize_html(raw_html)

    def lex(self, markdown_text: str) -> List[BlockToken]:
        """
        Split markdown into top-level block tokens, in document order.

        Runs of blank lines become ``space`` tokens following
        :meth:`_space_token`.  Block types the native layout does not know
        keep their markdown-it name (e.g.
        ``front_matter``, ``math_block``, ``container_note``).
        """
        if not markdown_text:
            return []

        source_lines = markdown_text.split("\n")
        tokens = self.markdown_processor.parse(markdown_text)

        blocks: List[BlockToken] = []
        previous: Optional[str] = None
        last_line = 0
        index = 0
        while index < len(tokens):
            token = tokens[index]
            end = self._find_close(tokens, index) if token.nesting == 1 else index
            inner = tokens[index + 1:end]

            raw = ""
            if token.map:
                start_line, end_line = token.map
                # Newlines since the previous block's last line, or since the top
                newlines = start_line - last_line + 1 if previous else start_line
                space = self._space_token(previous, newlines)
                if space is not None:
                    blocks.append(space)
                end_line = self._content_end(source_lines, start_line, end_line)
                raw = "\n".join(source_lines[start_line:end_line])
                last_line = max(last_line, end_line)
                previous = token.type

            blocks.append(self._to_block(token, inner, raw))
            index = end + 1

        newlines = len(source_lines) - last_line if previous else len(source_lines) - 1
        space = self._space_token(previous, newlines)
        if space is not None:
            blocks.append(space)

        if self.debug:
            logger.info("Lexed %d block tokens: %s", len(blocks), [b.type for b in blocks])

        return blocks

    @staticmethod
    def _space_token(previous: Optional[str], newlines: int) -> Optional[BlockToken]:
        """
        Space token for *newlines* newline characters after a block of type
        *previous* (None at the top of the document).

        A block first consumes its own trailing newlines (``_CONSUMED_NEWLINES``);
        a single leftover newline after a block is folded into it.
        """
        if previous is not None:
            consumed = _CONSUMED_NEWLINES.get(previous, 0)
            if consumed is None:
                return None
            newlines -= consumed
            if newlines < 2:
                return None
        elif newlines < 1:
            return None
        return BlockToken("space", raw="\n" * newlines)

    @staticmethod
    def _find_close(tokens: Sequence[Token], open_index: int) -> int:
        level = tokens[open_index].level
        for index in range(open_index + 1, len(tokens)):
            if tokens[index].level == level and tokens[index].nesting == -1:
                return index
        return len(tokens) - 1

    @staticmethod
    def _content_end(source_lines: Sequence[str], start_line: int, end_line: int) -> int:
        """Exclude trailing blank lines that markdown-it folds into a block's map."""
        while end_line > start_line + 1 and not source_lines[end_line - 1].strip():
            end_line -= 1
        return end_line

    @staticmethod
    def _inline_texts(tokens: Sequence[Token]) -> List[str]:
        return [t.content for t in tokens if t.type == "inline"]

    def _to_block(self, token: Token, inner: Sequence[Token], raw: str) -> BlockToken:
        kind = _TOKEN_TYPES.get(token.type)

        if kind == "heading":
            return BlockToken(
                "heading",
                text="".join(self._inline_texts(inner)),
                depth=int(token.tag[1:]),
                raw=raw,
            )

        if kind in ("paragraph", "blockquote"):
            return BlockToken(kind, text="\n".join(self._inline_texts(inner)), raw=raw)

        if kind == "list":
            return BlockToken("list", items=self._list_items(inner, token.level + 1), raw=raw)

        if kind == "code":
            text = token.content
            if text.endswith("\n"):
                text = text[:-1]
            return BlockToken("code", text=text, raw=raw)

        if kind in ("hr", "table"):
            return BlockToken(kind, raw=raw)

        if kind == "html":
            return BlockToken("html", text=token.content, raw=raw)

        name = token.type[:-len("_open")] if token.type.endswith("_open") else token.type
        return BlockToken(name, text=token.content or "", raw=raw)

    def _list_items(self, inner: Sequence[Token], item_level: int) -> Tuple[ListItem, ...]:
        items = []
        current: Optional[List[str]] = None
        for t in inner:
            if t.type == "list_item_open" and t.level == item_level:
                current = []
            elif t.type == "list_item_close" and t.level == item_level:
                items.append(ListItem("\n".join(current or [])))
                current = None
            elif t.type == "inline" and current is not None:
                current.append(t.content)
        return tuple(items)
