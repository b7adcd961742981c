#!/usr/bin/env python3
"""
SVG export: ties the converters to the filesystem and the command line.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from .converters import METHOD_NATIVE, METHODS, Converters
from .html_svg import ConversionError
from .paths import prepare_workspace

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "markdown-export.svg"


class SvgGenerator:
    """
    Export markdown as an SVG file using one of the conversion methods.
    """

    def __init__(
        self,
        *,
        output_dir,
        keep_tmp: bool = False,
        debug: bool = False,
        theme: str = "default",
        dom_to_svg_url: Optional[str] = None,
    ):
        """Create a new :class:`SvgGenerator`.

        Parameters
        ----------
        output_dir
            Directory where the SVG (and optional preview HTML) is written.
        keep_tmp
            Keep the ``.md2svg_tmp`` scratch directory for inspection.
        debug
            Enable verbose logging.
        theme
            Preview stylesheet name (``default`` / ``dark`` / …).
        dom_to_svg_url
            Override the ES module URL used by the dom-to-svg method.
        """
        self.debug = debug
        self.theme = theme
        self.paths = prepare_workspace(output_dir, keep_tmp=keep_tmp)

        options = {}
        if dom_to_svg_url:
            options["dom_to_svg_url"] = dom_to_svg_url
        self.converters = Converters(theme=theme, temp_dir=self.paths["tmp_dir"], debug=debug, **options)

    def _resolve_output(self, output_path, suffix: str) -> Path:
        output_path = str(output_path)
        if not output_path.endswith(suffix):
            output_path = f"{output_path}{suffix}"

        path = Path(output_path)
        if not path.is_absolute() and len(path.parts) == 1:
            # A bare filename goes into the output directory
            path = Path(self.paths["output_dir"]) / path

        os.makedirs(path.parent, exist_ok=True)
        return path

    async def generate(self, markdown_text: str, output_path=DEFAULT_EXPORT_NAME,
                       method: str = METHOD_NATIVE) -> str:
        """
        Convert markdown and write the SVG.

        Args:
            markdown_text: The markdown content to convert
            output_path: Destination; a bare filename lands in the output directory
            method: Conversion method name

        Returns:
            str: Path to the written SVG file
        """
        path = self._resolve_output(output_path, ".svg")
        svg = await self.converters.convert(markdown_text, method)
        path.write_text(svg, encoding="utf-8")

        if self.debug:
            logger.info("SVG written to %s (%s method, %d characters)", path, method, len(svg))

        return str(path)

    async def generate_preview(self, markdown_text: str, output_path) -> str:
        """Write the themed HTML preview page and return its path."""
        path = self._resolve_output(output_path, ".html")
        path.write_text(await self.converters.preview_html(markdown_text), encoding="utf-8")
        return str(path)


def main(argv=None):
    """Command-line entry point for markdown to SVG export."""
    import argparse
    import asyncio
    import sys

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="md2svg", description="Convert Markdown to SVG.")
        p.add_argument("markdown", type=Path, help="Markdown file to convert")
        p.add_argument("--output", "-o", type=Path, default=Path(DEFAULT_EXPORT_NAME), help="Destination SVG path")
        p.add_argument("--method", "-m", choices=METHODS, default=METHOD_NATIVE, help="Conversion method")
        p.add_argument("--stdout", action="store_true", help="Write the SVG to stdout instead of a file")
        p.add_argument("--preview-html", type=Path, help="Also write a themed HTML preview page")
        p.add_argument("--theme", "-t", default="default", help="Preview theme (default, dark, …)")
        p.add_argument("--dom-to-svg-url", help="ES module URL for the domToSvgModule method")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        p.add_argument("--keep-tmp", action="store_true", help="Keep .md2svg_tmp directory after run")
        return p

    async def _generate_async(args) -> int:
        md_path: Path = args.markdown
        if not md_path.exists():
            logger.error(f"Markdown file '{md_path}' not found")
            return 1

        markdown_text = md_path.read_text(encoding="utf-8")
        output_dir = args.output.parent

        generator = SvgGenerator(
            output_dir=output_dir,
            theme=args.theme,
            debug=args.debug,
            keep_tmp=args.keep_tmp,
            dom_to_svg_url=args.dom_to_svg_url,
        )

        if args.stdout:
            sys.stdout.write(await generator.converters.convert(markdown_text, args.method))
            sys.stdout.write("\n")
        else:
            output_path = await generator.generate(markdown_text, args.output, args.method)
            logger.info("SVG written to %s", output_path)

        if args.preview_html:
            preview_path = await generator.generate_preview(markdown_text, args.preview_html)
            logger.info("Preview written to %s", preview_path)
        return 0

    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")

    args = _build_parser().parse_args(argv)
    try:
        exit_code = asyncio.run(_generate_async(args))
    except (OSError, ValueError, ConversionError, PlaywrightError) as e:
        logger.error("Conversion failed: %s", e)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
