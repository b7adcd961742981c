"""Test SVG export and the command-line entry point."""

from pathlib import Path

import pytest

from md2svg.generator import SvgGenerator, main


@pytest.fixture
def markdown_file(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("# Export\n\n- one\n- two\n", encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_generate_bare_filename_lands_in_output_dir(tmp_path):
    generator = SvgGenerator(output_dir=tmp_path / "out")

    written = await generator.generate("# Hello", "result")

    assert Path(written) == (tmp_path / "out" / "result.svg").resolve()
    svg = (tmp_path / "out" / "result.svg").read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert 'class="heading1">Hello</text>' in svg
    assert (tmp_path / "out" / ".md2svg_tmp").is_dir()


@pytest.mark.asyncio
async def test_generate_nested_path_created(tmp_path):
    generator = SvgGenerator(output_dir=tmp_path)
    target = tmp_path / "a" / "b" / "export.svg"

    written = await generator.generate("text", target)

    assert written == str(target)
    assert target.exists()


@pytest.mark.asyncio
async def test_generate_preview(tmp_path, fake_browser):
    fake_browser.page.evaluate_results = [90]
    generator = SvgGenerator(output_dir=tmp_path)

    written = await generator.generate_preview("# Hi", "preview")

    assert written.endswith("preview.html")
    page = (tmp_path / "preview.html").read_text(encoding="utf-8")
    assert "<h1>Hi</h1>" in page
    assert "width: 110px" in page


def test_main_writes_svg(markdown_file, tmp_path):
    output = tmp_path / "exported.svg"

    with pytest.raises(SystemExit) as excinfo:
        main([str(markdown_file), "-o", str(output)])

    assert excinfo.value.code == 0
    svg = output.read_text(encoding="utf-8")
    assert 'class="heading1">Export</text>' in svg
    assert svg.count('class="list-item"') == 2


def test_main_stdout(markdown_file, tmp_path, capsys):
    output = tmp_path / "unused.svg"

    with pytest.raises(SystemExit) as excinfo:
        main([str(markdown_file), "-o", str(output), "--stdout"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("<svg")
    assert not output.exists()


def test_main_missing_file(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.md"), "-o", str(tmp_path / "x.svg")])
    assert excinfo.value.code == 1


def test_main_unknown_theme(markdown_file, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(markdown_file), "-o", str(tmp_path / "x.svg"), "--theme", "nope"])
    assert excinfo.value.code == 1


def test_main_rejects_unknown_method(markdown_file):
    with pytest.raises(SystemExit) as excinfo:
        main([str(markdown_file), "--method", "bitmap"])
    assert excinfo.value.code == 2


def test_main_canvas_error_still_writes_svg(markdown_file, tmp_path, fake_browser):
    fake_browser.page.evaluate_results = [100]
    fake_browser.page.element = None
    output = tmp_path / "canvas.svg"

    with pytest.raises(SystemExit) as excinfo:
        main([str(markdown_file), "-o", str(output), "-m", "canvas"])

    assert excinfo.value.code == 0
    assert "Conversion container was not rendered" in output.read_text(encoding="utf-8")
