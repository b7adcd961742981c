#!/usr/bin/env python3
"""Output and scratch directories for SVG export.

The browser methods write their measurement pages to disk so that relative
image paths in the markdown resolve against the export location.  Those
pages go to ``.md2svg_tmp`` next to the exported SVG; when the export
directory refuses the sub-directory (read-only mount) a system temporary
directory takes its place.

Scratch pages are removed at process exit.  ``keep_tmp`` leaves them in
place for inspection, but only inside the export directory.
"""
from __future__ import annotations

import atexit
import errno
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict


__all__ = ["prepare_workspace"]

logger = logging.getLogger(__name__)

TMP_DIR_NAME = ".md2svg_tmp"
FALLBACK_PREFIX = "md2svg_tmp_"


def _scratch_dir(out_path: Path) -> tuple[Path, bool]:
    """Return the scratch directory and whether it is a system fallback."""
    proposed = out_path / TMP_DIR_NAME
    try:
        proposed.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        if exc.errno not in (errno.EACCES, errno.EROFS):
            raise
        fallback = Path(tempfile.mkdtemp(prefix=FALLBACK_PREFIX))
        logger.warning("Cannot create %s, writing scratch pages to %s", proposed, fallback)
        return fallback, True
    return proposed, False


def prepare_workspace(output_dir: str | Path, *, keep_tmp: bool = False) -> Dict[str, Path]:
    """Create the export directory and the scratch directory for browser pages.

    Parameters
    ----------
    output_dir
        Where the SVG and the optional preview page are written.  Created
        if missing.
    keep_tmp
        Keep ``.md2svg_tmp`` after exit.  Ignored for a system fallback
        directory, which is always removed.

    Returns
    -------
    dict with absolute ``output_dir`` and ``tmp_dir`` paths
    """
    out_path = Path(output_dir).expanduser().resolve()
    out_path.mkdir(parents=True, exist_ok=True)

    tmp_path, is_fallback = _scratch_dir(out_path)

    if is_fallback or not keep_tmp:
        atexit.register(shutil.rmtree, tmp_path, ignore_errors=True)

    return {
        "output_dir": out_path,
        "tmp_dir": tmp_path,
    }
