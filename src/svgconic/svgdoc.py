"""Extraction of path strings from SVG documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union
from xml.parsers.expat import ExpatError

import svgpathtools

from svgconic.common import SvgDocumentError

logger = logging.getLogger(__name__)


def read_svg_path_strings(file_path: Union[str, Path]) -> List[str]:
    """Return the "d" strings of all path-like elements of the SVG file _file_path_.

    Path elements keep their original "d" attribute (relative commands, H/V lines
    and smooth curves stay untouched). Other shapes (line, polyline, polygon, rect,
    circle, ellipse) are converted to paths by svgpathtools.

    Args:
        file_path: Location of the SVG file.

    Returns:
        List[str]: the path strings in document order (paths first, then shapes)

    Raises:
        FileNotFoundError: If _file_path_ does not exist.
        SvgDocumentError: If the document is not well-formed XML or holds malformed shapes.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"SVG file not found: {file_path}")

    try:
        paths, attributes = svgpathtools.svg2paths(str(file_path.resolve()))
    except (ExpatError, ValueError, IndexError) as e:
        raise SvgDocumentError(f"Cannot parse SVG file {file_path}: {e}") from e

    path_strings: List[str] = []
    for path, attribute in zip(paths, attributes):
        path_string = attribute.get("d") or path.d()
        if path_string.strip():
            path_strings.append(path_string)

    logger.debug("Read %d path strings from %s", len(path_strings), file_path)
    return path_strings
