"""Conversion of SVG documents and path strings into conic equations."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List, Union

from svgconic.desmos import write_equations
from svgconic.normalizer import ConversionResult, PathNormalizer
from svgconic.settings import DEFAULT_SETTINGS, ConversionSettings
from svgconic.svgdoc import read_svg_path_strings
from svgconic.svgpath import SvgPathTokenizer

logger = logging.getLogger(__name__)


class SvgConicConverter:
    """Pipeline: SVG document -> path strings -> commands -> segments -> conic equations.

    Each path string is normalized on its own, so every path starts at the origin
    as required for the first (relative) MoveTo of an SVG path.
    """

    def __init__(self, settings: ConversionSettings = DEFAULT_SETTINGS, strict_tokenize: bool = False):
        self._normalizer = PathNormalizer(settings)
        self._strict_tokenize = strict_tokenize

    @property
    def settings(self) -> ConversionSettings:
        """ConversionSettings: The settings used by the converter."""
        return self._normalizer.settings

    def convert_path_string(self, path_string: str) -> ConversionResult:
        """Convert a single SVG path "d" string. Dropped input is reported in the result warnings."""
        warnings: List[str] = []
        commands = SvgPathTokenizer.tokenize(path_string, strict=self._strict_tokenize, warnings=warnings)
        result = self._normalizer.convert(commands)
        result.warnings = warnings + result.warnings
        return result

    def convert_path_strings(self, path_strings: Iterable[str]) -> ConversionResult:
        """Convert all _path_strings_ and concatenate the results in input order."""
        result = ConversionResult()
        for path_string in path_strings:
            result.extend(self.convert_path_string(path_string))
        return result

    def convert_file(self, file_path: Union[str, Path]) -> ConversionResult:
        """Convert all paths of the SVG file _file_path_.

        Raises:
            FileNotFoundError: If _file_path_ does not exist.
        """
        start = time.perf_counter()
        result = self.convert_path_strings(read_svg_path_strings(file_path))
        result.elapsed = time.perf_counter() - start
        logger.info(
            "Converted %s into %d equations in %.3fs (%d warnings)",
            file_path,
            len(result.equations),
            result.elapsed,
            len(result.warnings),
        )
        return result

    def convert_file_to_file(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> ConversionResult:
        """Convert the SVG file _input_path_ and write the rendered equations to _output_path_."""
        result = self.convert_file(input_path)
        write_equations(output_path, result.equations)
        return result
