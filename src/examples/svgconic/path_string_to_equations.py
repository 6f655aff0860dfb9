"""
Convert an SVG path string into Desmos conic equations and print them.

The path mixes absolute and relative commands, horizontal and vertical lines,
a cubic and a quadratic curve and a closing segment.
"""

from svgconic.converter import SvgConicConverter
from svgconic.desmos import DesmosFormatter
from svgconic.settings import IDENTITY_SETTINGS

PATH_STRING_INPUT = "M0 0 h4 v3 C4 5 2 6 0 5 q-1 -1 0 -2 Z"


def main():
    """Main function to demonstrate the conversion of a single path string."""
    converter = SvgConicConverter(IDENTITY_SETTINGS)
    result = converter.convert_path_string(PATH_STRING_INPUT)

    print("Input :", PATH_STRING_INPUT)
    print(f"Output: {len(result.equations)} equations")
    for line in DesmosFormatter.format_all(result.equations):
        print("   ", line)
    for warning in result.warnings:
        print("Warning:", warning)


if __name__ == "__main__":
    main()
