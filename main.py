"""Command-line entry point for horizontal bar chart rendering.

Reads a JSON list of ``{"label", "value", "color"?}`` objects and writes the
chart as SVG, optionally with a PNG preview.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from config import get_output_dir, settings
from hbarchart.bar_chart import HorizontalBarChart
from hbarchart.capabilities import ValueSorter
from hbarchart.layout import ChartConfig

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Horizontal Bar Chart Renderer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py data.json                        # Write charts/data.svg
  python main.py data.json -o chart.svg           # Write chart.svg
  python main.py data.json --png chart.png        # Also write a PNG preview
  cat data.json | python main.py - --sort         # Read stdin, sort by value
        """
    )

    parser.add_argument(
        "input",
        help="JSON file holding a list of {label, value, color?} objects, or '-' for stdin"
    )

    parser.add_argument(
        "-o", "--output",
        help="SVG output path (default: charts/<input name>.svg)"
    )

    parser.add_argument(
        "--png",
        help="Also write a PNG preview to this path"
    )

    parser.add_argument(
        "--width",
        type=float,
        default=settings.OUTER_WIDTH,
        help="Outer chart width in pixels (default: %(default)s)"
    )

    parser.add_argument(
        "--sort",
        action="store_true",
        help="Sort bars by ascending value"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=settings.LOG_LEVEL,
        help="Set logging level (default: %(default)s)"
    )

    return parser.parse_args(argv)


def load_data(source: str) -> Any:
    """Load the dataset from a JSON file or stdin.

    Args:
        source: File path, or '-' for stdin.

    Returns:
        The decoded JSON document.

    Raises:
        ValueError: If the document is not a JSON list.
    """
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of data, got {type(data).__name__}")
    return data


def default_output_path(source: str) -> Path:
    """Path of the SVG written when no --output is given.

    Args:
        source: Input file path, or '-' for stdin.

    Returns:
        File under the output directory named after the input.
    """
    name = "chart" if source == "-" else Path(source).stem
    return get_output_dir() / f"{name}.svg"


def main(argv: Optional[List[str]] = None) -> int:
    """Render the chart described by the command line.

    Returns:
        Process exit status.
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    overrides = settings.chart_overrides()
    overrides['outer_width'] = args.width

    try:
        data = load_data(args.input)

        chart = HorizontalBarChart(
            ChartConfig(overrides),
            sorter=ValueSorter() if args.sort else None,
            interactive=False
        )
        chart.draw(data)

        output_path = Path(args.output) if args.output else default_output_path(args.input)
        chart.surface.save_svg(str(output_path))
        logger.info(f"Chart written to {output_path}")
        print(f"[Chart saved to {output_path}]")

        if args.png:
            chart.surface.save_png(args.png)
            print(f"[Preview saved to {args.png}]")

        margins = chart.margins
        print(f"Margins: left={margins.left:g} right={margins.right:g}")
        return 0
    except (OSError, ValueError) as e:
        logger.error(f"Failed to render chart: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
