"""MCP Server for horizontal bar chart generation.

This module implements a Model Context Protocol (MCP) server that exposes a
tool rendering labeled values as a horizontal bar chart, returned as SVG
markup together with a PNG preview.
"""

import base64
import logging
from typing import Any, List, Optional

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from config import settings
from hbarchart.bar_chart import HorizontalBarChart
from hbarchart.capabilities import ValueSorter
from hbarchart.layout import ChartConfig

logger = logging.getLogger(__name__)

# Initialize MCP server
app = Server("horizontal-bar-chart")


def create_horizontal_bar_chart(
    data: list[dict[str, Any]],
    outer_width: Optional[float] = None,
    sort: bool = False
) -> list[types.TextContent | types.ImageContent]:
    """Render a horizontal bar chart for the given labeled values.

    Args:
        data: List of datum objects, each with:
            - label: Category name drawn beside the bar
            - value: Number sized onto the value axis (may be negative)
            - color: Optional fill overriding the sign-based tint
        outer_width: Optional chart width in pixels, margins included.
        sort: Sort the bars by ascending value instead of keeping input order.

    Returns:
        List containing three elements:
            - types.TextContent: SVG markup of the chart
            - types.TextContent: Corrected left and right margins
            - types.ImageContent: Base64-encoded PNG preview of the chart

    Raises:
        Exception: If the chart cannot be created.
    """
    overrides = settings.chart_overrides()
    if outer_width is not None:
        overrides['outer_width'] = outer_width

    try:
        chart = HorizontalBarChart(
            ChartConfig(overrides),
            sorter=ValueSorter() if sort else None,
            interactive=False
        )
        chart.draw(data)

        img_base64 = base64.b64encode(chart.to_png()).decode('utf-8')
        logger.info(f"Rendered {len(chart.finished_data)} bars with margins {chart.margins}")

        return [
            types.TextContent(
                type="text",
                text=chart.to_svg()
            ),
            types.TextContent(
                type="text",
                text=f"Margins: left={chart.margins.left:g} right={chart.margins.right:g}"
            ),
            types.ImageContent(
                type="image",
                data=img_base64,
                mimeType="image/png"
            )
        ]
    except Exception as e:
        raise Exception(f"Failed to create horizontal bar chart: {str(e)}")


@app.list_tools()
async def list_tools() -> list[types.Tool]:
    """List available tools from the MCP server.

    Returns:
        List of available tool definitions.
    """
    TOOLS: List[types.Tool] = [
        types.Tool(
            name="create_horizontal_bar_chart",
            description=(
                "This tool renders labeled numeric values as a horizontal bar chart. "
                "Each value becomes one bar extending from a vertical zero line: positive values to the right, "
                "negative values to the left. The category label is drawn on the zero-line side of the bar and "
                "the formatted value beyond its far end; margins are sized to fit the labels and long category "
                "labels are trimmed with an ellipsis. Bars keep the order given unless 'sort' is true. "
                "The function returns a list with two elements: "
                "[1] types.TextContent (the chart as SVG markup), and "
                "[2] types.ImageContent (a PNG preview of the chart as base64, mimeType=\"image/png\")."
            ),
            inputSchema={
                "type": "object",
                "required": ["data"],
                "properties": {
                    "data": {
                        "type": "array",
                        "description": "Values to chart, one object per bar, in display order.",
                        "items": {
                            "type": "object",
                            "properties": {
                                "label": {
                                    "type": "string",
                                    "description": "Category name of the bar."
                                },
                                "value": {
                                    "type": "number",
                                    "description": "Value of the bar; negative values extend left of zero."
                                },
                                "color": {
                                    "type": "string",
                                    "description": "Optional CSS colour overriding the default fill."
                                }
                            },
                            "required": ["label", "value"]
                        }
                    },
                    "outer_width": {
                        "type": "number",
                        "description": "Width of the whole chart in pixels."
                    },
                    "sort": {
                        "type": "boolean",
                        "description": "Sort bars by ascending value."
                    }
                }
            }
        ),
    ]
    return TOOLS


@app.call_tool()
async def call_tool(
    name: str,
    arguments: dict[str, Any]
) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
    """Call a tool by name with arguments.

    Args:
        name: Name of the tool to call.
        arguments: Dictionary of tool arguments.

    Returns:
        List of content items (text or images).
    """
    if name == "create_horizontal_bar_chart":
        data = arguments.get("data", [])
        outer_width = arguments.get("outer_width", None)
        sort = bool(arguments.get("sort", False))

        try:
            return create_horizontal_bar_chart(data, outer_width, sort)
        except Exception as e:
            logger.error(f"Error creating horizontal bar chart: {e}")
            return [
                types.TextContent(
                    type="text",
                    text=f"Error creating horizontal bar chart: {str(e)}"
                )
            ]

    # Tool not found
    return [
        types.TextContent(
            type="text",
            text=f"Error: Tool '{name}' not found or not implemented."
        )
    ]


async def arun() -> None:
    """Run the MCP server with stdio transport."""
    async with stdio_server() as streams:
        await app.run(
            streams[0],
            streams[1],
            app.create_initialization_options()
        )


def run() -> None:
    """Entry point for the ``hbarchart-mcp`` script."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    anyio.run(arun)


if __name__ == "__main__":
    run()
