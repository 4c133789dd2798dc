"""MCP server for heightmesh.

Registers the conversion tools and runs via stdio transport.
"""

import sys

from mcp.server.fastmcp import FastMCP

from .core import raster
from .logging_config import setup_logging
from .tools.convert import register_convert_tools

mcp = FastMCP(
    "heightmesh",
    instructions="Convert GeoTIFF heightfields into watertight STL/3MF solids or 16-bit grayscale PNGs",
)

register_convert_tools(mcp)


def main():
    setup_logging(stream=sys.stderr)
    raster.initialize()
    try:
        mcp.run(transport="stdio")
    finally:
        raster.shutdown()


if __name__ == "__main__":
    main()
