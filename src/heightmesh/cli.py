"""Command-line interface: heightmesh [OPTIONS] <input raster>."""

import argparse
import logging
import os
import subprocess
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .core import raster
from .errors import HeightmeshError, ViewerError
from .logging_config import setup_logging
from .models import ConversionParams, Window
from .pipeline import MESH_FORMATS, convert, output_format

logger = logging.getLogger(__name__)

DEFAULT_VIEWER = "f3d"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heightmesh",
        description="Convert a GeoTIFF heightfield into an STL/3MF solid or a 16-bit PNG.",
    )
    parser.add_argument("input", help="input GeoTIFF file")
    parser.add_argument("-x", type=int, default=0, help="window x coordinate (default 0)")
    parser.add_argument("-y", type=int, default=0, help="window y coordinate (default 0)")
    parser.add_argument("-w", "--width", type=int, default=0,
                        help="window width (default: to the right edge)")
    parser.add_argument("-H", "--height", type=int, default=0,
                        help="window height (default: to the bottom edge)")
    parser.add_argument("-s", "--scale", type=float, default=1.0,
                        help="vertical scale factor (default 1)")
    parser.add_argument("-z", "--zero", type=float, default=10.0,
                        help="translate the model so this is the lowest height (default 10)")
    parser.add_argument("-d", "--diff", default=None,
                        help="a second file to subtract from the input")
    parser.add_argument("-v", "--visualize", action="store_true",
                        help="open the written mesh in an external viewer")
    parser.add_argument("-o", "--output", default="out.stl",
                        help="output file; .stl, .3mf or .png (default out.stl)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging verbosity (default INFO)")
    return parser


def launch_viewer(path: str) -> None:
    """Open ``path`` in the viewer named by $HEIGHTMESH_VIEWER (default f3d)."""
    viewer = os.environ.get("HEIGHTMESH_VIEWER", DEFAULT_VIEWER)
    logger.info("Launching visualisation with %s", viewer)
    try:
        subprocess.run([viewer, path], check=True)
    except FileNotFoundError as e:
        raise ViewerError(f"Viewer {viewer!r} not found") from e
    except subprocess.CalledProcessError as e:
        raise ViewerError(f"Viewer {viewer!r} exited with status {e.returncode}") from e


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    try:
        params = ConversionParams(
            input_path=args.input,
            output_path=args.output,
            window=Window(x=args.x, y=args.y, width=args.width, height=args.height),
            scale=args.scale,
            zero=args.zero,
            diff_path=args.diff,
            visualize=args.visualize,
        )
        fmt = output_format(params.output_path)
    except (ValidationError, HeightmeshError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    raster.initialize()
    try:
        result = convert(params)
        logger.info(result.summary())
        if params.visualize:
            if fmt in MESH_FORMATS:
                launch_viewer(result.output_path)
            else:
                logger.warning("--visualize only applies to mesh output; ignoring")
    except HeightmeshError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        raster.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
