#!/usr/bin/env python3
"""
Command line entry point that generates cavern tilemaps without the GUI.

Usage:
    python src/generate.py assets/samples --width 30 --height 20 --seed 7 --output out/map.csv
    python src/generate.py assets/samples/cavern_12x12.csv --pattern-size 2 --image out/map.png
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

import constants
from logging_config import setup_logging
from model import map_io
from model.pattern_catalog import PatternCatalogError
from model.tileset_manager import TilesetManager
from model.wave_model import WFCContradiction
from model.wfc_generator import GenerationSettings, generate_tilemap

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_CONTRADICTION = 1
EXIT_INPUT_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a cavern tilemap from sample tilemaps")
    parser.add_argument(
        "samples",
        nargs="*",
        type=Path,
        default=[Path(constants.EXAMPLE_SAMPLES_FOLDER)],
        help="Sample CSV files or folders of CSV files (default: %(default)s)",
    )
    parser.add_argument(
        "--pattern-size",
        "-n",
        type=int,
        default=constants.PATTERN_SIZE_DEFAULT,
        help="Width and height of the extracted patterns (default: %(default)s)",
    )
    parser.add_argument(
        "--no-periodic",
        action="store_true",
        help="Do not extract patterns across the sample borders",
    )
    parser.add_argument("--width", type=int, default=constants.OUTPUT_SIZE_DEFAULT, help="Output grid width in cells")
    parser.add_argument("--height", type=int, default=constants.OUTPUT_SIZE_DEFAULT, help="Output grid height in cells")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (omit or negative for a random run)")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Write the tilemap to this CSV file")
    parser.add_argument("--labeled", type=Path, default=None, help="Write the tilemap with a difficulty label line")
    parser.add_argument("--image", type=Path, default=None, help="Render the tilemap to this image file")
    parser.add_argument(
        "--tile-size",
        type=int,
        default=constants.TILE_SIZE_DEFAULT,
        help="Tile size in pixels used for rendering (default: %(default)s)",
    )
    parser.add_argument("--tileset", type=Path, default=None, help="Tileset image used for rendering")
    parser.add_argument("--debug", action="store_true", help="Print debug output to the console")
    parser.add_argument("--log-dir", type=Path, default=None, help="Also write a rotating log file to this folder")
    return parser.parse_args(argv)


def load_samples(paths: list[Path]) -> list[NDArray[np.int_]]:
    """Loads the sample arrays from a mix of CSV files and folders."""
    sample_arrays: list[NDArray[np.int_]] = []
    for path in paths:
        if path.is_dir():
            sample_arrays.extend(map_io.load_all_samples(path))
        else:
            sample_arrays.append(map_io.load_sample_csv(path))
    return sample_arrays


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    setup_logging(
        log_dir=args.log_dir,
        console_level=logging.DEBUG if args.debug else logging.WARNING,
    )

    settings = GenerationSettings(
        pattern_size=args.pattern_size,
        periodic_input=not args.no_periodic,
        output_width=args.width,
        output_height=args.height,
        seed=args.seed,
    )

    tileset_manager = TilesetManager(tile_size=(args.tile_size, args.tile_size))
    try:
        sample_arrays = load_samples(args.samples)
        if args.image is not None and args.tileset is not None:
            tileset_manager.set_tileset(args.tileset, (args.tile_size, args.tile_size))
        result = generate_tilemap(sample_arrays, settings)
    except (map_io.MapFormatError, PatternCatalogError, OSError) as exc:
        logger.error("Invalid input: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except WFCContradiction as exc:
        print(f"Contradiction: {exc} Try another seed.", file=sys.stderr)
        return EXIT_CONTRADICTION

    if args.output is not None:
        map_io.save_tilemap_csv(result.tilemap, args.output)
    if args.labeled is not None:
        map_io.save_labeled_csv(result.tilemap, args.labeled)
    if args.image is not None:
        args.image.parent.mkdir(parents=True, exist_ok=True)
        tileset_manager.save_tilemap_img(tileset_manager.get_tilemap_img(result.tilemap), args.image)

    if args.output is None and args.labeled is None and args.image is None:
        for row in result.tilemap:
            print(",".join(str(int(tile_id)) for tile_id in row))

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
