"""Manages the visual representation of tilesets and tilemaps."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

import constants

if TYPE_CHECKING:
    from pathlib import Path

    from numpy.typing import NDArray


logger = logging.getLogger(__name__)


class TilesetManager:
    """Renders tilemaps (grids of tile IDs) into images.

    Tile IDs are drawn with the tile of the same index from a tileset image, if one is loaded and contains that index.
    Otherwise they are drawn as flat squares in the color the palette assigns to them (sand, grass and water for the
    IDs 0, 1 and 2 by default). IDs unknown to both are drawn in a signal color.
    """

    # The dimensions (width, height) of a single tile in pixels.
    _tile_size: tuple[int, int]
    # Maps tile IDs to the colors used when no tileset tile exists for them.
    _palette: dict[int, tuple[int, int, int]]
    # A dictionary mapping tile indices (int) to their corresponding PIL Image objects.
    _tiles: dict[int, Image.Image]
    # The source image containing all individual tiles arranged in a grid (None if no tileset is loaded).
    _tileset_img: Image.Image | None

    def __init__(
        self,
        tileset_img_path: str | Path | None = None,
        tile_size: tuple[int, int] = (constants.TILE_SIZE_DEFAULT, constants.TILE_SIZE_DEFAULT),
        palette: dict[int, tuple[int, int, int]] | None = None,
    ) -> None:
        """Initializes the manager with an optional tileset and a color palette.

        Args:
            tileset_img_path: The file path to the source tileset image. If None, only the palette is used.
            tile_size: The dimensions (width, height) of a single tile in pixels.
            palette: Maps tile IDs to RGB colors. Defaults to constants.TILE_PALETTE_DEFAULT.
        """
        self._tile_size = tile_size
        self._palette = dict(constants.TILE_PALETTE_DEFAULT if palette is None else palette)
        self._tiles = {}
        self._tileset_img = None

        if tileset_img_path is not None:
            self.set_tileset(tileset_img_path, tile_size)

    @property
    def tile_size(self) -> tuple[int, int]:
        """The dimensions (width, height) of a single tile in pixels."""
        return self._tile_size

    def set_tile_size(self, tile_size: tuple[int, int]) -> None:
        """Changes the tile size, re-slicing the loaded tileset image if there is one."""
        if self._tileset_img is not None:
            self._slice_tileset(self._tileset_img, tile_size)
        else:
            self._tile_size = tile_size

    def set_palette(self, palette: dict[int, tuple[int, int, int]]) -> None:
        """Replaces the colors used for tile IDs without a tileset tile."""
        self._palette = dict(palette)

    def set_tileset(self, tileset_img_path: str | Path, tile_size: tuple[int, int]) -> None:
        """Loads a new tileset image and extracts individual tile images.

        The image is opened and then sliced into individual tiles based on 'tile_size'. Each tile is stored in '_tiles'
        with its index, calculated by reading the tileset image row by row.

        Args:
            tileset_img_path: The file path to the source tileset image.
            tile_size: The dimensions (width, height) of a single tile in pixels.
        """
        with Image.open(tileset_img_path) as img:
            tileset_img = img.convert("RGB")

        self._tileset_img = tileset_img
        self._slice_tileset(tileset_img, tile_size)
        logger.info("Loaded tileset %s with %d tiles", tileset_img_path, len(self._tiles))

    def get_tileset_img(self) -> Image.Image | None:
        """Returns the source PIL image containing all individual tiles (None if no tileset is loaded)."""
        return self._tileset_img

    def get_tilemap_img(self, tilemap_array: NDArray[np.int_]) -> Image.Image:
        """Renders a tilemap array into a complete PIL Image object.

        Args:
            tilemap_array: A 2D array containing tile IDs.

        Returns:
            A PIL Image representing the visual tilemap.
        """
        if not self._tiles:
            return self._get_palette_tilemap_img(tilemap_array)

        # tile_size is (width, height) while tilemap_array.shape is (rows, cols), so the indices have to be swapped.
        img_size = (tilemap_array.shape[1] * self._tile_size[0], tilemap_array.shape[0] * self._tile_size[1])
        tilemap_img = Image.new("RGB", img_size)
        for row in range(tilemap_array.shape[0]):
            for col in range(tilemap_array.shape[1]):
                box = (
                    col * self._tile_size[0],
                    row * self._tile_size[1],
                    (col + 1) * self._tile_size[0],
                    (row + 1) * self._tile_size[1],
                )
                tile_id = int(tilemap_array[row, col])
                if tile_id in self._tiles:
                    tilemap_img.paste(self._tiles[tile_id], box)
                else:
                    tilemap_img.paste(self._get_tile_color(tile_id), box)
        return tilemap_img

    def save_tilemap_img(self, tilemap_img: Image.Image, file_path: str | Path) -> None:
        """Saves a generated tilemap image to the specified file path.

        Args:
            tilemap_img: The PIL Image object to be saved.
            file_path: The destination path (including filename and extension).
        """
        tilemap_img.save(file_path)
        logger.info("Saved tilemap image to %s", file_path)

    def _get_palette_tilemap_img(self, tilemap_array: NDArray[np.int_]) -> Image.Image:
        """Renders a tilemap with one flat palette color per tile."""
        colors = np.zeros((*tilemap_array.shape, 3), dtype=np.uint8)
        for tile_id in np.unique(tilemap_array):
            colors[tilemap_array == tile_id] = self._get_tile_color(int(tile_id))

        img_size = (tilemap_array.shape[1] * self._tile_size[0], tilemap_array.shape[0] * self._tile_size[1])
        return Image.fromarray(colors).resize(img_size, Image.Resampling.NEAREST)

    def _get_tile_color(self, tile_id: int) -> tuple[int, int, int]:
        """Returns the palette color of a tile ID, or the signal color for unknown IDs."""
        return self._palette.get(tile_id, constants.TILE_COLOR_UNKNOWN)

    def _slice_tileset(self, tileset_img: Image.Image, tile_size: tuple[int, int]) -> None:
        """Splits a tileset image into tiles of the given size, row by row."""
        self._tile_size = tile_size
        self._tiles = {}

        rows = tileset_img.size[1] // self._tile_size[1]
        cols = tileset_img.size[0] // self._tile_size[0]
        for row in range(rows):
            for col in range(cols):
                box = (
                    col * self._tile_size[0],
                    row * self._tile_size[1],
                    (col + 1) * self._tile_size[0],
                    (row + 1) * self._tile_size[1],
                )
                self._tiles[row * cols + col] = tileset_img.crop(box)
