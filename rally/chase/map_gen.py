"""
Map generation and object placement
-----------------------------------
- Smooth elevation field from summed sine/cosine waves (numpy)
- Border walls plus a lattice of wall blocks every 4th tile
- Rejection-sampled flag / item placement with a bounded attempt budget
"""

from __future__ import annotations

import math
import random
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .entities import GameObject, ItemType, MapTile, TileType, Vec2

OUT_OF_BOUNDS_TILE = MapTile(elevation=0.5, type=TileType.WALL)


class TileMap:
    """Immutable grid of tiles, indexed [row][col]"""

    def __init__(self, rows: List[List[MapTile]], tile_size: int = 64):
        self.rows = rows
        self.tile_size = tile_size
        self.height = len(rows)
        self.width = len(rows[0]) if rows else 0

    def tile(self, col: int, row: int) -> MapTile:
        if 0 <= row < self.height and 0 <= col < self.width:
            return self.rows[row][col]
        return OUT_OF_BOUNDS_TILE

    def tile_index(self, x: float, y: float) -> Tuple[int, int]:
        """World position -> (col, row)"""
        return math.floor(x / self.tile_size), math.floor(y / self.tile_size)

    def tile_at(self, x: float, y: float) -> MapTile:
        """Tile under a world position; out-of-bounds reads as a neutral wall"""
        col, row = self.tile_index(x, y)
        return self.tile(col, row)

    def tile_center(self, col: int, row: int) -> Vec2:
        return Vec2(col * self.tile_size + self.tile_size / 2, row * self.tile_size + self.tile_size / 2)

    def count(self, tile_type: TileType) -> int:
        return sum(1 for row in self.rows for t in row if t.type is tile_type)


def elevation_field(width: int, height: int, rng: Optional[random.Random] = None) -> np.ndarray:
    """Smooth elevation in [0, 1], shape (height, width)"""
    if rng is None:
        a = b = c = 0.0
    else:
        a, b, c = (rng.uniform(0.0, 2 * math.pi) for _ in range(3))

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    raw = np.sin(xs * 0.2 + a) + np.cos(ys * 0.2 + b) + np.sin((xs + ys) * 0.1 + c)
    return np.clip((raw + 3.0) / 6.0, 0.0, 1.0)


def generate_map(width: int, height: int, rng: Optional[random.Random] = None, tile_size: int = 64) -> TileMap:
    """Build a width x height tile grid; same rng seed gives the same map"""
    elevation = elevation_field(width, height, rng)

    rows = []
    for y in range(height):
        row = []
        for x in range(width):
            if x == 0 or y == 0 or x == width - 1 or y == height - 1:
                tile_type = TileType.WALL
            elif x % 4 == 0 and y % 4 == 0:
                # Block lattice
                tile_type = TileType.WALL
            else:
                tile_type = TileType.ROAD
            row.append(MapTile(elevation=float(elevation[y, x]), type=tile_type))
        rows.append(row)

    return TileMap(rows, tile_size=tile_size)


# ----------------------------
# Placement
# ----------------------------

def _sample_road_tiles(
    tiles: TileMap,
    count: int,
    margin: int,
    rng: random.Random,
    max_attempts: int,
) -> List[Tuple[int, int]]:
    """Pick up to `count` distinct ROAD tiles with interior margin"""
    lo_x, hi_x = margin, tiles.width - 1 - margin
    lo_y, hi_y = margin, tiles.height - 1 - margin
    if count <= 0 or lo_x > hi_x or lo_y > hi_y:
        return []

    picked: List[Tuple[int, int]] = []
    taken = set()
    attempts = 0
    budget = max_attempts * count
    while len(picked) < count and attempts < budget:
        attempts += 1
        col = rng.randint(lo_x, hi_x)
        row = rng.randint(lo_y, hi_y)
        if (col, row) in taken:
            continue
        if tiles.tile(col, row).type is TileType.ROAD:
            taken.add((col, row))
            picked.append((col, row))
    return picked


def place_objects(
    tiles: TileMap,
    flag_count: int,
    item_count: int,
    rng: random.Random,
    max_attempts: int = 200,
) -> List[GameObject]:
    """Place flags and secondary items on ROAD tiles.

    Flags and items are sampled in independent passes, so a flag and an
    item may share a tile. When a pass runs out of attempts it places
    fewer objects instead of spinning.
    """
    objects: List[GameObject] = []

    flag_tiles = _sample_road_tiles(tiles, flag_count, 2, rng, max_attempts)
    if len(flag_tiles) < flag_count:
        logger.warning(f"Placed only {len(flag_tiles)}/{flag_count} flags")
    for n, (col, row) in enumerate(flag_tiles):
        objects.append(GameObject(id=f"flag-{n}", pos=tiles.tile_center(col, row), type=ItemType.FLAG))

    item_tiles = _sample_road_tiles(tiles, item_count, 1, rng, max_attempts)
    if len(item_tiles) < item_count:
        logger.warning(f"Placed only {len(item_tiles)}/{item_count} items")
    for n, (col, row) in enumerate(item_tiles):
        item_type = ItemType.FUEL if rng.random() > 0.5 else ItemType.SMOKE
        objects.append(GameObject(id=f"item-{n}", pos=tiles.tile_center(col, row), type=item_type))

    return objects
