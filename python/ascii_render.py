"""
ASCII rendering for street maps.

Each tile becomes a 3x5 block of box-drawing characters. Blocks are laid out
side by side with thin separators, one band of three text rows per map row.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from street_types import Edge, Role
from streetgrid import Tile, TileMap

logger = logging.getLogger(__name__)

TILE_WIDTH = 5
TILE_HEIGHT = 3

VERTICAL = "║"
HORIZONTAL = "═"
UNKNOWN_MARK = "?"
CELL_SEPARATOR = "│"
BAND_SEPARATOR = "─" * TILE_WIDTH
BAND_CROSSING = "┼"

ROLE_MARKS = {Role.START: "S", Role.HOME: "H"}


# Keyed by (north, east, south, west), True for open
TILE_GLYPHS: dict[tuple[bool, bool, bool, bool], tuple[str, str, str]] = {
    (True, True, True, True): (
        "  ║  ",
        "══╬══",
        "  ║  ",
    ),
    (True, True, True, False): (
        "  ║  ",
        "  ╠══",
        "  ║  ",
    ),
    (True, True, False, True): (
        "  ║  ",
        "══╩══",
        "     ",
    ),
    (True, True, False, False): (
        "  ║  ",
        "  ╚══",
        "     ",
    ),
    (True, False, True, True): (
        "  ║  ",
        "══╣  ",
        "  ║  ",
    ),
    (True, False, True, False): (
        "  ║  ",
        "  ║  ",
        "  ║  ",
    ),
    (True, False, False, True): (
        "  ║  ",
        "══╝  ",
        "     ",
    ),
    (True, False, False, False): (
        "  ║  ",
        "     ",
        "     ",
    ),
    (False, True, True, True): (
        "     ",
        "══╦══",
        "  ║  ",
    ),
    (False, True, True, False): (
        "     ",
        "  ╔══",
        "  ║  ",
    ),
    (False, True, False, True): (
        "     ",
        "═════",
        "     ",
    ),
    (False, True, False, False): (
        "     ",
        "   ══",
        "     ",
    ),
    (False, False, True, True): (
        "     ",
        "══╗  ",
        "  ║  ",
    ),
    (False, False, True, False): (
        "     ",
        "     ",
        "  ║  ",
    ),
    (False, False, False, True): (
        "     ",
        "══   ",
        "     ",
    ),
    (False, False, False, False): (
        "     ",
        "     ",
        "     ",
    ),
}


# =============================================================================
# Tile Rendering
# =============================================================================


def _edge_char(edge: Edge, glyph: str) -> str:
    match edge:
        case Edge.OPEN:
            return glyph
        case Edge.CLOSED:
            return " "
        case Edge.UNKNOWN:
            return UNKNOWN_MARK
        case _:
            raise ValueError(f"Unknown edge state: {edge!r}")


def render_base(tile: Tile) -> list[str]:
    """Render a tile's roads without the role mark."""
    edges = (tile.north, tile.east, tile.south, tile.west)

    if any(edge is Edge.UNKNOWN for edge in edges):
        # Only seen mid-generation; corners and centre stay unknown
        up = _edge_char(tile.north, VERTICAL)
        right = _edge_char(tile.east, HORIZONTAL)
        down = _edge_char(tile.south, VERTICAL)
        left = _edge_char(tile.west, HORIZONTAL)
        return [
            f"??{up}??",
            f"{left}{left}?{right}{right}",
            f"??{down}??",
        ]

    key = (
        tile.north is Edge.OPEN,
        tile.east is Edge.OPEN,
        tile.south is Edge.OPEN,
        tile.west is Edge.OPEN,
    )
    return list(TILE_GLYPHS[key])


def render_tile(tile: Tile) -> list[str]:
    """
    Render a tile to three rows of five characters.

    Start and home tiles carry their mark at the centre of the middle row.
    """
    rows = render_base(tile)
    mark = ROLE_MARKS.get(tile.role)
    if mark is not None:
        middle = rows[1]
        rows[1] = middle[:2] + mark + middle[3:]
    return rows


# =============================================================================
# Map Rendering
# =============================================================================


def _tile_colorizer(tile: Tile) -> Callable[[str], str]:
    if tile.role is Role.START:
        return chalk.greenBright
    if tile.role is Role.HOME:
        return chalk.yellowBright
    if tile.on_path:
        return chalk.cyan
    return chalk.red


def render_map(tile_map: TileMap, color: bool = False) -> list[str]:
    """
    Render a whole map to a list of text rows.

    Each map row becomes three text rows; tiles are separated by a vertical
    line and bands of rows by a horizontal line with crossings.

    Args:
        tile_map: The map to render
        color: Colour roads and role marks with ANSI codes

    Returns:
        3 * height + (height - 1) rows of text
    """
    separator = BAND_CROSSING.join([BAND_SEPARATOR] * tile_map.width)
    if color:
        separator = chalk.blue(separator)
        cell_separator = chalk.blue(CELL_SEPARATOR)
    else:
        cell_separator = CELL_SEPARATOR

    lines: list[str] = []
    for y, row in enumerate(tile_map.rows()):
        blocks = []
        for tile in row:
            block = render_tile(tile)
            if color:
                colorize = _tile_colorizer(tile)
                block = [colorize(line) for line in block]
            blocks.append(block)

        for line_idx in range(TILE_HEIGHT):
            lines.append(cell_separator.join(block[line_idx] for block in blocks))

        if y < tile_map.height - 1:
            lines.append(separator)

    logger.debug("render_map: %dx%d map -> %d lines", tile_map.width, tile_map.height, len(lines))
    return lines


def render_map_text(tile_map: TileMap, color: bool = False) -> str:
    """Render a whole map to a single string."""
    return "\n".join(render_map(tile_map, color=color))
