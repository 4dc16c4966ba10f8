"""
Text format for hand-written tile maps.

Used for test fixtures and for dumping map state in debug logs.
"""

from __future__ import annotations

from street_types import Direction, Edge, Role
from streetgrid import TileMap

__all__ = ["parse_map", "format_map"]

# Edge characters are written in clockwise order starting from north
EDGE_ORDER = (Direction.N, Direction.E, Direction.S, Direction.W)

_EDGE_CHARS = {edge.value: edge for edge in Edge}
_ROLE_PREFIXES = {"S": Role.START, "H": Role.HOME}


def parse_map(definition: str) -> TileMap:
    """
    Parse a tile map from a compact string format.

    Format:
    - Rows separated by |, top row first
    - Tiles separated by single spaces
    - Each tile is four edge characters in N, E, S, W order:
      * 'o': open
      * 'x': closed
      * '?': unknown
    - Optional role prefix: 'S' for start, 'H' for home
    - Underscore only (_): all four edges unknown

    Example:
        "Sxoxo Hoooo"
        Creates a 2x1 map: start at (0, 0) open east and west,
        home at (1, 0) open on every side.

    Edges are assigned as written; no forced resolution is applied.

    Args:
        definition: The map definition

    Returns:
        TileMap with the parsed tiles

    Raises:
        ValueError: If a tile string is malformed, rows differ in length,
            or a role prefix appears twice
    """
    row_strings = definition.strip().split("|")
    rows: list[list[str]] = [row_str.strip().split(" ") for row_str in row_strings]

    width = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != width]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in map definition\n"
            f"  Expected: {width} tiles (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual in mismatched:
            error_msg += f"    Row {row_idx}: {actual} tiles - \"{row_strings[row_idx].strip()}\"\n"
        error_msg += "  All rows must have the same number of tiles"
        raise ValueError(error_msg)

    tile_map = TileMap(width, len(rows))

    for y, row in enumerate(rows):
        for x, tile_str in enumerate(row):
            tile = tile_map.get(x, y)
            text = "????" if tile_str == "_" else tile_str

            if text and text[0] in _ROLE_PREFIXES:
                role = _ROLE_PREFIXES[text[0]]
                previous = tile_map.start_pos if role is Role.START else tile_map.home_pos
                if previous is not None:
                    raise ValueError(
                        f"Duplicate {role.name.lower()} tile: '{tile_str}'\n"
                        f"  Row {y}: \"{row_strings[y].strip()}\"\n"
                        f"  Position: column {x}\n"
                        f"  Already defined at: {previous}\n"
                        f"  A map has at most one 'S' and one 'H' tile"
                    )
                tile.role = role
                if role is Role.START:
                    tile_map.start_pos = (x, y)
                else:
                    tile_map.home_pos = (x, y)
                text = text[1:]

            if len(text) != 4 or any(char not in _EDGE_CHARS for char in text):
                raise ValueError(
                    f"Invalid tile string: '{tile_str}'\n"
                    f"  Row {y}: \"{row_strings[y].strip()}\"\n"
                    f"  Position: column {x}\n"
                    f"  Valid formats:\n"
                    f"    - Four edge characters in N, E, S, W order: 'o' open, 'x' closed, '?' unknown\n"
                    f"    - Optional 'S' (start) or 'H' (home) prefix, e.g. 'Hoooo'\n"
                    f"    - '_': all edges unknown"
                )

            for direction, char in zip(EDGE_ORDER, text):
                tile.assign(direction, _EDGE_CHARS[char])

    return tile_map


def format_map(tile_map: TileMap) -> str:
    """Write a map in the format read by parse_map."""
    row_strings = []
    for row in tile_map.rows():
        tile_strings = []
        for tile in row:
            prefix = {Role.START: "S", Role.HOME: "H"}.get(tile.role, "")
            tile_strings.append(prefix + "".join(tile.get(d).value for d in EDGE_ORDER))
        row_strings.append(" ".join(tile_strings))
    return "|".join(row_strings)
