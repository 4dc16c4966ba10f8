"""
Demonstration script for the streetgrid map generator.
"""

from ascii_render import TILE_GLYPHS, render_map_text, render_tile
from street_parser import parse_map
from street_types import MAP_HEIGHT, MAP_WIDTH, Direction, Edge
from streetgrid import RandomSource, Tile, build_map, collapse, generate, propagate


def demo() -> None:
    """Demonstrate generation, partial states and the tile glyphs."""
    print("=" * 40)
    print("Generated map (seed 7):")
    print("=" * 40)
    result = generate(MAP_WIDTH, MAP_HEIGHT, RandomSource(7))
    print(render_map_text(result.tile_map))
    print(f"attempts: {result.attempts}, collapse steps: {result.steps}")
    print()

    print("=" * 40)
    print("Fresh map before collapse (unknown edges shown as ?):")
    print("=" * 40)
    tile_map = build_map(6, 3, RandomSource(3))
    print(render_map_text(tile_map))
    print()

    print("=" * 40)
    print("Forced resolution in a 3x3 map:")
    print("=" * 40)
    tile_map = parse_map("Sxoxo x??o xx??|x??x _ ?x??|??xx ??x? Hoooo")
    propagate(tile_map, 2, 2)
    # Closing the centre north and west forces its east and south open
    centre = tile_map.get(1, 1)
    centre.set_resolved(Direction.N, False)
    centre.set_resolved(Direction.W, False)
    propagate(tile_map, 1, 1)
    print(render_map_text(tile_map))
    print()

    print("=" * 40)
    print("Same map after full collapse:")
    print("=" * 40)
    collapse(tile_map, RandomSource(1))
    print(render_map_text(tile_map))
    print()

    print("=" * 40)
    print("All 16 tile glyphs (N, E, S, W):")
    print("=" * 40)
    for key in TILE_GLYPHS:
        tile = Tile(0, 0, 1, 1)
        tile.north, tile.east, tile.south, tile.west = (Edge.of(value) for value in key)
        label = "".join("o" if value else "x" for value in key)
        print(label)
        for line in render_tile(tile):
            print(f"  {line}")


if __name__ == "__main__":
    demo()
