"""
Street map generation on a grid of tiles.
Three-phase algorithm: collapse (resolve every tile edge) -> validate (prune
everything not connected to the start) -> render (ASCII output).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator, Sequence, TypeVar

from street_types import (
    DIRECTIONS,
    MAP_HEIGHT,
    MAP_WIDTH,
    NO_CANDIDATE,
    Direction,
    Edge,
    Role,
    delta,
    opposite,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Randomness
# =============================================================================


class RandomSource:
    """
    The only source of randomness consumed by generation.

    Generation needs exactly two capabilities: a fair coin and a uniform pick
    from a small non-empty sequence. Pass a seed for reproducible maps, or
    subclass to script the outcomes in tests.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def coin(self) -> bool:
        return self._random.random() < 0.5

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[self._random.randrange(len(options))]


# =============================================================================
# Data Structures: Tiles
# =============================================================================


@dataclass(eq=False)
class Tile:
    """
    One square of the map: four edges, a role and a path-membership flag.

    The position is fixed at creation. The map dimensions are kept so the
    tile can tell whether it touches the boundary.
    """

    x: int
    y: int
    map_width: int
    map_height: int
    north: Edge = Edge.UNKNOWN
    south: Edge = Edge.UNKNOWN
    east: Edge = Edge.UNKNOWN
    west: Edge = Edge.UNKNOWN
    role: Role = Role.NORMAL
    on_path: bool = False

    def get(self, direction: Direction) -> Edge:
        match direction:
            case Direction.N:
                return self.north
            case Direction.S:
                return self.south
            case Direction.E:
                return self.east
            case Direction.W:
                return self.west
            case _:
                raise ValueError(f"No such direction: {direction!r}")

    def assign(self, direction: Direction, edge: Edge) -> None:
        """Set an edge with no forced resolution (boundaries, roles, fixtures)."""
        match direction:
            case Direction.N:
                self.north = edge
            case Direction.S:
                self.south = edge
            case Direction.E:
                self.east = edge
            case Direction.W:
                self.west = edge
            case _:
                raise ValueError(f"No such direction: {direction!r}")

    def set_resolved(self, direction: Direction, value: bool) -> None:
        """
        Resolve an edge to open (True) or closed (False).

        An interior tile that ends up with exactly two closed edges gets every
        remaining unknown edge forced open, so it can never become a dead end
        or an isolated stub. Boundary tiles are exempt.
        """
        self.assign(direction, Edge.of(value))
        if self.empty_count() == 2 and self.is_interior():
            for remaining in self.unresolved_directions():
                self.assign(remaining, Edge.OPEN)

    def try_resolve(self, direction: Direction, value: bool) -> bool:
        """Resolve an edge only if it is still unknown. Returns True if it changed."""
        if self.get(direction) is Edge.UNKNOWN:
            self.set_resolved(direction, value)
            return True
        return False

    def collapse(self, rng: RandomSource) -> None:
        """Resolve every unknown edge, one random edge at a time."""
        unresolved = self.unresolved_directions()
        while unresolved:
            direction = rng.choice(unresolved)
            self.set_resolved(direction, rng.coin())
            unresolved = self.unresolved_directions()

    def clear(self) -> None:
        """Close all four edges."""
        for direction in DIRECTIONS:
            self.assign(direction, Edge.CLOSED)

    def is_interior(self) -> bool:
        return (
            self.x != 0
            and self.x != self.map_width - 1
            and self.y != 0
            and self.y != self.map_height - 1
        )

    def unresolved_directions(self) -> list[Direction]:
        return [d for d in DIRECTIONS if self.get(d) is Edge.UNKNOWN]

    def _count(self, edge: Edge) -> int:
        return sum(1 for d in DIRECTIONS if self.get(d) is edge)

    def entropy(self) -> int:
        """Number of edges still unknown (0-4)."""
        return self._count(Edge.UNKNOWN)

    def empty_count(self) -> int:
        """Number of edges resolved to closed."""
        return self._count(Edge.CLOSED)

    def open_count(self) -> int:
        return self._count(Edge.OPEN)


# =============================================================================
# Data Structures: Map
# =============================================================================


class TileMap:
    """
    A width x height arrangement of tiles, indexed by (x, y).

    The map owns its tiles. Iteration runs in scan order: x outer, y inner.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Map dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._columns: list[list[Tile]] = [
            [Tile(x, y, width, height) for y in range(height)] for x in range(width)
        ]
        self.start_pos: tuple[int, int] | None = None
        self.home_pos: tuple[int, int] | None = None

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise ValueError(f"Position ({x}, {y}) outside {self.width}x{self.height} map")
        return self._columns[x][y]

    def maybe_get(self, x: int, y: int) -> Tile | None:
        if self.in_bounds(x, y):
            return self._columns[x][y]
        return None

    def neighbor(self, x: int, y: int, direction: Direction) -> tuple[Tile | None, int, int]:
        """Return (tile or None, nx, ny) one step from (x, y) in the given direction."""
        dx, dy = delta(direction)
        nx, ny = x + dx, y + dy
        return (self.maybe_get(nx, ny), nx, ny)

    def __iter__(self) -> Iterator[Tile]:
        for column in self._columns:
            yield from column

    def rows(self) -> Iterator[list[Tile]]:
        """Yield the tiles one row (fixed y) at a time, top to bottom."""
        for y in range(self.height):
            yield [self._columns[x][y] for x in range(self.width)]

    @property
    def start(self) -> Tile:
        return self._role_tile(self.start_pos, Role.START)

    @property
    def home(self) -> Tile:
        return self._role_tile(self.home_pos, Role.HOME)

    def _role_tile(self, pos: tuple[int, int] | None, role: Role) -> Tile:
        if pos is not None:
            return self.get(*pos)
        for tile in self:
            if tile.role is role:
                return tile
        raise ValueError(f"Map has no {role.value} tile")

    def total_entropy(self) -> int:
        return sum(tile.entropy() for tile in self)


# =============================================================================
# Phase 0: Build
# =============================================================================


def build_map(width: int, height: int, rng: RandomSource) -> TileMap:
    """
    Create a fresh map with boundary edges closed and start/home placed.

    Start sits on the west edge with its west edge open (the point of entry).
    Home sits on the east edge with all four edges open, and its neighbours
    are brought into agreement straight away.
    """
    tile_map = TileMap(width, height)

    for tile in tile_map:
        for direction in DIRECTIONS:
            neighbor, _, _ = tile_map.neighbor(tile.x, tile.y, direction)
            if neighbor is None:
                tile.assign(direction, Edge.CLOSED)

    start_y = rng.choice(range(height))
    start = tile_map.get(0, start_y)
    start.role = Role.START
    start.assign(Direction.W, Edge.OPEN)
    tile_map.start_pos = (0, start_y)

    home_x = width - 1
    home_y = rng.choice(range(height))
    home = tile_map.get(home_x, home_y)
    home.role = Role.HOME
    for direction in DIRECTIONS:
        home.assign(direction, Edge.OPEN)
    tile_map.home_pos = (home_x, home_y)
    propagate(tile_map, home_x, home_y)

    return tile_map


# =============================================================================
# Phase 1: Collapse
# =============================================================================


def find_lowest_entropy(tile_map: TileMap) -> tuple[int, int, int]:
    """
    Find the tile with the fewest unknown edges that still has any.

    Ties go to the first tile in scan order.

    Returns:
        (entropy, x, y), or (NO_CANDIDATE, -1, -1) if every tile is resolved
    """
    lowest = NO_CANDIDATE
    lowest_x = -1
    lowest_y = -1
    for tile in tile_map:
        entropy = tile.entropy()
        if 0 < entropy < lowest:
            lowest = entropy
            lowest_x = tile.x
            lowest_y = tile.y
    return (lowest, lowest_x, lowest_y)


def propagate(tile_map: TileMap, x: int, y: int) -> int:
    """
    Push the resolved edges of a tile onto its neighbours, and onward.

    A neighbour whose facing edge was still unknown takes the same value; that
    may trigger its forced resolution, so every neighbour that changed is
    propagated from in turn, depth-first. All of a tile's edges are mirrored
    before descending into any of its neighbours.

    Returns:
        Number of neighbour edges that changed
    """
    changed = 0
    stack: list[tuple[int, int]] = [(x, y)]

    while stack:
        cx, cy = stack.pop()
        tile = tile_map.get(cx, cy)
        touched: list[tuple[int, int]] = []

        for direction in DIRECTIONS:
            edge = tile.get(direction)
            if not edge.resolved:
                continue
            neighbor, nx, ny = tile_map.neighbor(cx, cy, direction)
            if neighbor is None:
                continue
            if neighbor.try_resolve(opposite(direction), edge is Edge.OPEN):
                changed += 1
                touched.append((nx, ny))

        # Reversed so the first direction is popped (and explored) first
        stack.extend(reversed(touched))

    return changed


def collapse(tile_map: TileMap, rng: RandomSource) -> int:
    """
    Resolve every edge in the map.

    Repeatedly collapses the lowest-entropy tile and propagates the result,
    until nothing is left unknown. Always terminates: each step resolves at
    least one edge and edges never go back to unknown.

    Returns:
        Number of tiles collapsed
    """
    steps = 0
    while True:
        lowest, x, y = find_lowest_entropy(tile_map)
        if lowest == NO_CANDIDATE:
            break

        tile_map.get(x, y).collapse(rng)
        changed = propagate(tile_map, x, y)
        steps += 1
        logger.debug("collapse: step %d at (%d, %d), entropy=%d, propagated=%d", steps, x, y, lowest, changed)

    return steps


# =============================================================================
# Phase 2: Validate
# =============================================================================


def validate_and_prune(tile_map: TileMap) -> bool:
    """
    Check that home is reachable from start, and remove everything else.

    Marks every tile reachable from start along open edges as on the path
    (flags from an earlier run are reset first, so a second run on an
    accepted map changes nothing). If home is not among them the map is left as is (apart from the path
    flags) and False is returned; the caller is expected to throw the map away.
    Otherwise every tile off the path is cleared, removing loops and branches
    that collapse produced but nothing connects to.
    """
    for tile in tile_map:
        tile.on_path = False

    start = tile_map.start
    home_on_path = False
    stack: list[Tile] = [start]

    while stack:
        tile = stack.pop()
        if tile.on_path:
            continue
        tile.on_path = True
        home_on_path = home_on_path or tile.role is Role.HOME

        for direction in DIRECTIONS:
            if tile.get(direction) is not Edge.OPEN:
                continue
            neighbor, _, _ = tile_map.neighbor(tile.x, tile.y, direction)
            if neighbor is not None:
                stack.append(neighbor)

    if not home_on_path:
        return False

    pruned = 0
    for tile in tile_map:
        if not tile.on_path:
            tile.clear()
            pruned += 1

    logger.debug("validate_and_prune: home reachable, pruned %d tiles", pruned)
    return True


# =============================================================================
# Driver
# =============================================================================


@dataclass(frozen=True)
class GenerationResult:
    """An accepted map and what it took to get it."""

    tile_map: TileMap
    attempts: int  # Maps built, including the accepted one
    steps: int  # Collapse steps of the accepted map


def generate(
    width: int = MAP_WIDTH,
    height: int = MAP_HEIGHT,
    rng: RandomSource | None = None,
) -> GenerationResult:
    """
    Build, collapse and validate maps until one connects start to home.

    An unreachable home cannot be repaired locally, so a failed map is
    discarded whole and generation starts over.
    """
    if rng is None:
        rng = RandomSource()

    attempts = 0
    while True:
        attempts += 1
        tile_map = build_map(width, height, rng)
        steps = collapse(tile_map, rng)
        if validate_and_prune(tile_map):
            logger.info(
                "generate: %dx%d map accepted after %d attempt(s), %d collapse steps",
                width,
                height,
                attempts,
                steps,
            )
            return GenerationResult(tile_map, attempts, steps)
        logger.debug("generate: attempt %d rejected, home unreachable", attempts)
