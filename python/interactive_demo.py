"""
Interactive demo for streetgrid.
Display a generated street map and regenerate it on demand.
"""

import logging

import readchar, sys
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_map_text
from street_parser import format_map
from street_types import MAP_HEIGHT, MAP_WIDTH
from streetgrid import GenerationResult, RandomSource, generate

logger = logging.getLogger(__name__)


class InteractiveDemo:
    """Interactive map regeneration loop."""

    def __init__(self, seed: int | None = None) -> None:
        self.rng = RandomSource(seed)
        self.console = Console()
        self.status_message = "Ready"
        self.maps_generated = 0
        self.result: GenerationResult
        self.regenerate()

    def regenerate(self) -> GenerationResult:
        """Generate a new map, replacing the current one."""
        result = generate(MAP_WIDTH, MAP_HEIGHT, self.rng)
        self.maps_generated += 1
        self.status_message = (
            f"✓ Map {self.maps_generated} generated "
            f"({result.attempts} attempt(s), {result.steps} collapse steps)"
        )
        logger.debug("regenerate: %s", format_map(result.tile_map))
        self.result = result
        return result

    def generate_display(self) -> Panel:
        """Generate the current display with map and status."""
        tile_map = self.result.tile_map
        start = tile_map.start
        home = tile_map.home

        status = Text()
        status.append("Start: ", style="bold")
        status.append(f"({start.x}, {start.y})   ")
        status.append("Home: ", style="bold")
        status.append(f"({home.x}, {home.y})\n")
        status.append("Seed: ", style="bold")
        status.append(f"{self.rng.seed if self.rng.seed is not None else 'random'}\n\n")

        # Convert ANSI-colored map text to Rich Text
        status.append(Text.from_ansi(render_map_text(tile_map, color=True)))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  Enter / R - Regenerate\n")
        status.append("  Q - Quit\n\n")

        # Status line at the bottom
        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Streetgrid", border_style="green", width=80)

    def run(self) -> None:
        """Run the interactive loop."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key in (readchar.key.ENTER, readchar.key.CR, readchar.key.LF) or key.lower() == 'r':
                        self.regenerate()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(argv: list[str]) -> None:
    """Run the demo; 'print [seed]' renders one map to stdout instead."""
    if len(argv) > 1 and argv[1] == 'print':
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
        seed = int(argv[2]) if len(argv) > 2 else None
        result = generate(MAP_WIDTH, MAP_HEIGHT, RandomSource(seed))
        print(render_map_text(result.tile_map))
    else:
        seed = int(argv[1]) if len(argv) > 1 else None
        InteractiveDemo(seed).run()


if __name__ == "__main__":
    main(sys.argv)
