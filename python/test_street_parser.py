"""Tests for street_parser module."""

import pytest

from street_parser import format_map, parse_map
from street_types import Edge, Role


class TestParseMap:
    """Tests for the tile map parser."""

    def test_simple_map(self) -> None:
        """Parse a one-row map with a start and a home."""
        tile_map = parse_map("Sxoxo Hoooo")

        assert tile_map.width == 2
        assert tile_map.height == 1
        start = tile_map.get(0, 0)
        assert start.role is Role.START
        assert start.north is Edge.CLOSED
        assert start.east is Edge.OPEN
        assert start.south is Edge.CLOSED
        assert start.west is Edge.OPEN
        assert tile_map.start is start
        assert tile_map.home is tile_map.get(1, 0)
        assert tile_map.start_pos == (0, 0)
        assert tile_map.home_pos == (1, 0)

    def test_rows_top_to_bottom(self) -> None:
        """The first row has y = 0."""
        tile_map = parse_map("xxxx xxxo|oxxx _")
        assert tile_map.height == 2
        assert tile_map.get(1, 0).west is Edge.OPEN
        assert tile_map.get(0, 1).north is Edge.OPEN
        assert tile_map.get(1, 1).entropy() == 4

    def test_no_forced_resolution(self) -> None:
        """Edges are taken as written, even on interior tiles."""
        tile_map = parse_map("_ _ _|_ xx?? _|_ _ _")
        centre = tile_map.get(1, 1)
        assert centre.is_interior()
        assert centre.south is Edge.UNKNOWN
        assert centre.west is Edge.UNKNOWN

    def test_surrounding_whitespace(self) -> None:
        tile_map = parse_map("  xxxx xxxx | xxxx xxxx  ")
        assert tile_map.width == 2
        assert tile_map.height == 2

    def test_invalid_tile_string(self) -> None:
        with pytest.raises(ValueError, match="Invalid tile string: 'xoq'"):
            parse_map("xxxx xoq")

    def test_invalid_edge_character(self) -> None:
        with pytest.raises(ValueError, match="column 1"):
            parse_map("xxxx xoxz")

    def test_unknown_role_prefix(self) -> None:
        with pytest.raises(ValueError, match="Invalid tile string"):
            parse_map("Qoooo")

    def test_duplicate_start(self) -> None:
        with pytest.raises(ValueError, match=r"Duplicate start tile: 'Sxoxo'[\s\S]*column 0[\s\S]*\(0, 0\)"):
            parse_map("Sxoxo Hoooo|Sxoxo xxxx")

    def test_duplicate_home(self) -> None:
        """A second home is rejected rather than silently moving home_pos."""
        with pytest.raises(ValueError, match="Duplicate home tile"):
            parse_map("Sxoxo Hoooo Hoooo")

    def test_inconsistent_rows(self) -> None:
        with pytest.raises(ValueError, match="Inconsistent row lengths"):
            parse_map("xxxx xxxx|xxxx")


class TestFormatMap:
    """Tests for writing maps back out."""

    def test_format_matches_definition(self) -> None:
        definition = "Sxoxo xxoo|???? Hoxxx"
        assert format_map(parse_map(definition)) == definition

    def test_underscore_written_out(self) -> None:
        assert format_map(parse_map("_ xxxx")) == "???? xxxx"
