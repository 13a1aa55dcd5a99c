"""
A cell of the cube

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase, ascii_uppercase

from cubechess.core.exceptions import InvalidNotationError

# The cube is 8x8x8. Kept adjustable for smaller test boards
BOARD_SIZE = 8


@dataclass(frozen=True)
class Square:
    x: int
    y: int
    z: int

    @classmethod
    def from_notation(cls, sq: str) -> Square:
        """Notation: 'Aa1' - 'Hh8' get converted to (0,0,0) - (7,7,7). Layer letter first, then file and rank."""
        layer, file, rank = sq[:1], sq[1:2], sq[2:]
        # NOTE: "" is a substring of every string, so check for missing characters first
        if not (
            layer
            and file
            and layer in ascii_uppercase
            and file in ascii_lowercase
            and rank.isdecimal()
        ):
            raise InvalidNotationError(f"Cannot interpret {sq!r} as a square.")
        return cls(
            x=ord(file) - ord("a"),
            y=int(rank) - 1,
            z=ord(layer) - ord("A"),
        )

    def to_notation(self) -> str:
        return f"{ascii_uppercase[self.z]}{ascii_lowercase[self.x]}{self.y + 1}"

    def is_within_bounds(self, size: int = BOARD_SIZE) -> bool:
        return 0 <= self.x < size and 0 <= self.y < size and 0 <= self.z < size

    def shifted(self, dx: int, dy: int, dz: int) -> Square:
        return Square(self.x + dx, self.y + dy, self.z + dz)
