"""The Board holds the `position` (in cubic chess: the configuration of pieces in the 8x8x8 cube)"""

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Optional, Self

from cubechess.chess.notation import (
    LAYER_SEPARATOR,
    ROW_SEPARATOR,
    decode_position,
    encode_row,
)
from cubechess.chess.pieces import Piece
from cubechess.chess.square import BOARD_SIZE, Square
from cubechess.core.exceptions import OutOfBoundsError
from cubechess.core.shared_types import Role, Side

# Layers 0 (White) and 7 (Black). Row y, read from x = 0 to x = 7.
MAJOR_PIECE_PATTERN: tuple[str, ...] = (
    "rnbrrbnr",
    "nnbqqbnn",
    "bbbqqbbb",
    "rqqqkqqr",
    "rqqqqqqr",
    "bbbqqbbb",
    "nnbqqbnn",
    "rnbrrbnr",
)
PAWN_ROW = "pppppppp"

# layer -> rows placed on it in the starting position. Layers 2 - 5 start empty.
STARTING_LAYERS: dict[int, tuple[str, ...]] = {
    0: MAJOR_PIECE_PATTERN,
    1: (PAWN_ROW,) * BOARD_SIZE,
    6: (PAWN_ROW,) * BOARD_SIZE,
    7: MAJOR_PIECE_PATTERN,
}

Cells = tuple[Optional[Piece], ...]


@dataclass(frozen=True)
class Board:
    """
    Immutable cube of optional pieces.
    ----

    Cells are stored in a flat tuple (index = x + size * y + size^2 * z).
    Every update allocates a new tuple where only the changed cells differ, so whoever still holds
    the previous board never sees the change.
    """

    cells: Cells
    size: int = BOARD_SIZE

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> Self:
        return cls((None,) * size**3, size)

    @classmethod
    def initialize(cls) -> Self:
        """
        The starting position.

        White's camp is z < 4, Black's camp is z >= 4. Both sides use the same letters in the pattern,
        the layer decides the color.
        """
        board = cls.empty(BOARD_SIZE)
        placements: dict[Square, Optional[Piece]] = {}
        for z, rows in STARTING_LAYERS.items():
            side = Side.WHITE if z < BOARD_SIZE // 2 else Side.BLACK
            for y, row in enumerate(rows):
                for x, character in enumerate(row):
                    letter = character.upper() if side == Side.WHITE else character
                    square = Square(x, y, z)
                    placements[square] = Piece.from_letter(letter, square)
        return board.with_changes(placements)

    @classmethod
    def from_pieces(cls, pieces: list[Piece], size: int = BOARD_SIZE) -> Self:
        """Convenience method: build a board containing exactly the given pieces"""
        return cls.empty(size).with_changes({piece.square: piece for piece in pieces})

    @classmethod
    def from_notation(cls, position: str, size: int = BOARD_SIZE) -> Self:
        """Construct a board from its notation (see notation.py)"""
        return cls.from_pieces(decode_position(position, size), size)

    def to_notation(self) -> str:
        return LAYER_SEPARATOR.join(self._layer_to_notation(z) for z in range(self.size))

    def _layer_to_notation(self, z: int) -> str:
        return ROW_SEPARATOR.join(
            encode_row([self._cell(Square(x, y, z)) for x in range(self.size)])
            for y in range(self.size)
        )

    # --- OCCUPANCY ---
    def occupant_at(self, square: Square) -> Optional[Piece]:
        if not square.is_within_bounds(self.size):
            raise OutOfBoundsError(
                f"({square.x}, {square.y}, {square.z}) lies outside of the {self.size}x{self.size}x{self.size} board."
            )
        return self._cell(square)

    def is_empty(self, square: Square) -> bool:
        return self.occupant_at(square) is None

    def _index(self, square: Square) -> int:
        return square.x + self.size * square.y + self.size * self.size * square.z

    def _cell(self, square: Square) -> Optional[Piece]:
        return self.cells[self._index(square)]

    # --- UPDATES (always a new board) ---
    def with_changes(self, changes: Mapping[Square, Optional[Piece]]) -> Self:
        """
        Copy-on-write update: return a new board with the given cells overwritten.
        `None` empties a cell. A piece must be written to the cell matching its own coordinates.
        """
        cells = list(self.cells)
        for square, piece in changes.items():
            if not square.is_within_bounds(self.size):
                raise OutOfBoundsError(
                    f"Cannot write to ({square.x}, {square.y}, {square.z}): outside of the board."
                )
            if piece is not None and piece.square != square:
                raise ValueError(
                    f"Piece standing on {piece.square} cannot be written to {square}."
                )
            cells[self._index(square)] = piece
        return type(self)(tuple(cells), self.size)

    def place_piece(self, piece: Piece) -> Self:
        return self.with_changes({piece.square: piece})

    def remove_piece(self, square: Square) -> Self:
        return self.with_changes({square: None})

    # --- QUERIES ---
    def pieces(self, side: Optional[Side] = None) -> list[Piece]:
        """All pieces on the board (of one side, if given). Ordered by cell index."""
        return [
            piece
            for piece in self.cells
            if piece is not None and (side is None or piece.side == side)
        ]

    def locate_pieces(self, role: Role, side: Side) -> list[Square]:
        return [piece.square for piece in self.pieces(side) if piece.role == role]

    def count_roles(self, side: Side) -> Counter[Role]:
        return Counter(piece.role for piece in self.pieces(side))

    def count_material(self) -> dict[Side, int]:
        """Tally the points of material each side has on the board"""
        return {side: sum(piece.points for piece in self.pieces(side)) for side in Side}


def initialize_board() -> Board:
    return Board.initialize()


def occupant_at(board: Board, x: int, y: int, z: int) -> Optional[Piece]:
    return board.occupant_at(Square(x, y, z))
