"""Defines the pieces standing in the cube"""

from dataclasses import dataclass, replace
from typing import Self

from cubechess.chess.square import Square
from cubechess.core.shared_types import Role, Side

LETTER_TO_ROLE: dict[str, Role] = {
    "p": Role.PAWN,
    "n": Role.KNIGHT,
    "b": Role.BISHOP,
    "r": Role.ROOK,
    "q": Role.QUEEN,
    "k": Role.KING,
}

ROLE_TO_LETTER: dict[Role, str] = {value: key for key, value in LETTER_TO_ROLE.items()}


PIECE_POINTS: dict[Role, int] = {
    Role.PAWN: 1,
    Role.KNIGHT: 3,
    Role.BISHOP: 3,
    Role.ROOK: 5,
    Role.QUEEN: 9,
}


@dataclass(frozen=True)
class Piece:
    """
    Value-like record of a piece: moving it creates a new record.

    `has_moved` is only consulted for castling. Pawn double steps depend on the starting layer.
    """

    role: Role
    side: Side
    square: Square
    has_moved: bool = False

    @classmethod
    def from_letter(cls, character: str, square: Square, has_moved: bool = False) -> Self:
        # lower case: Black pieces, upper case: White pieces
        side = Side.WHITE if character.isupper() else Side.BLACK
        role = LETTER_TO_ROLE[character.lower()]
        return cls(role, side, square, has_moved)

    def to_letter(self) -> str:
        letter = ROLE_TO_LETTER[self.role]
        return letter.upper() if self.side == Side.WHITE else letter

    @property
    def points(self) -> int:
        # NOTE: The King's worth is undefined (does not count towards total points)
        return PIECE_POINTS.get(self.role, 0)

    def moved_to(self, square: Square) -> Self:
        return replace(self, square=square, has_moved=True)

    def promoted_to(self, role: Role) -> Self:
        return replace(self, role=role, has_moved=True)
