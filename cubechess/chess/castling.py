"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum

from cubechess.chess.square import BOARD_SIZE, Square


class CastleSide(Enum):
    """King-side castles toward the maximum-x edge, queen-side toward the minimum-x edge."""

    KING_SIDE = "king-side"
    QUEEN_SIDE = "queen-side"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    All four squares lie in the king's row (same y and z).
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square


def castling_squares(
    king_square: Square, side: CastleSide, size: int = BOARD_SIZE
) -> CastlingSquares:
    """
    The king moves two cells toward the rook, the rook lands on the cell the king passed over.

    NOTE: The result is not guaranteed to lie within bounds. Callers check this before offering the move.
    """
    direction = 1 if side == CastleSide.KING_SIDE else -1
    rook_x = size - 1 if side == CastleSide.KING_SIDE else 0
    king_to = king_square.shifted(2 * direction, 0, 0)
    return CastlingSquares(
        king_from=king_square,
        king_to=king_to,
        rook_from=Square(rook_x, king_square.y, king_square.z),
        rook_to=king_to.shifted(-direction, 0, 0),
    )
