"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    ACTIVE = "active"
    WHITE_WINS = "white wins"
    BLACK_WINS = "black wins"


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self == Side.WHITE else Side.WHITE


class Role(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


# A King capture ends the game: the capturing side is the winner
WINNING_STATUS: dict[Side, Status] = {
    Side.WHITE: Status.WHITE_WINS,
    Side.BLACK: Status.BLACK_WINS,
}
