"""
Applying moves to a board.

Both entry points are pure: they return a new board and the side effects of the move (`Effects`),
and leave the board they were given untouched.
"""

from dataclasses import dataclass
from typing import Optional

from cubechess.chess.board import Board
from cubechess.chess.castling import castling_squares
from cubechess.chess.moves import Move, promotion_layer
from cubechess.chess.pieces import Piece
from cubechess.chess.square import Square
from cubechess.core.exceptions import IllegalMoveError, InvalidPromotionError
from cubechess.core.shared_types import Role, Side

PROMOTION_OPTIONS: tuple[Role, ...] = (
    Role.KNIGHT,
    Role.BISHOP,
    Role.ROOK,
    Role.QUEEN,
)


@dataclass(frozen=True)
class PromotionPending:
    """A pawn move that reaches the far layer. Nothing happens on the board until the role is chosen."""

    piece: Piece
    move: Move


@dataclass(frozen=True)
class Effects:
    """Side information of applying a move. All fields empty: a quiet move."""

    capture: Optional[Piece] = None
    win: Optional[Side] = None
    promotion_pending: Optional[PromotionPending] = None


def is_pawn_move_to_promotion_layer(piece: Piece, move: Move, size: int) -> bool:
    return piece.role == Role.PAWN and move.to_square.z == promotion_layer(
        piece.side, size
    )


def apply_move(board: Board, piece: Piece, move: Move) -> tuple[Board, Effects]:
    """
    Make the move on a copy of the board
    ----

    1. pawn reaching the far layer? --> report the pending promotion, board stays as is
    2. capture whatever stands on the destination (capturing the King wins the game)
    3. empty the origin
    4. castling: bring the rook next to the king
    5. write the piece to its destination, marked as moved

    NOTE the move is not validated against the generated moves here. That is up to the caller.
    """
    if is_pawn_move_to_promotion_layer(piece, move, board.size):
        return board, Effects(promotion_pending=PromotionPending(piece, move))

    capture, win = _resolve_capture(board, piece, move.to_square)

    changes: dict[Square, Optional[Piece]] = {piece.square: None}

    if move.castle is not None:
        squares = castling_squares(piece.square, move.castle, board.size)
        rook = board.occupant_at(squares.rook_from)
        if rook is None or rook.role != Role.ROOK or rook.side != piece.side:
            raise IllegalMoveError(
                f"Cannot castle {move.castle.value}: no rook on {squares.rook_from.to_notation()}."
            )
        changes[squares.rook_from] = None
        changes[squares.rook_to] = rook.moved_to(squares.rook_to)

    changes[move.to_square] = piece.moved_to(move.to_square)
    return board.with_changes(changes), Effects(capture=capture, win=win)


def complete_promotion(
    board: Board, piece: Piece, destination: Square, role: Role
) -> tuple[Board, Effects]:
    """Second half of a pawn move onto the far layer: the pawn is replaced by a piece of the chosen role."""
    if role not in PROMOTION_OPTIONS:
        raise InvalidPromotionError(
            f"Cannot promote into a {role}. Pick one from {', '.join(PROMOTION_OPTIONS)}."
        )

    capture, win = _resolve_capture(board, piece, destination)
    promoted = piece.moved_to(destination).promoted_to(role)
    new_board = board.with_changes({piece.square: None, destination: promoted})
    return new_board, Effects(capture=capture, win=win)


def _resolve_capture(
    board: Board, piece: Piece, destination: Square
) -> tuple[Optional[Piece], Optional[Side]]:
    """Whatever stands on the destination gets captured. The King being captured decides the game."""
    captured = board.occupant_at(destination)
    if captured is None:
        return None, None
    win = piece.side if captured.role == Role.KING else None
    return captured, win
