"""Unit tests for /cubechess/chess/rules.py"""

from typing import Callable

import pytest

from cubechess.chess.board import Board
from cubechess.chess.castling import CastleSide
from cubechess.chess.moves import Move, generate_moves
from cubechess.chess.pieces import Piece
from cubechess.chess.rules import (
    PROMOTION_OPTIONS,
    Effects,
    PromotionPending,
    apply_move,
    complete_promotion,
)
from cubechess.chess.square import Square
from cubechess.core.exceptions import IllegalMoveError, InvalidPromotionError
from cubechess.core.shared_types import Role, Side

BoardFactory = Callable[..., Board]


def piece_on(board: Board, x: int, y: int, z: int) -> Piece:
    piece = board.occupant_at(Square(x, y, z))
    assert piece is not None
    return piece


def find_move(piece: Piece, board: Board, to_square: Square) -> Move:
    return next(m for m in generate_moves(piece, board) if m.to_square == to_square)


# --- APPLY MOVE ---
def test_quiet_move(board_with: BoardFactory) -> None:
    board = board_with(("N", 1, 1, 1))
    knight = piece_on(board, 1, 1, 1)
    move = find_move(knight, board, Square(3, 2, 1))

    new_board, effects = apply_move(board, knight, move)

    assert effects == Effects()
    assert new_board.occupant_at(Square(1, 1, 1)) is None
    assert new_board.occupant_at(Square(3, 2, 1)) == Piece(
        Role.KNIGHT, Side.WHITE, Square(3, 2, 1), has_moved=True
    )


def test_moved_piece_has_new_coordinates(board_with: BoardFactory) -> None:
    """No stale coordinates: the piece on the destination knows where it is, and can move on from there"""
    board = board_with(("B", 0, 0, 0))
    bishop = piece_on(board, 0, 0, 0)
    new_board, _ = apply_move(board, bishop, find_move(bishop, board, Square(2, 2, 2)))

    moved = piece_on(new_board, 2, 2, 2)
    assert moved.square == Square(2, 2, 2)
    next_moves = generate_moves(moved, new_board)
    assert all(m.from_square == Square(2, 2, 2) for m in next_moves)
    assert Move(Square(2, 2, 2), Square(0, 0, 0)) in next_moves


def test_old_board_untouched(board_with: BoardFactory) -> None:
    board = board_with(("R", 3, 3, 3), ("p", 3, 3, 6))
    before = board.to_notation()
    rook = piece_on(board, 3, 3, 3)

    apply_move(board, rook, find_move(rook, board, Square(3, 3, 6)))

    assert board.to_notation() == before
    assert board.occupant_at(Square(3, 3, 3)) == rook


def test_capture(board_with: BoardFactory) -> None:
    board = board_with(("R", 3, 3, 3), ("p", 3, 3, 6))
    rook = piece_on(board, 3, 3, 3)
    pawn = piece_on(board, 3, 3, 6)

    new_board, effects = apply_move(board, rook, find_move(rook, board, Square(3, 3, 6)))

    assert effects.capture == pawn
    assert effects.win is None
    assert new_board.pieces(Side.BLACK) == []
    assert piece_on(new_board, 3, 3, 6).role == Role.ROOK


def test_king_capture_wins(board_with: BoardFactory) -> None:
    """Capturing the King ends the game: the capturing side wins and the King is gone"""
    board = board_with(("k", 4, 3, 7), ("Q", 4, 3, 2), ("K", 4, 3, 0))
    queen = piece_on(board, 4, 3, 2)

    new_board, effects = apply_move(board, queen, find_move(queen, board, Square(4, 3, 7)))

    assert effects.win == Side.WHITE
    assert effects.capture is not None
    assert effects.capture.role == Role.KING
    assert new_board.locate_pieces(Role.KING, Side.BLACK) == []


def test_black_wins_too(board_with: BoardFactory) -> None:
    board = board_with(("K", 0, 0, 0), ("n", 2, 1, 0))
    knight = piece_on(board, 2, 1, 0)
    _, effects = apply_move(board, knight, find_move(knight, board, Square(0, 0, 0)))
    assert effects.win == Side.BLACK


# --- CASTLING ---
@pytest.mark.parametrize(
    "side, king_x, rook_from_x, rook_to_x",
    [(CastleSide.KING_SIDE, 6, 7, 5), (CastleSide.QUEEN_SIDE, 2, 0, 3)],
)
def test_castling_relocates_rook(
    board_with: BoardFactory, side: CastleSide, king_x: int, rook_from_x: int, rook_to_x: int
) -> None:
    board = board_with(("k", 4, 3, 7), ("r", 0, 3, 7), ("r", 7, 3, 7))
    king = piece_on(board, 4, 3, 7)
    move = Move(king.square, Square(king_x, 3, 7), castle=side)
    assert move in generate_moves(king, board)

    new_board, effects = apply_move(board, king, move)

    assert effects == Effects()
    assert new_board.occupant_at(Square(4, 3, 7)) is None
    assert new_board.occupant_at(Square(rook_from_x, 3, 7)) is None
    assert new_board.occupant_at(Square(king_x, 3, 7)) == Piece(
        Role.KING, Side.BLACK, Square(king_x, 3, 7), has_moved=True
    )
    assert new_board.occupant_at(Square(rook_to_x, 3, 7)) == Piece(
        Role.ROOK, Side.BLACK, Square(rook_to_x, 3, 7), has_moved=True
    )
    assert len(new_board.pieces()) == 3


def test_castling_without_rook_is_rejected(board_with: BoardFactory) -> None:
    board = board_with(("K", 4, 3, 0))
    king = piece_on(board, 4, 3, 0)
    move = Move(king.square, Square(6, 3, 0), castle=CastleSide.KING_SIDE)
    with pytest.raises(IllegalMoveError):
        apply_move(board, king, move)


# --- PROMOTION ---
def test_pawn_reaching_far_layer_waits_for_promotion(board_with: BoardFactory) -> None:
    """Board is not touched until the promotion is completed"""
    board = board_with(("P", 2, 2, 6))
    pawn = piece_on(board, 2, 2, 6)
    move = find_move(pawn, board, Square(2, 2, 7))

    new_board, effects = apply_move(board, pawn, move)

    assert new_board == board
    assert effects.promotion_pending == PromotionPending(pawn, move)
    assert effects.capture is None


def test_black_pawn_promotes_on_layer_zero(board_with: BoardFactory) -> None:
    board = board_with(("p", 5, 5, 1), ("R", 4, 4, 0))
    pawn = piece_on(board, 5, 5, 1)
    move = find_move(pawn, board, Square(4, 4, 0))
    _, effects = apply_move(board, pawn, move)
    assert effects.promotion_pending is not None
    # the capture is only resolved once the promotion completes
    assert effects.capture is None


def test_promote_to_queen(board_with: BoardFactory) -> None:
    board = board_with(("P", 2, 2, 6))
    pawn = piece_on(board, 2, 2, 6)

    new_board, effects = complete_promotion(board, pawn, Square(2, 2, 7), Role.QUEEN)

    assert effects == Effects()
    assert new_board.occupant_at(Square(2, 2, 6)) is None
    assert new_board.occupant_at(Square(2, 2, 7)) == Piece(
        Role.QUEEN, Side.WHITE, Square(2, 2, 7), has_moved=True
    )
    # the board handed in is not changed
    assert board.occupant_at(Square(2, 2, 6)) == pawn


@pytest.mark.parametrize("role", PROMOTION_OPTIONS)
def test_promotion_options(board_with: BoardFactory, role: Role) -> None:
    board = board_with(("p", 0, 0, 1))
    pawn = piece_on(board, 0, 0, 1)
    new_board, _ = complete_promotion(board, pawn, Square(0, 0, 0), role)
    assert piece_on(new_board, 0, 0, 0).role == role
    assert piece_on(new_board, 0, 0, 0).side == Side.BLACK


@pytest.mark.parametrize("role", [Role.KING, Role.PAWN])
def test_invalid_promotion(board_with: BoardFactory, role: Role) -> None:
    board = board_with(("P", 2, 2, 6))
    pawn = piece_on(board, 2, 2, 6)
    with pytest.raises(InvalidPromotionError):
        complete_promotion(board, pawn, Square(2, 2, 7), role)


def test_promotion_capturing_the_king(board_with: BoardFactory) -> None:
    board = board_with(("P", 2, 2, 6), ("k", 3, 3, 7))
    pawn = piece_on(board, 2, 2, 6)
    king = piece_on(board, 3, 3, 7)

    new_board, effects = complete_promotion(board, pawn, Square(3, 3, 7), Role.KNIGHT)

    assert effects.capture == king
    assert effects.win == Side.WHITE
    assert piece_on(new_board, 3, 3, 7).role == Role.KNIGHT
    assert new_board.pieces(Side.BLACK) == []
