"""Unit tests for /cubechess/chess/board.py"""

from typing import Callable

import pytest

from cubechess.chess.board import (
    MAJOR_PIECE_PATTERN,
    Board,
    initialize_board,
    occupant_at,
)
from cubechess.chess.pieces import LETTER_TO_ROLE, Piece
from cubechess.chess.square import BOARD_SIZE, Square
from cubechess.core.exceptions import OutOfBoundsError
from cubechess.core.shared_types import Role, Side

EXPECTED_ROLE_COUNTS: dict[Role, int] = {
    Role.PAWN: 64,
    Role.ROOK: 12,
    Role.KNIGHT: 12,
    Role.BISHOP: 20,
    Role.QUEEN: 19,
    Role.KING: 1,
}


# -- CREATION LOGIC ---
@pytest.mark.parametrize("side", list(Side))
def test_starting_counts_per_role(side: Side) -> None:
    """Every side gets one full layer of pieces and one full layer of pawns"""
    board = initialize_board()
    assert board.count_roles(side) == EXPECTED_ROLE_COUNTS
    assert len(board.pieces(side)) == 2 * BOARD_SIZE * BOARD_SIZE


def test_starting_camps() -> None:
    """White occupies layers 0 and 1, Black layers 6 and 7. Layers in between are empty."""
    board = initialize_board()
    assert {piece.square.z for piece in board.pieces(Side.WHITE)} == {0, 1}
    assert {piece.square.z for piece in board.pieces(Side.BLACK)} == {6, 7}
    for z in range(2, 6):
        for y in range(BOARD_SIZE):
            for x in range(BOARD_SIZE):
                assert occupant_at(board, x, y, z) is None


@pytest.mark.parametrize("z, side", [(0, Side.WHITE), (7, Side.BLACK)])
def test_major_pieces_follow_pattern(z: int, side: Side) -> None:
    """The piece layers reproduce the pattern literally: row y, column x"""
    board = initialize_board()
    for y, row in enumerate(MAJOR_PIECE_PATTERN):
        for x, letter in enumerate(row):
            piece = occupant_at(board, x, y, z)
            assert piece is not None
            assert piece.role == LETTER_TO_ROLE[letter]
            assert piece.side == side
            assert piece.square == Square(x, y, z)
            assert not piece.has_moved


@pytest.mark.parametrize("z, side", [(1, Side.WHITE), (6, Side.BLACK)])
def test_pawn_layers(z: int, side: Side) -> None:
    board = initialize_board()
    for y in range(BOARD_SIZE):
        for x in range(BOARD_SIZE):
            assert occupant_at(board, x, y, z) == Piece(Role.PAWN, side, Square(x, y, z))


def test_kings_position() -> None:
    board = initialize_board()
    assert board.locate_pieces(Role.KING, Side.WHITE) == [Square(4, 3, 0)]
    assert board.locate_pieces(Role.KING, Side.BLACK) == [Square(4, 3, 7)]


def test_initialize_is_repeatable() -> None:
    """Two calls give equal, but independent boards"""
    first = initialize_board()
    second = initialize_board()
    assert first == second
    assert first is not second

    changed = first.remove_piece(Square(0, 1, 1))
    assert second.occupant_at(Square(0, 1, 1)) is not None
    assert changed != second


# -- OCCUPANCY ---
@pytest.mark.parametrize(
    "x, y, z",
    [(-1, 0, 0), (0, -1, 0), (0, 0, -1), (8, 0, 0), (0, 8, 0), (0, 0, 8)],
)
def test_occupant_out_of_bounds(x: int, y: int, z: int) -> None:
    """Out of bounds is reported, not read from some other cell"""
    board = initialize_board()
    with pytest.raises(OutOfBoundsError):
        occupant_at(board, x, y, z)


def test_occupant_of_empty_cell(board_with: Callable[..., Board]) -> None:
    board = board_with(("R", 3, 3, 3))
    assert board.occupant_at(Square(3, 3, 4)) is None
    assert board.is_empty(Square(3, 3, 4))
    assert not board.is_empty(Square(3, 3, 3))


# -- UPDATES ---
def test_with_changes_leaves_old_board_untouched(
    board_with: Callable[..., Board],
) -> None:
    """Copy on write: whoever holds the previous board never sees the change"""
    board = board_with(("R", 3, 3, 3))
    rook = board.occupant_at(Square(3, 3, 3))
    assert rook is not None
    new_board = board.with_changes(
        {Square(3, 3, 3): None, Square(3, 3, 5): rook.moved_to(Square(3, 3, 5))}
    )

    assert board.occupant_at(Square(3, 3, 3)) == rook
    assert board.occupant_at(Square(3, 3, 5)) is None
    assert new_board.occupant_at(Square(3, 3, 3)) is None
    moved = new_board.occupant_at(Square(3, 3, 5))
    assert moved is not None
    assert moved.has_moved


def test_piece_must_match_its_cell() -> None:
    """Invariant: a piece's stored coordinates match the cell it occupies"""
    board = Board.empty()
    piece = Piece(Role.KNIGHT, Side.WHITE, Square(1, 1, 1))
    with pytest.raises(ValueError):
        board.with_changes({Square(2, 2, 2): piece})


def test_cannot_write_outside_the_board() -> None:
    piece = Piece(Role.KNIGHT, Side.WHITE, Square(8, 1, 1))
    with pytest.raises(OutOfBoundsError):
        Board.empty().place_piece(piece)


def test_place_and_remove_piece() -> None:
    piece = Piece(Role.BISHOP, Side.BLACK, Square(2, 5, 4))
    board = Board.empty().place_piece(piece)
    assert board.pieces() == [piece]
    assert board.remove_piece(piece.square).pieces() == []


# -- QUERIES ---
def test_count_material_starting_position() -> None:
    """64 pawns, 12 knights, 20 bishops, 12 rooks, 19 queens; the King is worth nothing"""
    expected = 64 * 1 + 12 * 3 + 20 * 3 + 12 * 5 + 19 * 9
    assert initialize_board().count_material() == {
        Side.WHITE: expected,
        Side.BLACK: expected,
    }


def test_locate_pieces(board_with: Callable[..., Board]) -> None:
    board = board_with(("Q", 0, 0, 0), ("q", 1, 1, 1), ("Q", 7, 7, 7))
    assert board.locate_pieces(Role.QUEEN, Side.WHITE) == [
        Square(0, 0, 0),
        Square(7, 7, 7),
    ]
    assert board.locate_pieces(Role.QUEEN, Side.BLACK) == [Square(1, 1, 1)]
    assert board.locate_pieces(Role.KING, Side.BLACK) == []
