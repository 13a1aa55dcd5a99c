"""
Geometry/Base movement and capturing rules in the cube

Key idea: Use strategy pattern to define the move sets for each piece role.

There is no check detection: a move is legal as soon as the geometry allows it.
Capturing the King ends the game (see rules.py).
"""

from dataclasses import dataclass
from itertools import product
from typing import Callable, Optional, Protocol

from cubechess.chess.castling import CastleSide, castling_squares
from cubechess.chess.notation import format_move
from cubechess.chess.pieces import Piece
from cubechess.chess.square import Square
from cubechess.core.exceptions import IllegalMoveError
from cubechess.core.shared_types import Role, Side


class Board(Protocol):
    """Just the parts the movement strategies need"""

    size: int

    def occupant_at(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int, int]


@dataclass(frozen=True)
class Move:
    """A destination for a piece. `capture` is set when the destination holds an opposing piece."""

    from_square: Square
    to_square: Square
    capture: bool = False
    castle: Optional[CastleSide] = None

    def to_notation(self) -> str:
        return format_move(self.from_square, self.to_square)


# --- DIRECTIONS ---
# All 26 neighbours of a cell in the 3x3x3 block around it
UNIT_VECTORS: list[Vector] = [
    vector for vector in product((-1, 0, 1), repeat=3) if vector != (0, 0, 0)
]

# exactly one nonzero axis
ORTHOGONAL_VECTORS: list[Vector] = [
    vector for vector in UNIT_VECTORS if sum(map(abs, vector)) == 1
]

# more than one nonzero axis: both the face diagonals and the space diagonals of the cube
DIAGONAL_VECTORS: list[Vector] = [
    vector for vector in UNIT_VECTORS if sum(map(abs, vector)) > 1
]

# One axis moves by 2, another by 1, the last one stays put
KNIGHT_VECTORS: list[Vector] = [
    (2, 1, 0),
    (2, -1, 0),
    (-2, 1, 0),
    (-2, -1, 0),
    (1, 2, 0),
    (1, -2, 0),
    (-1, 2, 0),
    (-1, -2, 0),
    (2, 0, 1),
    (2, 0, -1),
    (-2, 0, 1),
    (-2, 0, -1),
    (1, 0, 2),
    (1, 0, -2),
    (-1, 0, 2),
    (-1, 0, -2),
    (0, 2, 1),
    (0, 2, -1),
    (0, -2, 1),
    (0, -2, -1),
    (0, 1, 2),
    (0, 1, -2),
    (0, -1, 2),
    (0, -1, -2),
]

# Pawns walk along the z-axis: White moves up the cube, Black moves down
PAWN_DIRECTION: dict[Side, int] = {Side.WHITE: 1, Side.BLACK: -1}
PAWN_START_LAYER: dict[Side, int] = {Side.WHITE: 1, Side.BLACK: 6}


def promotion_layer(side: Side, size: int) -> int:
    """The far layer a pawn promotes on"""
    return size - 1 if side == Side.WHITE else 0


# --- MOVEMENT RULES ---
def raycasting_move(
    piece: Piece,
    board: Board,
    directions: list[Vector],
    max_distance: Optional[int] = None,
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    Walk outward along every direction until we hit another piece or the edge of the board.
    * empty cell: add the move and keep walking
    * opponent's piece: add the capture and stop
    * own piece: stop without adding

    `max_distance` limits the number of steps along each ray (the King only takes one).
    """
    distance_limit = max_distance if max_distance is not None else board.size
    moves: list[Move] = []
    for dx, dy, dz in directions:
        target_square = piece.square
        for _ in range(distance_limit):
            target_square = target_square.shifted(dx, dy, dz)
            if not target_square.is_within_bounds(board.size):
                break

            occupant = board.occupant_at(target_square)
            if occupant is not None:
                # only the first occupied cell can be reached, and only if it is the opponent's
                if occupant.side != piece.side:
                    moves.append(Move(piece.square, target_square, capture=True))
                break

            moves.append(Move(piece.square, target_square))
    return moves


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for pieces that jump to a fixed offset"""
    moves: list[Move] = []
    for dx, dy, dz in deltas:
        target_square = piece.square.shifted(dx, dy, dz)
        if not target_square.is_within_bounds(board.size):
            continue

        occupant = board.occupant_at(target_square)
        if occupant is None:
            moves.append(Move(piece.square, target_square))
        elif occupant.side != piece.side:
            moves.append(Move(piece.square, target_square, capture=True))

    return moves


def candidate_pawn_moves(piece: Piece, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single cell forward along the z-axis.
    - can move by two from its starting layer, if both cells are empty
    - takes diagonally: one step forward combined with any sideways step in x and/or y

    NOTE: En passant does not exist in the cube
    """
    moves: list[Move] = []
    dz = PAWN_DIRECTION[piece.side]

    # Pawn pushes
    one_step = piece.square.shifted(0, 0, dz)
    if one_step.is_within_bounds(board.size) and board.occupant_at(one_step) is None:
        moves.append(Move(piece.square, one_step))

        if piece.square.z == PAWN_START_LAYER[piece.side]:
            two_steps = one_step.shifted(0, 0, dz)
            if (
                two_steps.is_within_bounds(board.size)
                and board.occupant_at(two_steps) is None
            ):
                moves.append(Move(piece.square, two_steps))

    # pawns take diagonally, never onto an empty cell
    pawn_takes: list[Vector] = [
        (dx, dy, dz) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
    ]
    for dx, dy, dz in pawn_takes:
        target_square = piece.square.shifted(dx, dy, dz)
        if not target_square.is_within_bounds(board.size):
            continue
        occupant = board.occupant_at(target_square)
        if occupant is not None and occupant.side != piece.side:
            moves.append(Move(piece.square, target_square, capture=True))
    return moves


def candidate_knight_moves(piece: Piece, board: Board) -> list[Move]:
    """Knights leap: the offsets hold a 2, a 1 and a 0 in some order (with any signs)"""
    return single_step_move(piece, board, KNIGHT_VECTORS)


def candidate_bishop_moves(piece: Piece, board: Board) -> list[Move]:
    """Bishops move along any direction that changes more than one axis at once"""
    return raycasting_move(piece, board, DIAGONAL_VECTORS)


def candidate_rook_moves(piece: Piece, board: Board) -> list[Move]:
    """Rooks move along a single axis"""
    return raycasting_move(piece, board, ORTHOGONAL_VECTORS)


def candidate_queen_moves(piece: Piece, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (along one axis) and bishop moves (diagonals)
    """
    return raycasting_move(piece, board, ORTHOGONAL_VECTORS + DIAGONAL_VECTORS)


def candidate_king_moves(piece: Piece, board: Board) -> list[Move]:
    """
    The king moves like the queen, but a single cell at the time.

    Castling is modelled as a special king move (appended last).
    """
    moves = raycasting_move(
        piece, board, ORTHOGONAL_VECTORS + DIAGONAL_VECTORS, max_distance=1
    )
    moves.extend(candidate_castling_moves(piece, board))
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], list[Move]]
MOVEMENT_RULES: dict[Role, CandidateMovesFn] = {
    Role.PAWN: candidate_pawn_moves,
    Role.KNIGHT: candidate_knight_moves,
    Role.BISHOP: candidate_bishop_moves,
    Role.ROOK: candidate_rook_moves,
    Role.QUEEN: candidate_queen_moves,
    Role.KING: candidate_king_moves,
}


def generate_moves(piece: Piece, board: Board) -> list[Move]:
    """
    All moves of the piece on the given board, in a fixed order (the order the directions are walked in).
    The piece must be the one standing on its own square of this board.
    """
    if board.occupant_at(piece.square) != piece:
        raise IllegalMoveError(
            f"No {piece.side} {piece.role} on {piece.square.to_notation()} of this board."
        )
    movement_rule = MOVEMENT_RULES[piece.role]
    return movement_rule(piece, board)


# -- CASTLING MOVES ---
def candidate_castling_moves(king: Piece, board: Board) -> list[Move]:
    """
    Castling is offered whenever a rook of the same side stands at the edge of the king's row,
    and the cells the king and rook land on are free.

    NOTE: Whether the king/rook moved before or whether any cell is attacked is not checked.
    """
    moves: list[Move] = []
    for side in CastleSide:
        squares = castling_squares(king.square, side, board.size)
        if not squares.king_to.is_within_bounds(board.size):
            continue

        rook = board.occupant_at(squares.rook_from)
        if rook is None or rook.role != Role.ROOK or rook.side != king.side:
            continue

        if board.occupant_at(squares.king_to) is not None:
            continue
        if board.occupant_at(squares.rook_to) is not None:
            continue

        moves.append(Move(king.square, squares.king_to, castle=side))
    return moves
