"""
The Game class will be the entrypoint into the domain layer for the service layer.
It holds the session state (turn, selection, captured pieces, status) and feeds the moves a player picks
through the (stateless) rules engine -->
passes the outcome to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from cubechess.chess.board import Board
from cubechess.chess.moves import Move, generate_moves
from cubechess.chess.notation import format_move, parse_move
from cubechess.chess.pieces import LETTER_TO_ROLE, ROLE_TO_LETTER, Piece
from cubechess.chess.rules import (
    Effects,
    PromotionPending,
    apply_move,
    complete_promotion,
)
from cubechess.chess.square import Square
from cubechess.core.exceptions import (
    GameOverError,
    GameStateError,
    IllegalMoveError,
    InvalidNotationError,
)
from cubechess.core.models import GameModel
from cubechess.core.shared_types import WINNING_STATUS, Role, Side, Status

logger = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    side_to_move: Side
    status: Status
    history: list[str]  # board notation before every completed move
    moves: list[str]  # move notation of every completed move
    captured: dict[Side, list[Role]]  # keyed by the side that lost the pieces
    pending_promotion: Optional[PromotionPending] = None
    selected: Optional[Piece] = None
    valid_moves: list[Move] = field(default_factory=list)

    @classmethod
    def new_game(cls, starting_position: Optional[str] = None) -> Self:
        """White to move, either in the standard starting position or in the given one."""
        board = (
            Board.from_notation(starting_position)
            if starting_position
            else Board.initialize()
        )
        return cls(
            board=board,
            side_to_move=Side.WHITE,
            status=Status.ACTIVE,
            history=[],
            moves=[],
            captured={Side.WHITE: [], Side.BLACK: []},
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in Status.__members__.values():
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(Status)}"
            )
        if model.side_to_move not in Side.__members__.values():
            raise GameStateError(f"Invalid side to move: {model.side_to_move!r}")

        board = Board.from_notation(model.position)
        captured = {
            side: [
                LETTER_TO_ROLE[letter.lower()]
                for letter in model.captured.get(side.value, "")
            ]
            for side in Side
        }
        game = cls(
            board=board,
            side_to_move=Side(model.side_to_move),
            status=Status(model.status),
            history=list(model.history),
            moves=list(model.moves),
            captured=captured,
        )
        if model.pending_promotion:
            game.pending_promotion = game._restore_pending_promotion(
                model.pending_promotion
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        pending = (
            self.pending_promotion.move.to_notation()
            if self.pending_promotion
            else None
        )
        return GameModel(
            position=self.board.to_notation(),
            side_to_move=self.side_to_move.value,
            history=list(self.history),
            moves=list(self.moves),
            captured={
                side.value: "".join(ROLE_TO_LETTER[role] for role in roles)
                for side, roles in self.captured.items()
            },
            status=self.status.value,
            pending_promotion=pending,
        )

    @property
    def winner(self) -> Optional[Side]:
        return next(
            (side for side, status in WINNING_STATUS.items() if status == self.status),
            None,
        )

    @property
    def is_over(self) -> bool:
        return self.status != Status.ACTIVE

    # --- SELECTION (what a click on a cell does) ---
    def select(self, square: Square) -> None:
        """
        Select the piece on the square, if it belongs to the side to move.
        Anything else is ignored (no error, the selection stays as it was).
        """
        self._assert_accepting_moves()
        piece = self.board.occupant_at(square)
        if piece is None or piece.side != self.side_to_move:
            return
        self.selected = piece
        self.valid_moves = generate_moves(piece, self.board)

    def clear_selection(self) -> None:
        self.selected = None
        self.valid_moves = []

    def click(self, square: Square) -> Optional[Effects]:
        """
        Interpret a click on a cell
        ----

        1. A piece is selected and the cell is one of its destinations: make that move.
        2. The cell holds one of your own pieces: select that one instead.
        3. Otherwise: drop the selection.

        Returns the effects if a move was made.
        """
        self._assert_accepting_moves()
        if self.selected is not None and any(
            move.to_square == square for move in self.valid_moves
        ):
            return self.make_move(self.selected.square, square)

        piece = self.board.occupant_at(square)
        if piece is not None and piece.side == self.side_to_move:
            self.select(square)
        else:
            self.clear_selection()
        return None

    def legal_moves(self, square: Square) -> list[Move]:
        """Moves of the piece on the given square. Empty when it is not the turn of that piece."""
        self._assert_accepting_moves()
        piece = self.board.occupant_at(square)
        if piece is None or piece.side != self.side_to_move:
            return []
        return generate_moves(piece, self.board)

    # --- MAKING MOVES ---
    def make_move(self, from_square: Square, to_square: Square) -> Effects:
        """
        Attempt to make a move
        -----

        1. make sure the game accepts moves and the piece belongs to the side to move
        2. find the move among the generated moves
        3. apply it
        4. pawn on the far layer? --> wait for `promote()`. Otherwise record the move and hand over the turn.
        """
        self._assert_accepting_moves()

        piece = self.board.occupant_at(from_square)
        if piece is None or piece.side != self.side_to_move:
            raise IllegalMoveError(
                f"{self.side_to_move} has no piece on {from_square.to_notation()}."
            )

        move = self._find_move(piece, to_square)
        new_board, effects = apply_move(self.board, piece, move)

        if effects.promotion_pending is not None:
            logger.debug("Promotion pending for %s", move.to_notation())
            self.pending_promotion = effects.promotion_pending
            self.clear_selection()
            return effects

        self._complete_turn(new_board, move.to_notation(), effects)
        return effects

    def promote(self, role: Role) -> Effects:
        """Finish the pending pawn move by choosing the role the pawn promotes into."""
        if self.is_over:
            raise GameOverError(f"Game is over. status: {self.status}")
        if self.pending_promotion is None:
            raise GameStateError("There is no pawn waiting to be promoted.")

        pending = self.pending_promotion
        new_board, effects = complete_promotion(
            self.board, pending.piece, pending.move.to_square, role
        )
        self.pending_promotion = None
        notation = format_move(
            pending.move.from_square, pending.move.to_square, promote_to=role
        )
        self._complete_turn(new_board, notation, effects)
        return effects

    # -- PRIVATE HELPERS ---
    def _assert_accepting_moves(self) -> None:
        if self.is_over:
            raise GameOverError(f"Game is over. status: {self.status}")
        if self.pending_promotion is not None:
            raise GameStateError(
                f"Choose a promotion for the pawn on {self.pending_promotion.piece.square.to_notation()} first."
            )

    def _find_move(self, piece: Piece, to_square: Square) -> Move:
        candidates = generate_moves(piece, self.board)
        move = next((m for m in candidates if m.to_square == to_square), None)
        if move is None:
            raise IllegalMoveError(
                f"Move not allowed: {format_move(piece.square, to_square)}"
            )
        return move

    def _complete_turn(self, new_board: Board, notation: str, effects: Effects) -> None:
        """Record the move, the captured piece and the result, then hand over the turn."""
        self.history.append(self.board.to_notation())
        self.board = new_board
        self.moves.append(notation)

        if effects.capture is not None:
            self.captured[effects.capture.side].append(effects.capture.role)

        if effects.win is not None:
            self.status = WINNING_STATUS[effects.win]
            logger.info("%s captured the King: %s", effects.win, self.status)

        self.side_to_move = self.side_to_move.opponent
        self.clear_selection()

    def _restore_pending_promotion(self, move_notation: str) -> PromotionPending:
        """Rebuild the pending promotion from the stored move notation"""
        from_square, to_square, _ = parse_move(move_notation)
        piece = self.board.occupant_at(from_square)
        if piece is None or piece.role != Role.PAWN:
            raise InvalidNotationError(
                f"Pending promotion {move_notation!r} does not start from a pawn."
            )
        move = self._find_move(piece, to_square)
        return PromotionPending(piece, move)
