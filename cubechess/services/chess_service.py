"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from dataclasses import replace
from uuid import UUID

from cubechess.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    EffectsResponse,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PromotionRequest,
)
from cubechess.chess.game import Game
from cubechess.chess.rules import Effects
from cubechess.chess.square import Square
from cubechess.core.exceptions import RepositoryError
from cubechess.core.models import GameModel
from cubechess.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for a cubic chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player requested to create a new game."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(starting_position=request.starting_position)
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        logger.info("Created game %s", game_id)

        # Return a GameResponse
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the destinations of the piece standing on the requested square."""

        # Retrieve persisted GameModel from repository
        stored_model = self._fetch_game(request.game_id)

        # Create a new Game instance from the retrieved GameModel
        game = Game.from_model(stored_model)

        # Compute legal moves
        square = Square.from_notation(request.square)
        moves = game.legal_moves(square)
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            side_to_move=game.side_to_move,
            destinations=[move.to_square.to_notation() for move in moves],
            captures=[move.to_square.to_notation() for move in moves if move.capture],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt."""

        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)

        # Attempt the move
        effects = game.make_move(
            Square.from_notation(request.from_square),
            Square.from_notation(request.to_square),
        )
        # Capture updated state in GameModel and store in repository
        after_move = self._store_game(request.game_id, game, stored_model)
        logger.info(
            "Game %s: %s%s", request.game_id, request.from_square, request.to_square
        )

        return MoveResponse(
            game=self._create_game_response(request.game_id, after_move),
            effects=self._create_effects_response(effects),
        )

    def promote(self, request: PromotionRequest) -> MoveResponse:
        """Complete a pending promotion with the requested role."""

        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)

        effects = game.promote(request.role)
        after_promotion = self._store_game(request.game_id, game, stored_model)
        logger.info("Game %s: pawn promoted to %s", request.game_id, request.role)

        return MoveResponse(
            game=self._create_game_response(request.game_id, after_promotion),
            effects=self._create_effects_response(effects),
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = Game.from_model(model)
        return GameResponse(
            game_id=game_id,
            position=model.position,
            side_to_move=model.side_to_move,
            status=model.status,
            winner=game.winner,
            captured=model.captured,
            material={
                side.value: points
                for side, points in game.board.count_material().items()
            },
            move_history=model.moves,
            pending_promotion=model.pending_promotion,
        )

    def _create_effects_response(self, effects: Effects) -> EffectsResponse:
        capture = effects.capture.to_letter() if effects.capture else None
        pending = (
            effects.promotion_pending.move.to_square.to_notation()
            if effects.promotion_pending
            else None
        )
        return EffectsResponse(
            capture=capture, win=effects.win, promotion_pending=pending
        )

    def _store_game(self, game_id: UUID, game: Game, read_model: GameModel) -> GameModel:
        """
        Write the game back, based on the version it was read at.
        A concurrent move on the same game in between makes the repository raise ConcurrentUpdateError.
        """
        updated = replace(game.to_model(), version=read_model.version)
        stored = self.repo.update_game(game_id, updated)
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} was deleted while handling the request.")
        return stored

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
