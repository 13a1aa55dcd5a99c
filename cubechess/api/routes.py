"""HTTP routes. The only place where domain errors get translated into HTTP status codes."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cubechess.api.models import (
    CreateGameBody,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveBody,
    MoveRequest,
    MoveResponse,
    PromotionBody,
    PromotionRequest,
)
from cubechess.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    InvalidNotationError,
    InvalidPromotionError,
    InvalidRequestError,
    OutOfBoundsError,
    RepositoryError,
)
from cubechess.db.database import get_db
from cubechess.db.sql_repository import SQLGameRepository
from cubechess.services.chess_service import ChessService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])

# most specific first: GameOverError is a GameStateError
ERROR_STATUS_CODES: list[tuple[type[GameError], int]] = [
    (RepositoryError, 404),
    (InvalidRequestError, 422),
    (InvalidNotationError, 422),
    (OutOfBoundsError, 422),
    (IllegalMoveError, 400),
    (InvalidPromotionError, 400),
    (GameStateError, 409),
]


def get_service(db: Annotated[Session, Depends(get_db)]) -> ChessService:
    return ChessService(SQLGameRepository(db))


ServiceDep = Annotated[ChessService, Depends(get_service)]


def to_http_error(error: GameError) -> HTTPException:
    status_code = next(
        (code for kind, code in ERROR_STATUS_CODES if isinstance(error, kind)),
        400,
    )
    logger.warning("Request rejected (%s): %s", status_code, error)
    return HTTPException(status_code=status_code, detail=str(error))


@router.post("", response_model=GameResponse, status_code=201)
def create_game(body: CreateGameBody, service: ServiceDep) -> GameResponse:
    try:
        request = CreateGameRequest(starting_position=body.starting_position)
        return service.create_new_game(request)
    except GameError as e:
        raise to_http_error(e) from e


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: UUID, service: ServiceDep) -> GameResponse:
    try:
        return service.get_game_state(GetGameRequest(game_id=game_id))
    except GameError as e:
        raise to_http_error(e) from e


@router.get("/{game_id}/moves", response_model=LegalMovesResponse)
def get_legal_moves(
    game_id: UUID, square: Annotated[str, Query()], service: ServiceDep
) -> LegalMovesResponse:
    try:
        request = LegalMovesRequest(game_id=game_id, square=square)
        return service.legal_moves(request)
    except GameError as e:
        raise to_http_error(e) from e


@router.post("/{game_id}/moves", response_model=MoveResponse)
def make_move(game_id: UUID, body: MoveBody, service: ServiceDep) -> MoveResponse:
    try:
        request = MoveRequest(
            game_id=game_id, from_square=body.from_square, to_square=body.to_square
        )
        return service.make_move(request)
    except GameError as e:
        raise to_http_error(e) from e


@router.post("/{game_id}/promotion", response_model=MoveResponse)
def promote(game_id: UUID, body: PromotionBody, service: ServiceDep) -> MoveResponse:
    try:
        return service.promote(PromotionRequest(game_id=game_id, role=body.role))
    except GameError as e:
        raise to_http_error(e) from e


@router.delete("/{game_id}", status_code=204)
def delete_game(game_id: UUID, service: ServiceDep) -> None:
    try:
        service.delete_game(DeleteGameRequest(game_id=game_id))
    except GameError as e:
        raise to_http_error(e) from e
