"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from cubechess.chess.notation import is_valid_position
from cubechess.chess.square import Square
from cubechess.core.exceptions import InvalidNotationError, InvalidRequestError
from cubechess.core.shared_types import Role, Side, Status

SideName = str
PieceLetters = str


def _validate_square(value: str) -> str:
    """Square must be written as <layer><file><rank> and lie within the cube"""
    try:
        square = Square.from_notation(value)
    except InvalidNotationError:
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    if not square.is_within_bounds():
        raise InvalidRequestError(f"Square {value!r} lies outside of the board.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_position: Optional[str] = None

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        if not is_valid_position(value.strip()):
            raise InvalidRequestError(
                "Board notation must contain 8 layers of 8 rows with 8 cells each."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class PromotionRequest(BaseModel):
    game_id: UUID
    role: Role


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    position: str
    side_to_move: Side
    status: Status
    winner: Optional[Side]
    captured: dict[SideName, PieceLetters]
    material: dict[SideName, int]
    move_history: list[str]
    pending_promotion: Optional[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    side_to_move: Side
    destinations: list[str]
    captures: list[str]


class EffectsResponse(BaseModel):
    capture: Optional[PieceLetters] = None
    win: Optional[Side] = None
    promotion_pending: Optional[str] = None


class MoveResponse(BaseModel):
    game: GameResponse
    effects: EffectsResponse


# --- HTTP BODY MODELS ---
# Plain shapes of the request bodies. Validation happens when they are turned into the request models above,
# so that validation errors reach the error handling of the routes.
class CreateGameBody(BaseModel):
    starting_position: Optional[str] = None


class MoveBody(BaseModel):
    from_square: str
    to_square: str


class PromotionBody(BaseModel):
    role: Role
