"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
SideName = str
PieceLetters = str


@dataclass
class GameModel:
    """Transport-safe representation of a cubic chess game used between API, Service, DB, and Game layers."""

    position: str
    side_to_move: str
    history: list[str]
    moves: list[str]
    captured: dict[SideName, PieceLetters]
    status: str
    pending_promotion: Optional[str] = field(default=None)
    # revision of the stored record the model was read from (0: not stored yet)
    version: int = field(default=0)
