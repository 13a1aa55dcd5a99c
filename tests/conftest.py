"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from cubechess.chess.board import Board
from cubechess.chess.pieces import Piece
from cubechess.chess.square import Square
from cubechess.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

PieceSpec = tuple[str, int, int, int]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def board_with() -> Callable[..., Board]:
    """
    Call the inner function with (letter, x, y, z) tuples to get a board holding exactly those pieces.
    Upper case letters are White pieces, lower case letters Black pieces.
    """

    def _create_board(*specs: PieceSpec) -> Board:
        pieces = [
            Piece.from_letter(letter, Square(x, y, z)) for letter, x, y, z in specs
        ]
        return Board.from_pieces(pieces)

    return _create_board
