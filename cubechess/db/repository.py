"""Protocol repository (implemented with SQLAlchemy in sql_repository.py, mocked by a dictionary in the tests)"""

from typing import Protocol
from uuid import UUID

from cubechess.core.models import GameModel


class GameRepository(Protocol):
    """
    Storage of cube chess sessions
    ----

    Stored records carry a `version`. Every successful update bumps it, and an update is only accepted
    when the model passed in was read at the current version (optimistic concurrency).
    """

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored session (board notation, turn, tallies, pending promotion), if the id is known."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a freshly created session. Returns the stored record (at its first version) and its new id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Overwrite the session after a move or promotion. None for an unknown id.
        Raises ConcurrentUpdateError when the record changed since `game` was read.
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove the session. Returns what was stored, None for an unknown id."""
        ...
