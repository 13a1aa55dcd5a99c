"""Implementation of (Game)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cubechess.core.exceptions import ConcurrentUpdateError
from cubechess.core.models import GameModel
from cubechess.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            position=game.position,
            side_to_move=game.side_to_move,
            history=game.history,
            moves=game.moves,
            captured=game.captured,
            status=game.status,
            pending_promotion=game.pending_promotion,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        if game_db.version != game.version:
            raise ConcurrentUpdateError(
                f"Game {game_id} changed since it was read (version {game.version}, stored {game_db.version})."
            )
        game_db.position = game.position
        game_db.side_to_move = game.side_to_move
        # JSON columns only register a change on reassignment, hence the copies
        game_db.history = list(game.history)
        game_db.moves = list(game.moves)
        game_db.captured = dict(game.captured)
        game_db.status = game.status
        game_db.pending_promotion = game.pending_promotion
        try:
            self.db.commit()
        except StaleDataError as e:
            # another session committed between our read and this write
            self.db.rollback()
            raise ConcurrentUpdateError(f"Game {game_id} was changed concurrently.") from e
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        # reload even if the session holds the record already: the version must be the stored one
        query = (
            select(DBGame)
            .where(DBGame.id == game_id)
            .execution_options(populate_existing=True)
        )
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            position=game_db.position,
            side_to_move=game_db.side_to_move,
            history=list(game_db.history),
            moves=list(game_db.moves),
            captured=dict(game_db.captured),
            status=game_db.status,
            pending_promotion=game_db.pending_promotion,
            version=game_db.version,
        )
