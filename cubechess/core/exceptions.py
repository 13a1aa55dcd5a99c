"""
Exceptions raised by the domain layer.

All of them are local, recoverable validation failures: the service layer lets them propagate,
and only the API layer translates them into HTTP responses.
"""


class GameError(Exception):
    """Base class for anything that went wrong while handling a game request."""


class OutOfBoundsError(GameError):
    """A coordinate triple outside of the cube was addressed."""


class IllegalMoveError(GameError):
    """The requested move is not one of the moves generated for the piece."""


class InvalidPromotionError(GameError):
    """A pawn can only promote into a rook, knight, bishop or queen."""


class GameStateError(GameError):
    """The game is not in a state that accepts the requested action."""


class GameOverError(GameStateError):
    """A King has been captured. The game accepts no further moves."""


class ConcurrentUpdateError(GameStateError):
    """The game was changed by another request after it was read. Reload and try again."""


class InvalidNotationError(GameError):
    """Text that should describe a square, move or board could not be parsed."""


class InvalidRequestError(GameError):
    """Request data failed validation at the API boundary."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested game."""
