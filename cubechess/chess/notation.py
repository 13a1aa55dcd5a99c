"""
Text notation for boards and moves. The part of a game that gets persisted.

Board notation
----
Modelled after the position part of a FEN string, extended with a third axis.

<layer 0>|<layer 1>|...|<layer 7>

* Each layer lists its rows y = 0 ... 7, separated by "/".
* Each row is read from x = 0 to x = 7. A letter denotes a piece (upper case: White, lower case: Black),
  a number denotes that many consecutive empty cells.
* A piece letter followed by a "'" is a piece that has moved before (needed to keep castling information).

ex) an empty layer is written as 8/8/8/8/8/8/8/8

Move notation
----
<from square><to square>[promotion letter], e.g. "Bb2Db2" or "Gc2Hc2q".
"""

import re
from string import digits
from dataclasses import replace
from typing import Optional, Sequence

from cubechess.chess.pieces import LETTER_TO_ROLE, ROLE_TO_LETTER, Piece
from cubechess.chess.square import BOARD_SIZE, Square
from cubechess.core.exceptions import InvalidNotationError
from cubechess.core.shared_types import Role

LAYER_SEPARATOR = "|"
ROW_SEPARATOR = "/"
MOVED_MARK = "'"

MOVE_PATTERN = re.compile(r"^([A-Z][a-z]\d+)([A-Z][a-z]\d+)([pnbrqk])?$")


# --- BOARD NOTATION ---
def is_valid_position(position: str, size: int = BOARD_SIZE) -> bool:
    """Check the structure of a board notation: right number of layers, rows, and cells per row."""
    layers = position.split(LAYER_SEPARATOR)
    if len(layers) != size:
        return False

    for layer in layers:
        rows = layer.split(ROW_SEPARATOR)
        if len(rows) != size:
            return False
        if not all(is_valid_row(row, size) for row in rows):
            return False
    return True


def is_valid_row(row: str, size: int = BOARD_SIZE) -> bool:
    cell_count = 0
    previous = ""
    for character in row:
        if character in digits:
            cell_count += int(character)
        elif character.lower() in LETTER_TO_ROLE:
            cell_count += 1
        elif character == MOVED_MARK:
            # a moved mark must directly follow a piece letter
            if previous.lower() not in LETTER_TO_ROLE:
                return False
        else:
            return False
        previous = character
    return cell_count == size


def decode_row(row: str, y: int, z: int) -> list[Piece]:
    """Pieces found in a single row. Assumes the row was validated before."""
    pieces: list[Piece] = []
    x = 0
    for character in row:
        if character in digits:
            x += int(character)
        elif character == MOVED_MARK:
            # the mark belongs to the piece that was just created
            pieces[-1] = replace(pieces[-1], has_moved=True)
        else:
            pieces.append(Piece.from_letter(character, Square(x, y, z)))
            x += 1
    return pieces


def encode_row(cells: Sequence[Optional[Piece]]) -> str:
    characters: list[str] = []
    empty_count = 0
    for piece in cells:
        if piece is None:
            empty_count += 1
            continue
        if empty_count > 0:
            characters.append(str(empty_count))
            empty_count = 0
        characters.append(piece.to_letter())
        if piece.has_moved:
            characters.append(MOVED_MARK)

    # an entirely empty row still gets its number
    if empty_count > 0:
        characters.append(str(empty_count))
    return "".join(characters)


def decode_position(position: str, size: int = BOARD_SIZE) -> list[Piece]:
    """All pieces described by a board notation."""
    if not is_valid_position(position, size):
        raise InvalidNotationError(
            f"Cannot interpret supplied string as a board: {position}"
        )

    pieces: list[Piece] = []
    for z, layer in enumerate(position.split(LAYER_SEPARATOR)):
        for y, row in enumerate(layer.split(ROW_SEPARATOR)):
            pieces.extend(decode_row(row, y, z))
    return pieces


# --- MOVE NOTATION ---
def parse_move(move: str) -> tuple[Square, Square, Optional[Role]]:
    """Split a move into origin, target and (optionally) the role a pawn promotes into."""
    match = MOVE_PATTERN.match(move)
    if match is None:
        raise InvalidNotationError(f"Cannot interpret {move!r} as a move.")
    from_square = Square.from_notation(match.group(1))
    to_square = Square.from_notation(match.group(2))
    promotion = LETTER_TO_ROLE[match.group(3)] if match.group(3) else None
    return from_square, to_square, promotion


def format_move(
    from_square: Square, to_square: Square, promote_to: Optional[Role] = None
) -> str:
    promotion = ROLE_TO_LETTER[promote_to] if promote_to else ""
    return f"{from_square.to_notation()}{to_square.to_notation()}{promotion}"
