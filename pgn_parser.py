"""
PGN Parser
==========
Turns a PGN game record into the ordered list of positions (FEN strings)
that the frame producer renders, one per half-move.

Uses python-chess for all parsing and move validation.
"""

import io
import re
import logging
from pathlib import Path
from typing import Dict, List, Union
from dataclasses import dataclass, field

import chess
import chess.pgn

from video_errors import MissingInputError, PGNParseError

logger = logging.getLogger("ChessVideo.parser")

# Prefixes python-chess (and wrapped exceptions) put in front of the useful part
_ERROR_PREFIX = re.compile(r"^\s*(?:error:\s*)?(?:invalid fen:\s*)?", re.IGNORECASE)
# python-chess appends " in <fen>" to move errors
_ERROR_FEN_SUFFIX = re.compile(r"\s+in\s+\S+(?:\s+\S+){5}\s*$")

# Unknown-value placeholders python-chess fills in for Seven Tag Roster tags
HEADER_PLACEHOLDERS = ("", "?", "????.??.??")

# Errors are collected from game.errors and reported once, by us
logging.getLogger("chess.pgn").setLevel(logging.CRITICAL)

HEADER_TAGS = ("Event", "Date", "White", "Black", "Result")

# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class ParsedGame:
    """Positions and tag pairs extracted from one PGN game."""
    headers: Dict[str, str] = field(default_factory=dict)
    positions: List[str] = field(default_factory=list)

    @property
    def half_moves(self) -> int:
        return len(self.positions)

    def title(self) -> str:
        white = self.headers.get("White", "?")
        black = self.headers.get("Black", "?")
        return f"{white} vs {black}"

# =============================================================================
# PGN PARSER
# =============================================================================

def clean_error_message(error: Union[BaseException, str]) -> str:
    """Strip internal framing text from a parser error for display."""
    message = str(error).strip()
    cleaned = _ERROR_PREFIX.sub("", message, count=1)
    cleaned = _ERROR_FEN_SUFFIX.sub("", cleaned)
    return cleaned or message


class PGNParser:
    """Parses PGN text into an ordered sequence of FEN positions."""

    def parse_file(self, pgn_path: Union[str, Path]) -> ParsedGame:
        """
        Read and parse a PGN file.

        Args:
            pgn_path: Path to the PGN file

        Returns:
            ParsedGame with headers and one FEN per half-move

        Raises:
            MissingInputError: the file does not exist
            PGNParseError: the file does not hold a valid game
        """
        path = Path(pgn_path)
        if not path.is_file():
            raise MissingInputError(path)

        logger.debug(f"Reading PGN: {path}")
        try:
            pgn_text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise PGNParseError(f"{path.name} is not UTF-8 text ({e.reason} at byte {e.start})") from e

        return self.parse(pgn_text)

    def parse(self, pgn_text: str) -> ParsedGame:
        """
        Parse PGN text.

        Only the mainline is converted; variations are ignored. A custom
        starting position given by a FEN tag is honoured.
        """
        try:
            game = chess.pgn.read_game(io.StringIO(pgn_text))

            if game is None:
                raise PGNParseError("No game found in PGN")

            if game.errors:
                # The first error is the one that stopped move parsing
                raise PGNParseError(clean_error_message(game.errors[0]))

            board = game.board()
            positions = []
            for move in game.mainline_moves():
                board.push(move)
                positions.append(board.fen())
        except ValueError as e:
            raise PGNParseError(clean_error_message(e)) from e

        headers = {}
        for tag in HEADER_TAGS:
            value = game.headers.get(tag, "?").strip()
            headers[tag] = "?" if value in HEADER_PLACEHOLDERS else value

        logger.debug(f"Parsed {len(positions)} half-moves")
        return ParsedGame(headers=headers, positions=positions)
