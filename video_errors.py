"""Exceptions raised by the PGN to video pipeline."""

from pathlib import Path
from typing import Optional


class ChessVideoError(Exception):
    """Base class for every fatal pipeline error."""


class MissingInputError(ChessVideoError):
    """Raised when the PGN file does not exist."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"No PGN file found at {self.path}")


class PGNParseError(ChessVideoError):
    """Raised when the PGN text cannot be turned into positions."""

    def __init__(self, message: str):
        self.reason = message
        super().__init__(f"Invalid PGN! {message}")


class RenderError(ChessVideoError):
    """Raised when a single position fails to render."""

    def __init__(self, index: int, fen: str, cause: Optional[BaseException] = None):
        self.index = index
        self.fen = fen
        self.cause = cause
        message = f"Failed to render frame {index} ({fen})"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DegenerateInputError(ChessVideoError):
    """Raised when the game has no moves, so there is nothing to encode."""

    def __init__(self, message: str = "Game has no moves, nothing to encode"):
        super().__init__(message)


class EncodeError(ChessVideoError):
    """Raised when the video encoder reports an error."""


class FrameStorageError(ChessVideoError):
    """Raised when the frames directory cannot be used."""
