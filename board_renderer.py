"""
Board Renderers
===============
Render a single chess position (FEN) to a PNG file.

Two implementations share the same interface, render(fen, output_path):
- ChessBoardRenderer: python-chess SVG output rasterised with cairosvg
- PixelBoardRenderer: pure Pillow drawing with Unicode pieces (no Cairo)
"""

import os
import logging
import platform
from pathlib import Path
from typing import Dict, Tuple, Union

import chess
import chess.svg
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger("ChessVideo.renderer")

# =============================================================================
# CONSTANTS
# =============================================================================

BOARD_SIZE = 400  # Square board size in pixels

COLORS = {
    "board_light": (240, 217, 181),    # Light squares #f0d9b5
    "board_dark": (181, 136, 99),      # Dark squares #b58863
    "highlight_check": (255, 100, 100),
    "border": (50, 50, 50),
}

# =============================================================================
# FONT MANAGEMENT
# =============================================================================

class FontManager:
    """Loads fonts for the Pillow renderer with per-size caching."""

    FONT_PATHS = {
        "darwin": [
            "/System/Library/Fonts/Apple Symbols.ttf",
            "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
            "/System/Library/Fonts/Helvetica.ttc",
        ],
        "linux": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/TTF/DejaVuSans.ttf",
        ],
        "windows": [
            "C:/Windows/Fonts/seguisym.ttf",
            "C:/Windows/Fonts/arial.ttf",
        ],
    }

    _cache: Dict[int, ImageFont.ImageFont] = {}

    @classmethod
    def get_font(cls, size: int):
        """Get a font at the specified size with caching."""
        if size not in cls._cache:
            cls._cache[size] = cls._load_system_font(size)
        return cls._cache[size]

    @classmethod
    def _load_system_font(cls, size: int):
        system = platform.system().lower()
        for path in cls.FONT_PATHS.get(system, cls.FONT_PATHS["windows"]):
            if os.path.exists(path):
                try:
                    return ImageFont.truetype(path, size)
                except OSError:
                    continue

        logger.warning("Chess symbol font not found, using default")
        return ImageFont.load_default(size=size)

# =============================================================================
# SVG RENDERER
# =============================================================================

class ChessBoardRenderer:
    """
    Renders chess positions as PNG files using python-chess SVG output.
    """

    def __init__(self, board_size: int = BOARD_SIZE, flipped: bool = False):
        self.board_size = board_size
        self.flipped = flipped

    def render(self, fen: str, output_path: Union[str, Path]) -> Path:
        """
        Render a position to a PNG file.

        Args:
            fen: Position to draw
            output_path: Where to write the PNG

        Returns:
            The path that was written
        """
        # Imported here so the Pillow renderer works without libcairo
        import cairosvg

        board = chess.Board(fen)

        fill_squares = {}
        if board.is_check():
            king_square = board.king(board.turn)
            if king_square is not None:
                fill_squares[king_square] = "#ff0000"

        svg_data = chess.svg.board(
            board,
            flipped=self.flipped,
            fill=fill_squares,
            size=self.board_size,
            colors={
                "square light": "#f0d9b5",
                "square dark": "#b58863",
            }
        )

        output_path = Path(output_path)
        cairosvg.svg2png(
            bytestring=svg_data.encode('utf-8'),
            write_to=str(output_path),
            output_width=self.board_size,
            output_height=self.board_size
        )
        return output_path

# =============================================================================
# PURE PIL RENDERER
# =============================================================================

class PixelBoardRenderer:
    """
    Renders chess positions using pure PIL (no Cairo/SVG).
    Uses Unicode chess symbols for pieces.
    """

    def __init__(self, board_size: int = BOARD_SIZE, flipped: bool = False):
        self.board_size = board_size
        self.square_size = board_size // 8
        self.flipped = flipped
        self.piece_font = FontManager.get_font(int(self.square_size * 0.75))

    def render(self, fen: str, output_path: Union[str, Path]) -> Path:
        """Render a position to a PNG file and return its path."""
        board = chess.Board(fen)
        image = self.draw_board(board)

        output_path = Path(output_path)
        image.save(output_path, format="PNG")
        return output_path

    def draw_board(self, board: chess.Board) -> Image.Image:
        img = Image.new('RGB', (self.board_size, self.board_size), COLORS["board_dark"])
        draw = ImageDraw.Draw(img)

        king_in_check = board.king(board.turn) if board.is_check() else None

        for rank in range(8):
            for file in range(8):
                x, y = self._square_origin(file, rank)

                is_light = (rank + file) % 2 == 1
                color = COLORS["board_light"] if is_light else COLORS["board_dark"]

                square = chess.square(file, rank)
                if square == king_in_check:
                    color = COLORS["highlight_check"]

                draw.rectangle(
                    [x, y, x + self.square_size, y + self.square_size],
                    fill=color
                )

                piece = board.piece_at(square)
                if piece:
                    self._draw_piece(draw, piece, x, y)

        draw.rectangle(
            [0, 0, self.board_size - 1, self.board_size - 1],
            outline=COLORS["border"],
            width=2
        )
        return img

    def _square_origin(self, file: int, rank: int) -> Tuple[int, int]:
        if self.flipped:
            return (7 - file) * self.square_size, rank * self.square_size
        return file * self.square_size, (7 - rank) * self.square_size

    def _draw_piece(self, draw: ImageDraw.ImageDraw, piece: chess.Piece, x: int, y: int):
        """Draw a chess piece centered on the square at (x, y)."""
        # Bitmap fallback fonts only cover Latin-1
        if isinstance(self.piece_font, ImageFont.FreeTypeFont):
            symbol = piece.unicode_symbol()
        else:
            symbol = piece.symbol()

        bbox = draw.textbbox((0, 0), symbol, font=self.piece_font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]

        text_x = x + (self.square_size - text_width) // 2 - bbox[0]
        text_y = y + (self.square_size - text_height) // 2 - bbox[1]

        # Outline for visibility on both square colors
        outline_color = (50, 50, 50) if piece.color == chess.WHITE else (220, 220, 220)
        for dx, dy in [(-1, -1), (-1, 1), (1, -1), (1, 1), (-1, 0), (1, 0), (0, -1), (0, 1)]:
            draw.text((text_x + dx, text_y + dy), symbol, font=self.piece_font, fill=outline_color)

        piece_color = (255, 255, 255) if piece.color == chess.WHITE else (30, 30, 30)
        draw.text((text_x, text_y), symbol, font=self.piece_font, fill=piece_color)

# =============================================================================
# FACTORY
# =============================================================================

RENDERERS = {
    "svg": ChessBoardRenderer,
    "pil": PixelBoardRenderer,
}


def create_renderer(name: str, board_size: int = BOARD_SIZE, flipped: bool = False):
    """Build a renderer by name ("svg" or "pil")."""
    try:
        renderer_cls = RENDERERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown renderer '{name}' (choose from: {', '.join(sorted(RENDERERS))})"
        ) from None
    return renderer_cls(board_size=board_size, flipped=flipped)
