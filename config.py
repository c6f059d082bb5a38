"""
Configuration file for PGN to Video
Update these settings for your game and output
"""

import os

# =============================================================================
# FILE STORAGE CONFIGURATION
# =============================================================================

# Base directory for input, output and cached frames
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# PGN file with the game to convert
PGN_FILE = os.path.join(BASE_DIR, "game.pgn")

# Generated video (overwritten on every run)
VIDEO_OUTPUT = os.path.join(BASE_DIR, "output.mp4")

# Directory holding one rendered image per position (reused between runs)
FRAMES_DIR = os.path.join(BASE_DIR, "temp")

# Frames are named <FRAME_BASENAME>_<index>.<FRAME_EXTENSION>
FRAME_BASENAME = "temp"
FRAME_EXTENSION = "png"

# =============================================================================
# VIDEO SETTINGS
# =============================================================================

# Target length of the video; the frame rate is derived from it
DESIRED_DURATION_SECONDS = 30

# OpenCV fourcc code for the output container
VIDEO_FOURCC = "mp4v"

# =============================================================================
# BOARD RENDERING
# =============================================================================

# "svg" (python-chess + cairosvg) or "pil" (Pillow only, no Cairo needed)
RENDERER = "svg"

BOARD_SIZE = 400  # Square board size in pixels
BOARD_FLIPPED = False  # Render from black's side

# =============================================================================
# RENDER THROTTLING
# =============================================================================

# Pause every N frames so long games don't overload the renderer
THROTTLE_EVERY_FRAMES = 1000
THROTTLE_SECONDS = 2
