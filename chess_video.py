#!/usr/bin/env python3
"""
PGN to Video
============
Converts a chess game (PGN) into a video of board positions, one frame per
half-move, played back at whatever frame rate makes the video last the
desired number of seconds.

Pipeline:
1. Parse the PGN into positions
2. Reuse the rendered frames from a previous run, or render them again
3. Derive the frame rate from the frame count and desired duration
4. Encode the frames into the output video

Usage:
    python chess_video.py                      # Use paths from config.py
    python chess_video.py game.pgn -o game.mp4 # Custom input/output
    python chess_video.py game.pgn -d 60       # One minute video
"""

import sys
import math
import logging
import argparse
from pathlib import Path
from typing import Optional, Union

from board_renderer import create_renderer, RENDERERS
from frame_cache import FrameCacheInspector
from frame_producer import FrameProducer
from frame_rate import calculate_frame_rate, round_half_up
from pgn_parser import PGNParser
from video_assembler import VideoAssembler, START, PROGRESS, ERROR, END
from video_errors import ChessVideoError, EncodeError

import config

logger = logging.getLogger("ChessVideo")

MIN_BOARD_SIZE = 8  # One pixel per square

# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure console logging for the command-line tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    )
    return logger

# =============================================================================
# PIPELINE
# =============================================================================

class ChessVideoPipeline:
    """
    Main class: PGN in, video out, with the frames directory as a cache.
    """

    def __init__(
        self,
        renderer,
        assembler: VideoAssembler,
        cache: FrameCacheInspector,
        producer: Optional[FrameProducer] = None,
        parser: Optional[PGNParser] = None
    ):
        """
        Args:
            renderer: Position renderer with render(fen, output_path)
            assembler: Encoder for the finished frame sequence
            cache: Frames directory inspector
            producer: Frame producer (default: one built around renderer)
            parser: PGN parser (default: PGNParser())
        """
        self.renderer = renderer
        self.assembler = assembler
        self.cache = cache
        self.producer = producer or FrameProducer(renderer, cache)
        self.parser = parser or PGNParser()

    def run(
        self,
        pgn_path: Union[str, Path],
        output_path: Union[str, Path],
        duration_seconds: float
    ) -> Path:
        """
        Generate a video from a PGN file.

        Args:
            pgn_path: Path to PGN file
            output_path: Video file to write (overwritten if present)
            duration_seconds: Desired length of the video

        Returns:
            Path to the generated video

        Raises:
            ChessVideoError: on any fatal condition
        """
        output_path = Path(output_path)
        logger.info(f"🎬 Starting video generation from: {pgn_path}")

        game = self.parser.parse_file(pgn_path)
        logger.info(f"📋 {game.title()} ({game.headers.get('Result', '?')})")
        logger.info(f"📋 Total half-moves: {game.half_moves}")

        decision = self.cache.inspect(game.half_moves)
        if decision.reuse:
            logger.info(f"📁 Found {len(decision.frames)} frames, skipping image generation")
            frames = decision.frames
        else:
            logger.info("🎞️ Generating frames...")
            frames = self.producer.produce(game.positions, on_progress=self._log_render_progress)

        fps = calculate_frame_rate(len(frames), duration_seconds)
        logger.info(f"⏱️ {len(frames)} frames at {fps} fps")

        if output_path.exists():
            logger.warning(f"⚠️ {output_path} already exists and will be overwritten")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        job = self.assembler.encode(
            self.cache.frame_template(),
            len(frames),
            fps,
            output_path
        )

        for event in job.events():
            if event.kind == START:
                logger.info(f"🚀 Encoder started with command: {event.message}")
            elif event.kind == PROGRESS:
                percent = round_half_up(event.frames / len(frames) * 100)
                logger.info(f"   Processing, {percent}% done")
            elif event.kind == ERROR:
                raise EncodeError(f"Encoding failed: {event.message}")
            elif event.kind == END:
                logger.info("✅ Video generated!")

        logger.info(f"💾 Saved: {output_path}")
        return output_path

    @staticmethod
    def _log_render_progress(done: int, total: int):
        logger.info(f"   Generated image {done}/{total}")

# =============================================================================
# CLI ENTRY POINT
# =============================================================================

def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be a finite number greater than 0, got {value}")
    return number


def board_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {value}") from None
    if size < MIN_BOARD_SIZE:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_BOARD_SIZE} pixels, got {value}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn a chess PGN into a video of board positions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python chess_video.py
  python chess_video.py game.pgn --output game.mp4
  python chess_video.py game.pgn --duration 60 --renderer pil
        """
    )

    parser.add_argument(
        'pgn_file',
        nargs='?',
        default=config.PGN_FILE,
        help='Path to PGN file (default: from config.py)'
    )

    parser.add_argument(
        '--output', '-o',
        default=config.VIDEO_OUTPUT,
        help='Output video path (default: from config.py)'
    )

    parser.add_argument(
        '--duration', '-d',
        type=positive_float,
        default=config.DESIRED_DURATION_SECONDS,
        help=f'Desired video length in seconds (default: {config.DESIRED_DURATION_SECONDS})'
    )

    parser.add_argument(
        '--frames-dir',
        default=config.FRAMES_DIR,
        help='Directory for rendered frames, reused between runs'
    )

    parser.add_argument(
        '--renderer',
        choices=sorted(RENDERERS),
        default=config.RENDERER,
        help=f'Board renderer (default: {config.RENDERER})'
    )

    parser.add_argument(
        '--board-size',
        type=board_size,
        default=config.BOARD_SIZE,
        help=f'Board size in pixels (default: {config.BOARD_SIZE})'
    )

    parser.add_argument(
        '--flip',
        action='store_true',
        default=config.BOARD_FLIPPED,
        help="Show the board from black's side"
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def main(argv=None) -> int:
    """Command-line interface for video generation."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    renderer = create_renderer(args.renderer, board_size=args.board_size, flipped=args.flip)
    cache = FrameCacheInspector(
        args.frames_dir,
        base=config.FRAME_BASENAME,
        ext=config.FRAME_EXTENSION
    )
    producer = FrameProducer(
        renderer,
        cache,
        throttle_every=config.THROTTLE_EVERY_FRAMES,
        throttle_seconds=config.THROTTLE_SECONDS
    )
    pipeline = ChessVideoPipeline(
        renderer=renderer,
        assembler=VideoAssembler(fourcc=config.VIDEO_FOURCC),
        cache=cache,
        producer=producer
    )

    try:
        result = pipeline.run(args.pgn_file, args.output, args.duration)
    except ChessVideoError as e:
        logger.error(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("\n⚠️ Interrupted by user")
        return 130

    logger.info(f"🎬 Video ready: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
