"""Frame rate calculation: fit a variable number of frames into a fixed duration."""

import math
import logging

from video_errors import DegenerateInputError

logger = logging.getLogger("ChessVideo.rate")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values (1.5 -> 2, 2.5 -> 3)."""
    return math.floor(value + 0.5)


def calculate_frame_rate(frame_count: int, duration_seconds: float) -> int:
    """
    Frames per second needed to show `frame_count` frames in `duration_seconds`.

    Args:
        frame_count: Number of frames in the video
        duration_seconds: Desired video length, must be positive

    Returns:
        Integer frame rate, at least 1

    Raises:
        ValueError: duration_seconds is not positive
        DegenerateInputError: there are no frames to encode
    """
    if not math.isfinite(duration_seconds) or duration_seconds <= 0:
        raise ValueError(f"Duration must be positive, got {duration_seconds}")
    if frame_count <= 0:
        raise DegenerateInputError()

    fps = round_half_up(frame_count / duration_seconds)
    if fps < 1:
        logger.warning(
            f"⚠️ {frame_count} frames is too few for {duration_seconds:g}s, "
            f"using 1 fps (video will be {frame_count}s long)"
        )
        fps = 1
    return fps
