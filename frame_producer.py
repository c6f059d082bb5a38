"""
Frame Producer
==============
Renders every position of a game, in play order, into the frames directory.

Rendering is strictly sequential: frame i is always position i, and a fixed
pause is inserted every `throttle_every` frames to keep the renderer from
being overloaded on very long games.
"""

import time
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from frame_cache import FrameCacheInspector
from video_errors import RenderError

logger = logging.getLogger("ChessVideo.producer")

ProgressCallback = Callable[[int, int], None]

THROTTLE_EVERY_FRAMES = 1000
THROTTLE_SECONDS = 2.0


class FrameProducer:
    """
    Drives a position renderer over a list of FEN strings.
    """

    def __init__(
        self,
        renderer,
        cache: FrameCacheInspector,
        throttle_every: int = THROTTLE_EVERY_FRAMES,
        throttle_seconds: float = THROTTLE_SECONDS,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            renderer: Object with render(fen, output_path)
            cache: Frames directory layout (used for frame naming)
            throttle_every: Pause before every N-th frame (0 disables)
            throttle_seconds: Length of each pause
            sleep: Blocking sleep function
        """
        self.renderer = renderer
        self.cache = cache
        self.throttle_every = throttle_every
        self.throttle_seconds = throttle_seconds
        self.sleep = sleep

    def should_pause(self, index: int) -> bool:
        """True if a throttle pause is due before rendering frame `index`."""
        return (
            self.throttle_every > 0
            and index != 0
            and index % self.throttle_every == 0
        )

    def produce(
        self,
        positions: Sequence[str],
        on_progress: Optional[ProgressCallback] = None
    ) -> List[Path]:
        """
        Render all positions into the frames directory.

        Args:
            positions: FEN strings in play order
            on_progress: Called with (frames_done, total) after each frame

        Returns:
            Frame paths ordered by index

        Raises:
            RenderError: a position failed to render; frames already
                written stay on disk and will not match the expected count
        """
        total = len(positions)
        frames = []

        for index, fen in enumerate(positions):
            if self.should_pause(index):
                logger.info(f"⏳ Waiting for {self.throttle_seconds:g} seconds to prevent corruption...")
                self.sleep(self.throttle_seconds)

            path = self.cache.frame_path(index)
            try:
                self.renderer.render(fen, path)
            except Exception as e:
                raise RenderError(index, fen, e) from e

            if not path.is_file():
                raise RenderError(index, fen, FileNotFoundError(f"renderer did not write {path}"))

            frames.append(path)
            if on_progress:
                on_progress(index + 1, total)

        return frames
