"""
Frame Cache
===========
The frames directory doubles as a cache between runs. Before rendering, the
inspector decides whether the frames already on disk can be reused for the
current game or must be thrown away and regenerated.

Frames are named <base>_<index>.<ext> with a zero-based index. Order is always
taken from that index, never from directory listing order.
"""

import re
import shutil
import logging
from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field

from video_errors import FrameStorageError

logger = logging.getLogger("ChessVideo.cache")


@dataclass
class CacheDecision:
    """Result of inspecting the frames directory."""
    reuse: bool
    frames: List[Path] = field(default_factory=list)


class FrameCacheInspector:
    """
    Owns the frames directory layout and decides reuse vs. regeneration.
    """

    def __init__(self, frames_dir: Union[str, Path], base: str = "temp", ext: str = "png"):
        self.frames_dir = Path(frames_dir)
        self.base = base
        self.ext = ext.lstrip(".")
        self._name_pattern = re.compile(
            rf"^{re.escape(self.base)}_(\d+)\.{re.escape(self.ext)}$"
        )

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def frame_path(self, index: int) -> Path:
        """Path of the frame for position `index`."""
        return self.frames_dir / f"{self.base}_{index}.{self.ext}"

    def frame_template(self) -> str:
        """printf-style template for the whole frame sequence, e.g. temp/temp_%d.png"""
        return str(self.frames_dir / f"{self.base}_%d.{self.ext}")

    def frame_index(self, path: Union[str, Path]) -> Optional[int]:
        """Index embedded in a frame filename, or None if it doesn't follow the template."""
        match = self._name_pattern.match(Path(path).name)
        if not match:
            return None
        return int(match.group(1))

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def inspect(self, expected_count: int) -> CacheDecision:
        """
        Decide whether the frames on disk match a game of `expected_count` positions.

        On a mismatch the whole directory is cleared so that production starts
        from a clean slate.

        Args:
            expected_count: Number of positions in the current game

        Returns:
            CacheDecision; when reuse is True, frames are ordered by index
        """
        if not self.frames_dir.is_dir():
            logger.debug(f"No frames directory at {self.frames_dir}")
            self.reset()
            return CacheDecision(reuse=False)

        entries = list(self.frames_dir.iterdir())
        if len(entries) != expected_count:
            logger.info(
                f"♻️ Frames directory holds {len(entries)} entries, "
                f"expected {expected_count}; regenerating"
            )
            self.reset()
            return CacheDecision(reuse=False)

        frames = self._ordered_frames(entries)
        if frames is None:
            logger.info("♻️ Frames directory has unexpected entries; regenerating")
            self.reset()
            return CacheDecision(reuse=False)

        return CacheDecision(reuse=True, frames=frames)

    def reset(self):
        """Remove the frames directory and everything in it, then recreate it empty."""
        if self.frames_dir.exists():
            if not self.frames_dir.is_dir():
                raise FrameStorageError(
                    f"Frames path {self.frames_dir} exists but is not a directory"
                )
            shutil.rmtree(self.frames_dir)
        self.frames_dir.mkdir(parents=True, exist_ok=True)

    def _ordered_frames(self, entries: List[Path]) -> Optional[List[Path]]:
        indexed = []
        for entry in entries:
            index = self.frame_index(entry)
            if index is None or not entry.is_file():
                return None
            indexed.append((index, entry))

        indexed.sort(key=lambda item: item[0])

        # Indices must be exactly 0..n-1 for the encoder's numeric template
        if [index for index, _ in indexed] != list(range(len(indexed))):
            return None

        return [entry for _, entry in indexed]
