from pathlib import Path

import numpy as np
import pytest

from frame_cache import FrameCacheInspector


class FakeRenderer:
    """Writes each FEN into its frame file instead of drawing it."""

    def __init__(self, fail_at=None):
        self.calls = []
        self.fail_at = fail_at

    def render(self, fen, output_path):
        if self.fail_at is not None and len(self.calls) == self.fail_at:
            raise RuntimeError("renderer crashed")
        self.calls.append((fen, Path(output_path)))
        Path(output_path).write_text(fen)
        return Path(output_path)


class FakeWriter:
    """Stands in for cv2.VideoWriter and remembers what it was given."""

    instances = []

    def __init__(self, path, fourcc, fps, size, opened=True):
        self.path = path
        self.fourcc = fourcc
        self.fps = fps
        self.size = size
        self.frames = []
        self.released = False
        self._opened = opened
        FakeWriter.instances.append(self)

    def isOpened(self):
        return self._opened

    def write(self, frame):
        self.frames.append(frame)

    def release(self):
        self.released = True
        Path(self.path).write_bytes(b"video")


class RecordingReader:
    """Stands in for cv2.imread: records the paths read in order."""

    def __init__(self, shape=(8, 8, 3)):
        self.paths = []
        self.shape = shape

    def __call__(self, path):
        self.paths.append(path)
        if not Path(path).is_file():
            return None
        return np.zeros(self.shape, dtype=np.uint8)


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def fake_writer():
    FakeWriter.instances = []
    return FakeWriter


@pytest.fixture
def recording_reader():
    return RecordingReader()


@pytest.fixture
def cache(tmp_path):
    return FrameCacheInspector(tmp_path / "temp")


def knight_shuffle_pgn(full_moves: int) -> str:
    """A legal game of `full_moves` moves (2 half-moves each)."""
    moves = []
    for number in range(1, full_moves + 1):
        if number % 2:
            moves.append(f"{number}. Nf3 Nf6")
        else:
            moves.append(f"{number}. Ng1 Ng8")
    return (
        '[Event "Test"]\n'
        '[White "Alice"]\n'
        '[Black "Bob"]\n'
        '[Result "*"]\n'
        "\n"
        + " ".join(moves)
        + " *\n"
    )


@pytest.fixture
def write_pgn(tmp_path):
    def _write(text, name="game.pgn"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def pgn_factory():
    return knight_shuffle_pgn
