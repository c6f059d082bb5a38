"""
Video Assembler
===============
Encodes a numbered image sequence into a video with OpenCV.

Encoding runs on a worker thread. The caller receives an EncodeJob and reads
its events (start, progress, error, end) as they arrive; end and error are
terminal and mutually exclusive.
"""

import queue
import logging
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional, Union
from dataclasses import dataclass

import cv2
import numpy as np

from video_errors import EncodeError

logger = logging.getLogger("ChessVideo.assembler")

START = "start"
PROGRESS = "progress"
ERROR = "error"
END = "end"

TERMINAL_EVENTS = (ERROR, END)

# =============================================================================
# EVENTS
# =============================================================================

@dataclass
class EncoderEvent:
    """One signal from a running encode job."""
    kind: str
    frames: int = 0      # Cumulative frames written (progress/end)
    message: str = ""    # Command description (start) or diagnostic (error)

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_EVENTS


class EncodeJob:
    """Handle on an encode running in the background."""

    def __init__(self, total_frames: int, output_path: Path):
        self.total_frames = total_frames
        self.output_path = output_path
        self._events: "queue.Queue[EncoderEvent]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._finished = False

    def post(self, event: EncoderEvent):
        self._events.put(event)

    def events(self) -> Iterator[EncoderEvent]:
        """Yield events as they arrive, stopping after the terminal one."""
        while not self._finished:
            event = self._events.get()
            if event.is_terminal:
                self._finished = True
            yield event

        if self._thread is not None:
            self._thread.join()

    def wait(self) -> EncoderEvent:
        """Consume all remaining events and return the terminal one."""
        last = None
        for event in self.events():
            last = event
        return last

# =============================================================================
# ASSEMBLER
# =============================================================================

class VideoAssembler:
    """
    Turns a frame template such as temp/temp_%d.png into a video file.
    """

    def __init__(
        self,
        fourcc: str = "mp4v",
        writer_factory: Callable = cv2.VideoWriter,
        reader: Callable[[str], Optional[np.ndarray]] = cv2.imread
    ):
        self.fourcc = fourcc
        self.writer_factory = writer_factory
        self.reader = reader

    def encode(
        self,
        template: str,
        frame_count: int,
        fps: int,
        output_path: Union[str, Path]
    ) -> EncodeJob:
        """
        Start encoding in the background.

        Args:
            template: printf-style frame path template with one %d
            frame_count: Number of frames, indices 0..frame_count-1
            fps: Playback frame rate
            output_path: Video file to write (overwritten)

        Returns:
            EncodeJob whose events() report progress and completion
        """
        job = EncodeJob(frame_count, Path(output_path))
        thread = threading.Thread(
            target=self._run,
            args=(job, template, frame_count, fps),
            name="video-encoder",
            daemon=True
        )
        job._thread = thread
        thread.start()
        return job

    def _read_frame(self, template: str, index: int) -> np.ndarray:
        path = template % index
        frame = self.reader(path)
        if frame is None:
            raise EncodeError(f"Could not read frame {index}: {path}")
        return frame

    def _run(self, job: EncodeJob, template: str, frame_count: int, fps: int):
        writer = None
        try:
            if frame_count <= 0 or fps <= 0:
                raise EncodeError(f"Nothing to encode ({frame_count} frames at {fps} fps)")

            first = self._read_frame(template, 0)
            height, width = first.shape[:2]

            writer = self.writer_factory(
                str(job.output_path),
                cv2.VideoWriter_fourcc(*self.fourcc),
                fps,
                (width, height)
            )
            if not writer.isOpened():
                raise EncodeError(f"Failed to open video writer for {job.output_path}")

            job.post(EncoderEvent(
                START,
                message=(
                    f"VideoWriter -framerate {fps} -i {template} "
                    f"-codec {self.fourcc} -s {width}x{height} {job.output_path}"
                )
            ))

            for index in range(frame_count):
                frame = first if index == 0 else self._read_frame(template, index)
                if frame.shape[:2] != (height, width):
                    raise EncodeError(
                        f"Frame {index} is {frame.shape[1]}x{frame.shape[0]}, "
                        f"expected {width}x{height}"
                    )
                writer.write(frame)
                job.post(EncoderEvent(PROGRESS, frames=index + 1))

        except Exception as e:
            # Reported to the caller through the event channel
            logger.debug("Encoder failed", exc_info=True)
            job.post(EncoderEvent(ERROR, message=str(e)))
            return
        finally:
            if writer is not None:
                writer.release()

        job.post(EncoderEvent(END, frames=frame_count))
