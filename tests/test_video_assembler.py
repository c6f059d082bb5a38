import numpy as np
from PIL import Image

from video_assembler import VideoAssembler, START, PROGRESS, ERROR, END


def write_frames(cache, count, size=(16, 16)):
    cache.reset()
    for index in range(count):
        Image.new("RGB", size, (index, 0, 0)).save(cache.frame_path(index))


def test_events_arrive_in_order_and_end_is_terminal(cache, fake_writer, recording_reader, tmp_path):
    write_frames(cache, 3)
    assembler = VideoAssembler(writer_factory=fake_writer, reader=recording_reader)

    job = assembler.encode(cache.frame_template(), 3, 10, tmp_path / "out.mp4")
    events = list(job.events())

    assert [e.kind for e in events] == [START, PROGRESS, PROGRESS, PROGRESS, END]
    assert [e.frames for e in events if e.kind == PROGRESS] == [1, 2, 3]
    assert events[-1].frames == 3
    assert "-framerate 10" in events[0].message

    writer = fake_writer.instances[0]
    assert writer.fps == 10
    assert writer.size == (8, 8)
    assert len(writer.frames) == 3
    assert writer.released
    assert recording_reader.paths == [str(cache.frame_path(i)) for i in range(3)]


def test_reads_real_png_frames_with_opencv(cache, fake_writer, tmp_path):
    write_frames(cache, 2, size=(20, 12))
    assembler = VideoAssembler(writer_factory=fake_writer)

    final = assembler.encode(cache.frame_template(), 2, 5, tmp_path / "out.mp4").wait()

    assert final.kind == END
    writer = fake_writer.instances[0]
    assert writer.size == (20, 12)
    assert writer.frames[0].shape == (12, 20, 3)


def test_missing_frame_reports_error(cache, fake_writer, recording_reader, tmp_path):
    write_frames(cache, 2)
    assembler = VideoAssembler(writer_factory=fake_writer, reader=recording_reader)

    events = list(assembler.encode(cache.frame_template(), 3, 10, tmp_path / "out.mp4").events())

    assert events[-1].kind == ERROR
    assert "Could not read frame 2" in events[-1].message
    assert END not in [e.kind for e in events]
    assert fake_writer.instances[0].released


def test_size_mismatch_reports_error(cache, fake_writer, tmp_path):
    cache.reset()
    shapes = iter([(8, 8, 3), (8, 9, 3)])

    def reader(path):
        return np.zeros(next(shapes), dtype=np.uint8)

    assembler = VideoAssembler(writer_factory=fake_writer, reader=reader)
    final = assembler.encode(cache.frame_template(), 2, 10, tmp_path / "out.mp4").wait()

    assert final.kind == ERROR
    assert "expected 8x8" in final.message


def test_writer_that_cannot_open_reports_error(cache, recording_reader, tmp_path):
    write_frames(cache, 1)

    class ClosedWriter:
        def __init__(self, *args):
            self.released = False

        def isOpened(self):
            return False

        def release(self):
            self.released = True

    assembler = VideoAssembler(writer_factory=ClosedWriter, reader=recording_reader)
    events = list(assembler.encode(cache.frame_template(), 1, 1, tmp_path / "out.mp4").events())

    assert [e.kind for e in events] == [ERROR]
    assert "Failed to open video writer" in events[0].message


def test_zero_frames_is_an_error(cache, fake_writer, recording_reader, tmp_path):
    assembler = VideoAssembler(writer_factory=fake_writer, reader=recording_reader)
    final = assembler.encode(cache.frame_template(), 0, 0, tmp_path / "out.mp4").wait()

    assert final.kind == ERROR
    assert fake_writer.instances == []
