import pytest

from frame_producer import FrameProducer
from video_errors import RenderError

from conftest import FakeRenderer


class NullRenderer:
    """Touches the output file without recording anything (for long runs)."""

    def render(self, fen, output_path):
        output_path.touch()
        return output_path


def positions(count):
    return [f"fen-{i}" for i in range(count)]


def test_produce_renders_each_position_in_order(cache, fake_renderer):
    cache.reset()
    producer = FrameProducer(fake_renderer, cache)

    frames = producer.produce(positions(5))

    assert len(frames) == 5
    assert frames == [cache.frame_path(i) for i in range(5)]
    for index, frame in enumerate(frames):
        assert frame.read_text() == f"fen-{index}"
    assert [fen for fen, _ in fake_renderer.calls] == positions(5)


def test_progress_is_reported_per_frame(cache, fake_renderer):
    cache.reset()
    progress = []

    FrameProducer(fake_renderer, cache).produce(
        positions(3), on_progress=lambda done, total: progress.append((done, total))
    )

    assert progress == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.parametrize("count, pauses", [(2500, 2), (999, 0), (1000, 0), (1001, 1)])
def test_throttle_pauses_every_thousand_frames(cache, count, pauses):
    cache.reset()
    sleeps = []

    FrameProducer(NullRenderer(), cache, sleep=sleeps.append).produce(positions(count))

    assert sleeps == [2.0] * pauses


def test_pause_happens_before_frame_1000(cache):
    cache.reset()
    events = []

    class Renderer:
        def render(self, fen, output_path):
            events.append(fen)
            output_path.touch()

    producer = FrameProducer(Renderer(), cache, sleep=lambda s: events.append("pause"))
    producer.produce(positions(1001))

    assert events[999:] == ["fen-999", "pause", "fen-1000"]


def test_throttle_can_be_disabled(cache):
    producer = FrameProducer(NullRenderer(), cache, throttle_every=0)
    assert not any(producer.should_pause(i) for i in range(3000))


def test_render_failure_stops_production(cache):
    cache.reset()
    renderer = FakeRenderer(fail_at=2)

    with pytest.raises(RenderError) as excinfo:
        FrameProducer(renderer, cache).produce(positions(5))

    assert excinfo.value.index == 2
    assert excinfo.value.fen == "fen-2"
    assert len(renderer.calls) == 2
    assert len(list(cache.frames_dir.iterdir())) == 2


def test_renderer_that_writes_nothing_fails(cache):
    cache.reset()

    class SilentRenderer:
        def render(self, fen, output_path):
            return output_path

    with pytest.raises(RenderError):
        FrameProducer(SilentRenderer(), cache).produce(positions(1))
