"""Drive a pose through an animation and hand each sampled frame to a callback."""

import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from spine_perf.model import Animation, Pose
from spine_perf.utils.constants import DEFAULT_SAMPLE_RATE
from spine_perf.utils.logging import log_debug

SampleCallback = Callable[[float, Pose], None]


@dataclass(frozen=True)
class TrackState:
    """Snapshot of the track a pose was playing before sampling."""

    animation_name: str | None
    track_time: float
    loop: bool


def capture_track_state(pose: Pose) -> TrackState:
    """Read the pose's current animation name, track time and loop flag."""
    track = pose.player.current_track()
    if track is None:
        return TrackState(animation_name=None, track_time=0.0, loop=False)
    return TrackState(
        animation_name=track.animation_name,
        track_time=track.track_time,
        loop=track.loop,
    )


def restore_track_state(pose: Pose, state: TrackState) -> None:
    """Replay a captured track state through the player.

    The pose is re-applied even when nothing was playing, so the last sampled
    frame never leaks into the restored skeleton.
    """
    player = pose.player
    player.clear_track()
    if state.animation_name is not None:
        track = player.set_animation(state.animation_name, state.loop)
        track.track_time = state.track_time
        track.animation_last = state.track_time
    player.apply()
    player.update_world_transform()


@contextmanager
def preserved_track_state(pose: Pose) -> Iterator[TrackState]:
    """Capture the pose's track state and restore it on every exit path.

    Usage:
        with preserved_track_state(pose):
            pose.player.set_animation("run", False)
            ...
        # pose is back on whatever it was playing before
    """
    state = capture_track_state(pose)
    try:
        yield state
    finally:
        restore_track_state(pose, state)


def sample_times(duration: float, sample_rate: float = DEFAULT_SAMPLE_RATE) -> list[float]:
    """
    Evenly spaced sample times covering [0, duration], both ends included.

    Yields ceil(duration * sample_rate) + 1 times; a zero-length animation
    gets a single sample at 0.
    """
    if not sample_rate > 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate!r}")

    steps = math.ceil(duration * sample_rate) if duration > 0 else 0
    if steps == 0:
        return [0.0]
    return [(i / steps) * duration for i in range(steps + 1)]


def sample_animation(
    pose: Pose,
    animation: Animation,
    on_sample: SampleCallback,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> int:
    """Play ``animation`` on ``pose`` and call ``on_sample(time, pose)`` per frame.

    The pose's bones, slots and constraints are mutated in place while this
    runs, so callbacks should copy whatever they need to keep. The previous
    track state is restored afterwards, including when the player raises.

    Returns the number of samples taken.
    """
    times = sample_times(animation.duration, sample_rate)
    player = pose.player

    log_debug(
        f"Sampling animation '{animation.name}' - duration: {animation.duration}s, "
        f"samples: {len(times)}"
    )

    with preserved_track_state(pose):
        player.clear_track()
        player.set_animation(animation.name, False)

        for time in times:
            track = player.current_track()
            if track is not None:
                track.track_time = time
                track.animation_last = time
                track.animation_end = animation.duration

            player.apply()
            player.update_world_transform()
            on_sample(time, pose)

    return len(times)
