"""Media properties, constraints on them, and fitness between the two."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import timedelta
from typing import Any, Callable, Optional

from mediakit.constraints import Constraint, Fitness
from mediakit.numeric import format_duration

_ZERO = timedelta(0)


@dataclass
class Video:
    """Properties of a video stream."""

    width: int = 0
    height: int = 0
    frame_rate: float = 0.0
    frame_format: str = ""
    discard_frames_older_than: timedelta = _ZERO


@dataclass
class Audio:
    """Properties of an audio stream."""

    channel_count: int = 0
    latency: timedelta = _ZERO
    sample_rate: int = 0
    sample_size: int = 0
    is_big_endian: bool = False
    is_float: bool = False
    is_interleaved: bool = False


def _merge(target: Any, source: Any, assign: Callable[[Any, str, Any], None]) -> None:
    """Copy every set value of ``source`` onto ``target``, recursing into groups.

    Zero values are skipped, except booleans, which are always copied.
    """
    for item in fields(source):
        value = getattr(source, item.name)
        if isinstance(value, Constraint):
            assign(target, item.name, value)
        elif is_dataclass(value):
            _merge(getattr(target, item.name), value, assign)
        elif isinstance(value, bool) or value:
            assign(target, item.name, value)


def _assign_preferred(target: Any, name: str, value: Any) -> None:
    if isinstance(value, Constraint):
        value = value.preferred()
        if value is None:
            return
    setattr(target, name, value)


def _format_value(value: Any) -> str:
    if isinstance(value, timedelta):
        return format_duration(value)
    return str(value)


def _prettify(obj: Any) -> str:
    rows: list[str] = []

    def add_rows(level: int, group: Any) -> None:
        padding = "  " * level
        for item in fields(group):
            value = getattr(group, item.name)
            if is_dataclass(value) and not isinstance(value, Constraint):
                rows.append(f"{padding}{item.name}:")
                add_rows(level + 1, value)
            elif value is None:
                rows.append(f"{padding}{item.name}: any")
            else:
                rows.append(f"{padding}{item.name}: {_format_value(value)}")

    add_rows(0, obj)
    return "\n".join(rows)


@dataclass
class Media:
    """One set of media properties."""

    device_id: str = ""
    video: Video = field(default_factory=Video)
    audio: Audio = field(default_factory=Audio)

    def merge(self, other: Media) -> None:
        """Take every non-zero property of ``other``; booleans are always taken."""
        _merge(self, other, setattr)

    def merge_constraints(self, constraints: MediaConstraints) -> None:
        """Take the single preferred value of each constraint that has one."""
        _merge(self, constraints, _assign_preferred)

    def __str__(self) -> str:
        return _prettify(self)


@dataclass
class VideoConstraints:
    """Constraints on video properties; None means any value."""

    width: Optional[Constraint] = None
    height: Optional[Constraint] = None
    frame_rate: Optional[Constraint] = None
    frame_format: Optional[Constraint] = None
    discard_frames_older_than: timedelta = _ZERO


@dataclass
class AudioConstraints:
    """Constraints on audio properties; None means any value."""

    channel_count: Optional[Constraint] = None
    latency: Optional[Constraint] = None
    sample_rate: Optional[Constraint] = None
    sample_size: Optional[Constraint] = None
    is_big_endian: Optional[Constraint] = None
    is_float: Optional[Constraint] = None
    is_interleaved: Optional[Constraint] = None


@dataclass
class MediaConstraints:
    """A set of constraints on media properties."""

    device_id: Optional[Constraint] = None
    video: VideoConstraints = field(default_factory=VideoConstraints)
    audio: AudioConstraints = field(default_factory=AudioConstraints)

    def fitness_distance(self, media: Media) -> Fitness:
        """Sum the distances of ``media`` from every constraint that is set.

        The result is unsatisfied, with distance 0, as soon as one constraint
        rejects its property.
        """
        video, audio = self.video, self.audio
        mvideo, maudio = media.video, media.audio
        pairs = [
            (self.device_id, media.device_id),
            (video.width, mvideo.width),
            (video.height, mvideo.height),
            (video.frame_format, mvideo.frame_format),
        ]
        # Frame rate is only compared when the media reports one.
        if mvideo.frame_rate > 0.0:
            pairs.append((video.frame_rate, mvideo.frame_rate))
        pairs += [
            (audio.sample_rate, maudio.sample_rate),
            (audio.latency, maudio.latency),
            (audio.channel_count, maudio.channel_count),
            (audio.is_big_endian, maudio.is_big_endian),
            (audio.is_float, maudio.is_float),
            (audio.is_interleaved, maudio.is_interleaved),
        ]

        distance = 0.0
        for constraint, actual in pairs:
            if constraint is None:
                continue
            result = constraint.compare(actual)
            distance += result.distance
            if not result.satisfied:
                return Fitness(0.0, False)
        return Fitness(distance, True)

    def __str__(self) -> str:
        return _prettify(self)