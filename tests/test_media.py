from dataclasses import dataclass
from datetime import timedelta

import pytest

from mediakit.constraints import (
    BoolExact,
    FrameFormat,
    FrameFormatExact,
    FrameFormatOneOf,
    String,
    StringExact,
    StringOneOf,
)
from mediakit.media import (
    Audio,
    AudioConstraints,
    Media,
    MediaConstraints,
    Video,
    VideoConstraints,
)
from mediakit.numeric import (
    Duration,
    DurationExact,
    DurationRanged,
    Float,
    FloatExact,
    FloatRanged,
    Int,
    IntExact,
    IntOneOf,
    IntRanged,
)

SECOND = timedelta(seconds=1)
MILLISECOND = timedelta(milliseconds=1)


def vc(**kwargs):
    return MediaConstraints(video=VideoConstraints(**kwargs))


def ac(**kwargs):
    return MediaConstraints(audio=AudioConstraints(**kwargs))


def vm(**kwargs):
    return Media(video=Video(**kwargs))


def am(**kwargs):
    return Media(audio=Audio(**kwargs))


COMPARE_CASES = {
    "DeviceIDExactUnmatch": (
        MediaConstraints(device_id=StringExact("abc")),
        Media(device_id="cde"),
        False,
    ),
    "DeviceIDExactMatch": (
        MediaConstraints(device_id=StringExact("abc")),
        Media(device_id="abc"),
        True,
    ),
    "IntIdealUnmatch": (vc(width=Int(30)), vm(width=50), True),
    "IntIdealMatch": (vc(width=Int(30)), vm(width=30), True),
    "IntExactUnmatch": (vc(width=IntExact(30)), vm(width=50), False),
    "IntExactMatch": (vc(width=IntExact(30)), vm(width=30), True),
    "IntRangeUnmatch": (
        vc(width=IntRanged(minimum=30, maximum=40)),
        vm(width=50),
        False,
    ),
    "IntRangeMatch": (
        vc(width=IntRanged(minimum=30, maximum=40)),
        vm(width=35),
        True,
    ),
    "FloatExactMatch": (vc(frame_rate=FloatExact(30)), vm(frame_rate=30.0), True),
    "FloatExactUnmatch": (
        vc(frame_rate=FloatExact(30)),
        vm(frame_rate=30.1),
        False,
    ),
    "FloatIdealMatch": (vc(frame_rate=Float(30)), vm(frame_rate=30.0), True),
    "FloatIdealUnmatch": (vc(frame_rate=Float(30)), vm(frame_rate=10.0), True),
    "FloatRangeMatch": (
        vc(frame_rate=FloatRanged(minimum=30, maximum=40)),
        vm(frame_rate=35.0),
        True,
    ),
    "FloatRangeUnmatch": (
        vc(frame_rate=FloatRanged(minimum=30, maximum=40)),
        vm(frame_rate=50.0),
        False,
    ),
    "FrameFormatOneOfMatch": (
        vc(frame_format=FrameFormatOneOf(("YUYV", "UYVY"))),
        vm(frame_format="YUYV"),
        True,
    ),
    "FrameFormatOneOfUnmatch": (
        vc(frame_format=FrameFormatOneOf(("YUYV", "UYVY"))),
        vm(frame_format="MJPEG"),
        False,
    ),
    "DurationExactUnmatch": (
        ac(latency=DurationExact(SECOND)),
        am(latency=SECOND + MILLISECOND),
        False,
    ),
    "DurationExactMatch": (
        ac(latency=DurationExact(SECOND)),
        am(latency=SECOND),
        True,
    ),
    "DurationRangedUnmatch": (
        ac(latency=DurationRanged(maximum=SECOND)),
        am(latency=SECOND + MILLISECOND),
        False,
    ),
    "DurationRangedMatch": (
        ac(latency=DurationRanged(maximum=SECOND)),
        am(latency=MILLISECOND),
        True,
    ),
    "BoolExactUnmatch": (ac(is_float=BoolExact(True)), am(is_float=False), False),
    "BoolExactMatch": (ac(is_float=BoolExact(True)), am(is_float=True), True),
}


@pytest.mark.parametrize(
    "constraints, media, match",
    list(COMPARE_CASES.values()),
    ids=list(COMPARE_CASES),
)
def test_compare_match(constraints, media, match):
    result = MediaConstraints.fitness_distance(constraints, media)
    assert result.satisfied is match


@pytest.mark.parametrize(
    "constraints, media, score, match",
    [
        (vc(frame_rate=Float(30.0)), vm(frame_rate=30.0), 0.0, True),
        (vc(frame_rate=Float(30.0)), vm(frame_rate=60.0), 0.5, True),
        (vc(), vm(frame_rate=30.0), 0.0, True),
        (vc(frame_rate=Float(30.0)), vm(), 0.0, True),
    ],
    ids=[
        "FrameRateIdealMatch",
        "FrameRateIdealUnmatch",
        "FrameRateConstraintMissing",
        "FrameRatePropMissing",
    ],
)
def test_frame_rate_props(constraints, media, score, match):
    result = MediaConstraints.fitness_distance(constraints, media)
    assert result.distance == score
    assert result.satisfied is match


def test_unsatisfied_distance_is_zero():
    constraints = MediaConstraints(
        device_id=String("other"), video=VideoConstraints(width=IntExact(30))
    )
    result = constraints.fitness_distance(Media(device_id="abc", video=Video(width=50)))
    assert result.distance == 0.0
    assert result.satisfied is False


def test_distances_are_summed():
    constraints = MediaConstraints(
        device_id=String("other"), video=VideoConstraints(frame_format=FrameFormat("I420"))
    )
    media = Media(device_id="abc", video=Video(frame_format="YUYV"))
    assert constraints.fitness_distance(media) == (2.0, True)


def test_merge_with_zero():
    a = vm(width=30)
    a.merge(vm(height=100))
    assert a.video.width == 30
    assert a.video.height == 100


def test_merge_with_same_field():
    a = vm(width=30)
    a.merge(vm(width=100))
    assert a.video.width == 100


def test_merge_nested():
    @dataclass
    class Extended(Media):
        label: str = "cam"

    a = Extended(video=Video(width=30))
    a.merge(vm(width=100))
    assert a.video.width == 100
    assert a.label == "cam"


def test_merge_always_copies_booleans():
    a = am(is_float=True, sample_rate=48000)
    a.merge(Media())
    assert a.audio.is_float is False
    assert a.audio.sample_rate == 48000


def test_merge_constraints_with_zero():
    a = vm(width=30)
    a.merge_constraints(vc(height=Int(100)))
    assert a.video.width == 30
    assert a.video.height == 100


def test_merge_constraints_with_same_field():
    a = vm(width=30)
    a.merge_constraints(vc(width=Int(100)))
    assert a.video.width == 100


def test_merge_constraints_nested():
    @dataclass
    class Extended(Media):
        label: str = "cam"

    a = Extended(video=Video(width=30))
    a.merge_constraints(vc(width=Int(100)))
    assert a.video.width == 100


def test_merge_constraints_skips_constraints_without_single_value():
    a = Media(device_id="abc", video=Video(width=30))
    a.merge_constraints(
        MediaConstraints(
            device_id=StringOneOf(("x", "y")),
            video=VideoConstraints(width=IntOneOf((1, 2))),
        )
    )
    assert a.device_id == "abc"
    assert a.video.width == 30


def test_merge_constraints_applies_exact_and_bool_values():
    a = Media()
    a.merge_constraints(
        MediaConstraints(
            device_id=StringExact("abc"),
            video=VideoConstraints(frame_format=FrameFormatExact("I420")),
            audio=AudioConstraints(
                latency=Duration(20 * MILLISECOND), is_big_endian=BoolExact(True)
            ),
        )
    )
    assert a.device_id == "abc"
    assert a.video.frame_format == "I420"
    assert a.audio.latency == 20 * MILLISECOND
    assert a.audio.is_big_endian is True


def test_string_ideal_values():
    text = str(
        MediaConstraints(
            device_id=String("one"),
            video=VideoConstraints(
                width=Int(1920),
                frame_rate=Float(30.0),
                frame_format=FrameFormat("I420"),
            ),
            audio=AudioConstraints(latency=Duration(20 * MILLISECOND)),
        )
    )
    lines = text.split("\n")
    assert lines[0] == "device_id: one (ideal)"
    assert lines[1] == "video:"
    assert "  width: 1920 (ideal)" in lines
    assert "  height: any" in lines
    assert "  frame_rate: 30.00 (ideal)" in lines
    assert "  frame_format: I420 (ideal)" in lines
    assert "  latency: 20ms (ideal)" in lines
    assert "audio:" in lines


def test_string_exact_values():
    text = str(
        MediaConstraints(
            device_id=StringExact("one"),
            video=VideoConstraints(width=IntExact(1920)),
            audio=AudioConstraints(is_big_endian=BoolExact(True)),
        )
    )
    lines = text.split("\n")
    assert lines[0] == "device_id: one (exact)"
    assert "  width: 1920 (exact)" in lines
    assert "  is_big_endian: true (exact)" in lines


def test_media_string():
    text = str(Media(device_id="cam", video=Video(width=640)))
    lines = text.split("\n")
    assert lines[0] == "device_id: cam"
    assert lines[1] == "video:"
    assert lines[2] == "  width: 640"
    assert "  latency: 0s" in lines
    assert "  is_float: False" in lines