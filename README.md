# mediakit

Building blocks for pull-based media pipelines in pure Python, with no
third-party dependencies.

## Install

```
pip install mediakit
pip install "mediakit[test]"   # with the test dependencies
```

## Readers

Everything in the package is built around `mediakit.reader.Reader`, which has
a single method `read()`. Each call returns the next item. If the source
fails, `read()` raises and returns nothing. `ReaderFunc(func)` turns any
callable that takes no arguments into a reader.

`InsufficientBufferError(required_size)` is the error for a buffer too small
to hold a sample. It keeps the required size in `required_size`.

## Broadcasting

`mediakit.broadcaster.Broadcaster(source, config=None)` shares one source
among any number of readers:

- `new_reader(copy_fn=None)` creates a reader. Readers can be created and
  dropped at any time. They do not need to be closed.
- Only one reader pulls from the source at a time. The others receive the
  same item from a ring of recent entries. A reader that falls far behind
  skips forward to the oldest item still kept.
- When the source raises, every reader that shares that item gets the same
  exception.
- `copy_fn`, if given, is applied to each item before it is returned.
- `replace_source(source)` swaps the source. It raises `ValueError` for
  `None`. `source()` returns the current source.

`BroadcasterConfig(buffer_size=32, poll_duration=0.033)` sets the ring size
and the longest wait, in seconds, between checks for new data. A zero value
means the default is used.

## Constraints and media properties

`mediakit.constraints` holds constraints on booleans, strings and frame
formats:

- `BoolExact`, `Bool`
- `String`, `StringExact`, `StringOneOf`
- `FrameFormat`, `FrameFormatExact`, `FrameFormatOneOf`

`mediakit.numeric` holds constraints on numbers and durations:

- `Int`, `IntExact`, `IntOneOf`, `IntRanged`
- `Float`, `FloatExact`, `FloatOneOf`, `FloatRanged`
- `Duration`, `DurationExact`, `DurationOneOf`, `DurationRanged`

Durations are `datetime.timedelta` values. `format_duration` renders a
duration compactly, for example `20ms`, `1.5s` or `1h2m3s`.

Every constraint has two methods:

- `compare(actual)` returns a `Fitness(distance, satisfied)` tuple.
- `preferred()` returns the single value the constraint asks for. It returns
  `None` for one-of and ranged constraints.

The ranged constraints take `minimum`, `maximum` and `ideal`. A zero in any of
them means it is not specified.

`mediakit.media` has these types:

- `Media`, with `device_id`, `video: Video` and `audio: Audio`.
- `MediaConstraints`, with `device_id`, `video: VideoConstraints` and
  `audio: AudioConstraints`. A constraint left as `None` means any value is
  allowed.

`MediaConstraints.fitness_distance(media)` adds up the distances of every
constraint that is set. It returns `Fitness(0.0, False)` as soon as one
constraint rejects its property. The frame rate is only compared when the
media reports a positive one.

`Media` can be merged in two ways:

- `Media.merge(other)` copies every non-zero property of `other`. Booleans
  are always copied.
- `Media.merge_constraints(constraints)` copies the preferred value of each
  constraint that has one.

`str()` of either type gives an indented listing of its properties.

```python
from mediakit.media import Media, MediaConstraints, Video, VideoConstraints
from mediakit.numeric import IntRanged

wanted = MediaConstraints(video=VideoConstraints(width=IntRanged(minimum=30, maximum=40)))
distance, fits = wanted.fitness_distance(Media(video=Video(width=35)))
assert fits
```

## Video

`mediakit.video.images` has in-memory image types:

- Packed types: `Gray`, `Gray16`, `Alpha`, `Alpha16`, `CMYK`, `NRGBA`,
  `NRGBA64`, `RGBA`, `RGBA64`. Each has `pix`, `stride` and `rect` fields.
- Planar types: `YCbCr` and `NYCbCrA`, with a `SubsampleRatio`.
- `Rectangle`, with `dx()` and `dy()`.
- Constructors: `new_gray`, `new_rgba`, `new_ycbcr`, `new_nycbcra`.
- Colour functions: `rgb_to_ycbcr` and `ycbcr_to_rgb`.

Every image type has `rgba_at(x, y)`, which returns 16-bit premultiplied
values.

A transform is a function that takes a reader and returns a new reader.
Transforms can be chained with `mediakit.video.transform.merge(*transforms)`,
which skips `None` entries. The transforms are:

- `mediakit.video.convert.to_i420(reader)` yields 4:2:0 `YCbCr` frames. It
  accepts 4:4:4, 4:2:2 and 4:2:0 input, and converts other image types
  through 4:4:4. Other subsampling ratios raise `ValueError`.
  `image_to_ycbcr` and `image_to_rgba` convert single images.
- `mediakit.video.convert.to_rgba(reader)` yields `RGBA` frames.
- `mediakit.video.scale.scale(width, height, scaler=None)` resizes `RGBA`
  and `YCbCr` frames with `NearestNeighborScaler`.
  - A non-positive width or height keeps the aspect ratio of each frame.
    Both non-positive raises `ValueError`.
  - Any other image type raises `TypeError`.
- `mediakit.video.throttle.throttle(rate)` drops frames so that at most
  `rate` per second pass. A non-positive rate raises `ValueError`.
- `mediakit.video.detect.detect_changes(interval, fps_diff_tolerance, on_change)`
  calls `on_change` with a copy of the `Media` properties when any of these
  change:
  - the frame width;
  - the frame height;
  - the frame rate, measured over `interval`, by more than
    `fps_diff_tolerance`.

  `interval` is a timedelta or a number of seconds.

Two more pieces support sharing frames:

- `mediakit.video.framebuffer.FrameBuffer` stores a private copy of a frame
  with `store_copy(src)` and returns it with `load()`. Image types it does
  not know are stored as `RGBA`.
- `mediakit.video.broadcast.VideoBroadcaster(source, config=None)` wraps
  `Broadcaster` for frames. `new_reader(copy_frame)` gives each reader either
  the shared frame or its own copy.

```python
from mediakit.reader import ReaderFunc
from mediakit.video.convert import to_i420
from mediakit.video.images import Rectangle, new_rgba
from mediakit.video.scale import scale
from mediakit.video.transform import merge

source = ReaderFunc(lambda: new_rgba(Rectangle(0, 0, 1280, 720)))
pipeline = merge(scale(640, 360), to_i420)
frame = pipeline(source).read()
assert (frame.rect.dx(), frame.rect.dy()) == (640, 360)
```

## What it does not do

The package does not open cameras, microphones or screens. It has no audio
transforms and no encoders. It ships no command-line program. Frames must
come from a reader you supply.

## Tests

```
pytest
```