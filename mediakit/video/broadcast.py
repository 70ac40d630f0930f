"""Broadcasting of video frames to many independent readers."""

from __future__ import annotations

from typing import Any, Optional

from mediakit.broadcaster import Broadcaster, BroadcasterConfig
from mediakit.reader import Reader
from mediakit.video.framebuffer import FrameBuffer


class VideoBroadcaster:
    """Shares one video source among readers that may come and go at any time.

    The source is expected to drop frames when a reader is slower than it.
    """

    def __init__(
        self, source: Reader, config: Optional[BroadcasterConfig] = None
    ) -> None:
        self._core = Broadcaster(source, config)

    def new_reader(self, copy_frame: bool) -> Reader:
        """Create a reader of the shared frames.

        With ``copy_frame`` each frame is copied into the reader's own buffer;
        otherwise every reader gets the very frame the source produced.
        """
        if not copy_frame:
            return self._core.new_reader()

        buffer = FrameBuffer(0)

        def copy(frame: Any) -> Any:
            buffer.store_copy(frame)
            return buffer.load()

        return self._core.new_reader(copy)

    def replace_source(self, source: Reader) -> None:
        """Swap the underlying source; safe to call while readers run."""
        self._core.replace_source(source)

    def source(self) -> Reader:
        """Return the underlying source."""
        return self._core.source()