from __future__ import annotations

import io

from typing_extensions import IO, Union

from streaming_zip_reader.exceptions import DetachedStreamError


class SubStream(io.RawIOBase):
    """
    Read-only view on the next `length` bytes of a shared stream.

    The view never reads past its own end, even when the shared stream has more data (those bytes
    belong to the next entry). A `length` of None means unbounded: reads go on until the shared
    stream is exhausted. Once detached, every read raises `DetachedStreamError`.
    """

    def __init__(self, stream: IO[bytes], length: Union[int, None]):
        super().__init__()
        self._stream: Union[IO[bytes], None] = stream
        self._length = length
        self._position = 0

    @property
    def length(self) -> Union[int, None]:
        return self._length

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> Union[int, None]:
        """Bytes left before the end of the view, or None when unbounded."""

        if self._length is None:
            return None

        return self._length - self._position

    @property
    def detached(self) -> bool:
        return self._stream is None

    def detach(self) -> None:
        """Drop the reference to the shared stream. The view can not be read afterwards."""

        self._stream = None

    def ensure_attached(self) -> None:
        if self._stream is None:
            raise DetachedStreamError(
                "A stream returned from StreamingZipReader.open_current_entry may not be used after "
                "calling StreamingZipReader.move_to_next_entry again"
            )

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def writable(self) -> bool:
        return False

    def readinto(self, b) -> int:
        self.ensure_attached()
        assert self._stream is not None

        with memoryview(b) as view, view.cast("B") as byte_view:
            size = len(byte_view)
            remaining = self.remaining

            if remaining == 0:
                # The end of this entry, the shared stream goes on with the next one.
                return 0

            if remaining is not None:
                size = min(size, remaining)

            if size == 0:
                return 0

            data = self._stream.read(size)
            byte_count = len(data)
            byte_view[:byte_count] = data

        self._position += byte_count
        return byte_count

    def tell(self) -> int:
        return self._position

    def seek(self, offset, whence=io.SEEK_SET):
        raise io.UnsupportedOperation("seek")

    def truncate(self, size=None):
        raise io.UnsupportedOperation("truncate")

    def write(self, b):
        raise io.UnsupportedOperation("write")

    def close(self) -> None:
        self.detach()
        super().close()
