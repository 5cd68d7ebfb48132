from __future__ import annotations

import io
import zlib

from streaming_zip_reader.constants import BUFF_SIZE
from streaming_zip_reader.exceptions import BadZipStreamError
from streaming_zip_reader.zip.substream import SubStream


class InflatingReader(io.RawIOBase):
    """
    Lazily decompresses the raw deflate data of a single entry.

    Compressed bytes are pulled from the `SubStream` in chunks of at most `chunk_size` bytes and
    decompressed output is handed out in pieces no larger than the buffer the caller asked for. The
    reader ends at the deflate end-of-stream marker or when the sub-stream runs dry.
    """

    def __init__(self, substream: SubStream, chunk_size: int = BUFF_SIZE):
        super().__init__()
        self.substream = substream
        self.chunk_size = chunk_size
        self._decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
        self._pending = b""
        self._eof = False

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        # Buffered output belongs to this entry too, but a stale handle must fail regardless.
        self.substream.ensure_attached()

        with memoryview(b) as view, view.cast("B") as byte_view:
            if len(byte_view) == 0:
                return 0

            while not self._pending and not self._eof:
                self._fill(len(byte_view))

            byte_count = min(len(byte_view), len(self._pending))
            byte_view[:byte_count] = self._pending[:byte_count]

        self._pending = self._pending[byte_count:]
        return byte_count

    def _fill(self, max_length: int) -> None:
        data = self._decompressor.unconsumed_tail

        if not data:
            data = self.substream.read(self.chunk_size)

            if not data:
                self._eof = True
                self._pending = self._decompressor.flush()

                # An empty entry has no deflate data at all, anything else must reach its end marker.
                if not self._decompressor.eof and self.substream.position > 0:
                    raise BadZipStreamError("The deflate data of the entry ended unexpectedly")
                return

        try:
            self._pending = self._decompressor.decompress(data, max(max_length, self.chunk_size))
        except zlib.error as e:
            raise BadZipStreamError(f"Invalid deflate data: {e}") from e

        if self._decompressor.eof:
            self._eof = True

    def close(self) -> None:
        # The shared stream is owned by the reader, only the view on it is dropped.
        self.substream.detach()
        super().close()
