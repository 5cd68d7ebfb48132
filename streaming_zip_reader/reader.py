from __future__ import annotations

import logging

from scrapy.settings import Settings
from typing_extensions import IO, Generator, Self, Union

from streaming_zip_reader.constants import BUFF_SIZE, LOCAL_FILE_HEADER_SIZE
from streaming_zip_reader.exceptions import BadZipStreamError, InvalidReaderStateError, UnsupportedZipFeatureError
from streaming_zip_reader.models import StreamingZipEntry
from streaming_zip_reader.utils import is_readable, is_seekable, read_block, skip_bytes
from streaming_zip_reader.zip.inflate import InflatingReader
from streaming_zip_reader.zip.substream import SubStream
from streaming_zip_reader.zip.zip_utils import is_central_directory, parse_local_file_header

logger = logging.getLogger(__name__)


class StreamingZipReader:
    """
    Reads a ZIP archive front to back from a stream that does not need to be seekable.

    Entries are visited one at a time with `move_to_next_entry`, using only the local file headers;
    the central directory is never read. The stream is owned by the reader and closed together with
    it, unless `leave_open` is set.

    Entries flagged with a data descriptor are exposed with zero sizes and can be decompressed, but
    the reader can not move past them since the length of their data is unknown.
    """

    def __init__(
        self,
        stream: IO[bytes],
        leave_open: bool = False,
        skip_directories: bool = True,
        skip_buffer_size: int = BUFF_SIZE,
        read_chunk_size: int = BUFF_SIZE,
    ) -> None:
        if not is_readable(stream):
            raise ValueError("The stream must be readable")

        self.leave_open = leave_open
        self.skip_directories = skip_directories
        self.skip_buffer_size = skip_buffer_size
        self.read_chunk_size = read_chunk_size
        self._stream: Union[IO[bytes], None] = stream
        self._current_entry: Union[StreamingZipEntry, None] = None
        self._current_substream: Union[SubStream, None] = None
        self._current_entry_stream: Union[InflatingReader, None] = None
        self._skip_buffer: Union[bytearray, None] = None
        self._closed = False
        self._failed = False

    @classmethod
    def from_settings(cls, stream: IO[bytes], settings: Settings) -> Self:
        return cls(
            stream,
            leave_open=settings.getbool("ZIPSTREAM_LEAVE_OPEN"),
            skip_directories=settings.getbool("ZIPSTREAM_SKIP_DIRECTORIES", True),
            skip_buffer_size=settings.getint("ZIPSTREAM_SKIP_BUFFER_SIZE", BUFF_SIZE),
            read_chunk_size=settings.getint("ZIPSTREAM_READ_CHUNK_SIZE", BUFF_SIZE),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def current_entry(self) -> StreamingZipEntry:
        """The entry the reader is positioned on."""

        if self._current_entry is None:
            raise InvalidReaderStateError("current_entry can only be used after move_to_next_entry returns True")

        return self._current_entry

    def move_to_next_entry(self, skip_directories: bool = True) -> bool:
        """
        Position the reader on the next entry of the archive.

        Unread data of the current entry is skipped first. Returns False once the central directory
        or the end of the stream is reached. Any stream previously returned by `open_current_entry`
        stops working.

        A call that raises (a malformed archive, a failing stream or an interrupt) leaves the reader
        unusable, as its position in the stream is then unknown.
        """

        if self._closed:
            raise InvalidReaderStateError("The reader is closed")

        if self._failed:
            raise InvalidReaderStateError("The reader can not be used after a previous failure")

        if self._stream is None:
            return False

        try:
            return self._move_to_next_entry(self._stream, skip_directories)
        except BaseException:
            self._failed = True
            self._current_entry = None
            raise

    def _move_to_next_entry(self, stream: IO[bytes], skip_directories: bool) -> bool:
        self._skip_bytes(stream, self._release_current_entry())

        while True:
            header_bytes = read_block(stream, LOCAL_FILE_HEADER_SIZE)

            if not header_bytes:
                logger.debug("Reached the end of the stream")
                self._finish()
                return False

            if len(header_bytes) < LOCAL_FILE_HEADER_SIZE:
                raise BadZipStreamError(
                    "The stream ended unexpectedly or is not a ZIP archive having no bytes around file entries"
                )

            if is_central_directory(header_bytes):
                logger.debug("Reached the central directory")
                self._finish()
                return False

            header = parse_local_file_header(header_bytes)
            variable_part = read_block(stream, header.variable_length)

            if len(variable_part) < header.variable_length:
                raise BadZipStreamError("The stream ended unexpectedly")

            file_name = variable_part[:header.file_name_length]

            if skip_directories and header.compressed_size == 0 and file_name.endswith(b"/"):
                logger.debug(f"Skipping directory entry {file_name!r}")
                continue

            compressed_size, uncompressed_size = header.resolve_sizes(variable_part[header.file_name_length:])
            self._current_entry = StreamingZipEntry(
                name=file_name.decode("ascii", errors="replace"),
                crc32=header.crc32,
                compressed_length=compressed_size,
                uncompressed_length=uncompressed_size,
                has_deferred_sizes=header.has_data_descriptor,
            )
            logger.debug(f"Found entry {self._current_entry}")
            return True

    def _release_current_entry(self) -> int:
        """Detach the stream of the current entry and return the number of its bytes left unread."""

        entry = self._current_entry
        substream = self._current_substream
        self._current_entry = None
        self._current_substream = None
        self._current_entry_stream = None

        if substream is not None:
            substream.detach()
            remaining = substream.remaining
        elif entry is not None:
            remaining = None if entry.has_deferred_sizes else entry.compressed_length
        else:
            remaining = 0

        if remaining is None:
            raise UnsupportedZipFeatureError("Moving past an entry with a data descriptor is not supported")

        return remaining

    def _skip_bytes(self, stream: IO[bytes], count: int) -> None:
        if count == 0:
            return

        # The scratch buffer is kept between entries and only grows up to skip_buffer_size.
        size = min(count, self.skip_buffer_size)
        if not is_seekable(stream) and (self._skip_buffer is None or len(self._skip_buffer) < size):
            self._skip_buffer = bytearray(size)

        skip_bytes(stream, count, self._skip_buffer)

    def _finish(self) -> None:
        """Stop reading: nothing follows the central directory that this reader understands."""

        stream = self._stream
        self._stream = None
        self._current_entry = None
        self._skip_buffer = None

        self._release_stream(stream)

    def _release_stream(self, stream: Union[IO[bytes], None]) -> None:
        if stream is None or self.leave_open:
            return

        close = getattr(stream, "close", None)
        if callable(close):
            close()

    def open_current_entry(self) -> InflatingReader:
        """
        Return a stream with the decompressed data of the current entry.

        Calling this again for the same entry returns the same stream. The stream can only be read
        until `move_to_next_entry` is called.
        """

        entry = self.current_entry
        assert self._stream is not None

        if self._current_entry_stream is None:
            length = None if entry.has_deferred_sizes else entry.compressed_length
            self._current_substream = SubStream(self._stream, length)
            self._current_entry_stream = InflatingReader(self._current_substream, chunk_size=self.read_chunk_size)

        return self._current_entry_stream

    def iter_entries(self, skip_directories: Union[bool, None] = None) -> Generator[StreamingZipEntry, None, None]:
        """
        Iterates over the remaining entries. The reader is positioned on each entry as it is yielded.

        Directories are filtered according to `self.skip_directories` unless `skip_directories` is given.
        """

        if skip_directories is None:
            skip_directories = self.skip_directories

        while self.move_to_next_entry(skip_directories):
            yield self.current_entry

    def __iter__(self) -> Generator[StreamingZipEntry, None, None]:
        return self.iter_entries()

    def close(self) -> None:
        if self._closed:
            return

        if self._current_substream is not None:
            self._current_substream.detach()

        stream = self._stream
        self._stream = None
        self._current_entry = None
        self._current_substream = None
        self._current_entry_stream = None
        self._closed = True

        self._release_stream(stream)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
