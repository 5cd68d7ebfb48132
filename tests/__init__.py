import io
import struct
import zipfile
import zlib

from typing_extensions import Iterable, Tuple

CENTRAL_DIRECTORY = b"\x50\x4B\x01\x02" + b"\x00" * 42


def deflate(data: bytes) -> bytes:
    """Compress data to a raw deflate stream, as stored inside ZIP archives."""

    compressor = zlib.compressobj(zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def local_file_header(
    name: bytes,
    compressed_size: int = 0,
    uncompressed_size: int = 0,
    extra: bytes = b"",
    version: int = 20,
    flags: int = 0,
    method: int = 8,
    crc32: int = 0,
) -> bytes:
    return (
        b"\x50\x4B\x03\x04"                                  # Local file header signature
        + struct.pack("<H", version)                         # Version needed to extract
        + struct.pack("<H", flags)                           # General purpose bit flag
        + struct.pack("<H", method)                          # Compression method
        + b"\x00\x00\x00\x00"                                # File modification time and date
        + struct.pack("<I", crc32)                           # CRC-32
        + struct.pack("<I", compressed_size)                 # Compressed size
        + struct.pack("<I", uncompressed_size)               # Uncompressed size
        + struct.pack("<HH", len(name), len(extra))          # Filename and extra field length
        + name
        + extra
    )


def zip64_extra_field(uncompressed_size: int, compressed_size: int) -> bytes:
    return struct.pack("<HHQQ", 0x0001, 16, uncompressed_size, compressed_size)


def build_zip(entries: Iterable[Tuple[str, bytes]], force_zip64: bool = False) -> bytes:
    """Create an archive with the standard library; names ending with a slash become directories."""

    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
        for name, data in entries:
            if name.endswith("/"):
                zip_file.writestr(zipfile.ZipInfo(name), b"")
            else:
                with zip_file.open(name, "w", force_zip64=force_zip64) as fh:
                    fh.write(data)

    return buffer.getvalue()


class NonSeekableStream(io.RawIOBase):
    """Hands out at most `max_read` bytes per read and can not seek, like a pipe or a socket."""

    def __init__(self, data: bytes, max_read: int = 7):
        super().__init__()
        self._data = io.BytesIO(data)
        self.max_read = max_read

    @property
    def position(self) -> int:
        return self._data.tell()

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        data = self._data.read(min(len(b), self.max_read))
        b[:len(data)] = data
        return len(data)
