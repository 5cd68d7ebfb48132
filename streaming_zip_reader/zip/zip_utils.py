from __future__ import annotations

import struct
from dataclasses import dataclass

from typing_extensions import Tuple, Union

from streaming_zip_reader.constants import (
    CD_HEADER_SIGNATURE,
    DATA_DESCRIPTOR_FLAG,
    DEFLATE_METHOD,
    LOCAL_FILE_HEADER_SIGNATURE,
    LOCAL_FILE_HEADER_SIZE,
    MAX_SUPPORTED_VERSION,
    ZIP64_EXTRA_FIELD_HEADER_SIZE,
    ZIP64_EXTRA_FIELD_TAG,
    ZIP64_LIMIT,
)
from streaming_zip_reader.exceptions import BadZipStreamError, UnsupportedZipFeatureError


@dataclass(frozen=True)
class LocalFileHeader:
    """
    The fixed part of a local file header.

    `compressed_size` and `uncompressed_size` are None when the header carries the ZIP64 sentinel,
    in which case both values live in the ZIP64 extra field that follows the file name.
    """
    crc32: int
    compressed_size: Union[int, None]
    uncompressed_size: Union[int, None]
    file_name_length: int
    extra_field_length: int
    has_data_descriptor: bool = False

    @property
    def is_zip64(self) -> bool:
        return self.compressed_size is None

    @property
    def variable_length(self) -> int:
        """Number of bytes (file name and extra field) between the fixed header and the data."""

        return self.file_name_length + self.extra_field_length

    def resolve_sizes(self, extra_field: bytes) -> Tuple[int, int]:
        """Return the final (compressed, uncompressed) sizes, reading the ZIP64 extra field if needed."""

        if self.compressed_size is None or self.uncompressed_size is None:
            return parse_zip64_extra_field(extra_field)

        return self.compressed_size, self.uncompressed_size


def is_local_file_header(data: bytes) -> bool:
    return data[:4] == LOCAL_FILE_HEADER_SIGNATURE


def is_central_directory(data: bytes) -> bool:
    return data[:4] == CD_HEADER_SIGNATURE


def parse_local_file_header(data: bytes) -> LocalFileHeader:
    """Parse the 30 byte fixed part of a local file header."""

    if len(data) < LOCAL_FILE_HEADER_SIZE:
        raise BadZipStreamError("The stream ended unexpectedly")

    if not is_local_file_header(data):
        raise BadZipStreamError("The stream is not a ZIP archive having no bytes around file entries")

    version, flags, compression_method = struct.unpack("<HHH", data[4:10])

    if version > MAX_SUPPORTED_VERSION:
        raise UnsupportedZipFeatureError(f"ZIP format version {version / 10} is newer than 4.5")

    # Bit 3 means crc-32 and both sizes are zero here and follow the compressed data instead.
    if flags not in (0, DATA_DESCRIPTOR_FLAG):
        raise UnsupportedZipFeatureError(f"Unsupported general purpose flags: {flags:#06x}")

    # data[10:14] holds the last modification time and date, which are not used.
    crc32, compressed_size, uncompressed_size = struct.unpack("<III", data[14:26])
    file_name_length, extra_field_length = struct.unpack("<HH", data[26:30])

    if compressed_size > 0 and compression_method != DEFLATE_METHOD:
        raise UnsupportedZipFeatureError(f"Unsupported compression method: {compression_method}")

    if compressed_size == ZIP64_LIMIT:
        return LocalFileHeader(
            crc32=crc32,
            compressed_size=None,
            uncompressed_size=None,
            file_name_length=file_name_length,
            extra_field_length=extra_field_length,
            has_data_descriptor=flags == DATA_DESCRIPTOR_FLAG,
        )

    return LocalFileHeader(
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        file_name_length=file_name_length,
        extra_field_length=extra_field_length,
        has_data_descriptor=flags == DATA_DESCRIPTOR_FLAG,
    )


def parse_zip64_extra_field(extra_field: bytes) -> Tuple[int, int]:
    """
    Read the 64-bit sizes from the ZIP64 extra field of a local file header.

    The record holds the uncompressed size first and the compressed size second.
    Returns (compressed_size, uncompressed_size).
    """

    tag_offset = extra_field.find(ZIP64_EXTRA_FIELD_TAG)

    if tag_offset == -1:
        raise BadZipStreamError("ZIP64 file without extra field not supported")

    start = tag_offset + ZIP64_EXTRA_FIELD_HEADER_SIZE
    sizes = extra_field[start:start + 16]

    if len(sizes) < 16:
        raise BadZipStreamError("ZIP64 extra field is truncated")

    uncompressed_size, compressed_size = struct.unpack("<QQ", sizes)
    return compressed_size, uncompressed_size
