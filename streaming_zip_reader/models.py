from dataclasses import dataclass


@dataclass(frozen=True)
class StreamingZipEntry:
    """
    Describes the entry the reader is currently positioned on.

    Attributes:
        name (str): The file name, decoded as ASCII.
        crc32 (int): The stored CRC-32. It is not verified while reading.
        compressed_length (int): Size of the compressed data in the archive.
        uncompressed_length (int): Size of the data once decompressed.
        has_deferred_sizes (bool): The local header has the "data descriptor" flag set. The crc32 and
            the two lengths are then zero, as the real values follow the compressed data.
    """
    name: str
    crc32: int
    compressed_length: int
    uncompressed_length: int
    has_deferred_sizes: bool = False

    @property
    def is_directory(self) -> bool:
        return self.name.endswith("/")

    def __repr__(self):
        return f"StreamingZipEntry(name={self.name!r}, length={self.uncompressed_length})"
