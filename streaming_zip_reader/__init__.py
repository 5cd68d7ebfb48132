from streaming_zip_reader.exceptions import (
    BadZipStreamError,
    DetachedStreamError,
    InvalidReaderStateError,
    UnsupportedZipFeatureError,
    ZipStreamError,
)
from streaming_zip_reader.models import StreamingZipEntry
from streaming_zip_reader.reader import StreamingZipReader
from streaming_zip_reader.settings import get_settings
from streaming_zip_reader.sources import open_zip_stream

__version__ = "0.1.0"

__all__ = [
    "BadZipStreamError",
    "DetachedStreamError",
    "InvalidReaderStateError",
    "StreamingZipEntry",
    "StreamingZipReader",
    "UnsupportedZipFeatureError",
    "ZipStreamError",
    "get_settings",
    "open_zip_stream",
]
