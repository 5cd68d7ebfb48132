from streaming_zip_reader.zip.inflate import InflatingReader
from streaming_zip_reader.zip.substream import SubStream
from streaming_zip_reader.zip.zip_utils import LocalFileHeader, parse_local_file_header, parse_zip64_extra_field

__all__ = [
    "InflatingReader",
    "LocalFileHeader",
    "SubStream",
    "parse_local_file_header",
    "parse_zip64_extra_field",
]
