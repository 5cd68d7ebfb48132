import io

import pytest

from streaming_zip_reader.exceptions import BadZipStreamError, DetachedStreamError
from streaming_zip_reader.zip.inflate import InflatingReader
from streaming_zip_reader.zip.substream import SubStream

from .. import NonSeekableStream, deflate


def _reader(data: bytes, length=None, chunk_size: int = 16) -> InflatingReader:
    return InflatingReader(SubStream(io.BytesIO(data), len(data) if length is None else length), chunk_size)


def test_inflate_all(text_content):
    assert _reader(deflate(text_content)).read() == text_content


def test_inflate_in_small_pieces(text_content):
    reader = _reader(deflate(text_content))

    pieces = []
    for piece in iter(lambda: reader.read(5), b""):
        assert len(piece) <= 5
        pieces.append(piece)

    assert b"".join(pieces) == text_content


def test_inflate_from_short_reads(text_content):
    compressed = deflate(text_content)
    substream = SubStream(NonSeekableStream(compressed, max_read=3), len(compressed))

    assert InflatingReader(substream, chunk_size=64).read() == text_content


def test_inflate_stops_at_end_marker():
    compressed = deflate(b"payload")
    source = io.BytesIO(compressed + b"NEXT ENTRY")
    reader = InflatingReader(SubStream(source, None), chunk_size=len(compressed))

    assert reader.read() == b"payload"


def test_inflate_ignores_padding_inside_bound():
    compressed = deflate(b"payload") + b"\x00" * 5

    assert _reader(compressed).read() == b"payload"


def test_inflate_empty_entry():
    assert _reader(b"").read() == b""


def test_inflate_truncated_data(text_content):
    compressed = deflate(text_content)

    with pytest.raises(BadZipStreamError, match="ended unexpectedly"):
        _reader(compressed[:len(compressed) // 2]).read()


def test_inflate_invalid_data():
    with pytest.raises(BadZipStreamError, match="Invalid deflate data"):
        _reader(b"\xff" * 10).read()


def test_inflate_read_zero_bytes(text_content):
    assert _reader(deflate(text_content)).read(0) == b""


def test_inflate_detached_with_pending_output(text_content):
    reader = _reader(deflate(text_content), chunk_size=1024)
    assert reader.read(1) == text_content[:1]

    reader.substream.detach()

    with pytest.raises(DetachedStreamError):
        reader.read(1)


def test_inflate_close_keeps_source_open():
    source = io.BytesIO(deflate(b"payload"))
    reader = InflatingReader(SubStream(source, None))

    reader.close()

    assert reader.substream.detached
    assert not source.closed
