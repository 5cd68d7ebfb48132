from __future__ import annotations

import io
import logging
from pathlib import Path
from urllib.parse import quote, urlparse, urlunparse

from scrapy.exceptions import NotConfigured
from scrapy.settings import Settings
from scrapy.utils.boto import is_botocore_available
from typing_extensions import IO, Union

from streaming_zip_reader.constants import BUFF_SIZE
from streaming_zip_reader.exceptions import BadZipStreamError

logger = logging.getLogger(__name__)


def is_readable(stream: IO) -> bool:
    if not callable(getattr(stream, "read", None)):
        return False

    readable = getattr(stream, "readable", None)
    return readable() if callable(readable) else True


def is_seekable(stream: IO) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable()) if callable(seekable) else False


def read_block(stream: IO[bytes], size: int) -> bytes:
    """
    Read `size` bytes, retrying on short reads until they are all there or the stream ends.

    Fewer bytes than requested are only returned when the stream is exhausted.
    """

    chunks = []
    remaining = size

    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break

        chunks.append(chunk)
        remaining -= len(chunk)

    return b"".join(chunks)


def skip_bytes(stream: IO[bytes], count: int, buffer: Union[bytearray, None] = None) -> None:
    """
    Move `count` bytes forward in the stream.

    Seeks when the stream supports it, otherwise the bytes are read into `buffer` (a scratch buffer
    reused between calls) and thrown away.

    Only the non-seekable path can tell that the stream ended early and raises `BadZipStreamError`.
    A seek past the end of a seekable stream succeeds, and the next read there returns no bytes.
    """

    if count <= 0:
        return

    if is_seekable(stream):
        logger.debug(f"Seeking {count} bytes forward")
        stream.seek(count, io.SEEK_CUR)
        return

    logger.debug(f"Discarding {count} bytes from a non-seekable stream")

    if buffer is None:
        buffer = bytearray(min(count, BUFF_SIZE))

    with memoryview(buffer) as view:
        remaining = count
        while remaining > 0:
            size = min(remaining, len(view))
            data = stream.read(size)

            if not data:
                raise BadZipStreamError("The stream ended unexpectedly")

            view[:len(data)] = data
            remaining -= len(data)


def get_scheme_from_uri(uri: str) -> str:
    if Path(uri).is_absolute():  # to support win32 paths like: C:\\some\dir.
        return "file"
    else:
        return urlparse(uri).scheme


def add_ftp_credentials(uri: str, settings: Settings) -> str:
    """Add the FTP_USER and FTP_PASSWORD settings to an ftp:// URI that carries no credentials."""

    parsed = urlparse(uri)

    if parsed.username or not settings.get("FTP_USER"):
        return uri

    credentials = quote(settings["FTP_USER"], safe="")
    if settings.get("FTP_PASSWORD"):
        credentials += ":" + quote(settings["FTP_PASSWORD"], safe="")

    return urlunparse(parsed._replace(netloc=f"{credentials}@{parsed.netloc}"))


def get_s3_client(settings: Settings):
    """Create a botocore S3 client configured by the AWS_* settings."""

    if not is_botocore_available():
        raise NotConfigured("missing botocore library")

    import botocore.session

    session = botocore.session.get_session()
    return session.create_client(
        "s3",
        aws_access_key_id=settings["AWS_ACCESS_KEY_ID"],
        aws_secret_access_key=settings["AWS_SECRET_ACCESS_KEY"],
        aws_session_token=settings["AWS_SESSION_TOKEN"],
        endpoint_url=settings["AWS_ENDPOINT_URL"],
        region_name=settings["AWS_REGION_NAME"],
        use_ssl=settings["AWS_USE_SSL"],
        verify=settings["AWS_VERIFY"],
    )


def get_gcs_client(settings: Settings):
    """Create a Google Cloud Storage client for the GCS_PROJECT_ID setting."""

    try:
        from google.cloud import storage
    except ImportError:
        raise NotConfigured("missing google-cloud-storage library")

    return storage.Client(project=settings["GCS_PROJECT_ID"])
