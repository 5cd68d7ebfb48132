from __future__ import annotations

import logging
from functools import partial

from scrapy.settings import Settings
from smart_open import open as smart_open
from typing_extensions import Any, Dict, Union

from streaming_zip_reader.reader import StreamingZipReader
from streaming_zip_reader.settings import get_settings
from streaming_zip_reader.utils import add_ftp_credentials, get_gcs_client, get_s3_client, get_scheme_from_uri

logger = logging.getLogger(__name__)


def get_transport_params(uri: str, settings: Settings) -> Dict[str, Any]:
    """Build the smart_open transport parameters for the scheme of the given URI."""

    tp: Dict[str, Any] = {"timeout": settings.getfloat("ZIPSTREAM_OPEN_TIMEOUT")}
    scheme = get_scheme_from_uri(uri)

    # Map schemes to client creation functions
    scheme_client_map = {
        "s3": partial(get_s3_client, settings),
        "gs": partial(get_gcs_client, settings),
    }

    if scheme in scheme_client_map:
        tp["client"] = scheme_client_map[scheme]()

    return tp


def open_zip_stream(uri: str, settings: Union[Settings, Dict[str, Any], None] = None) -> StreamingZipReader:
    """
    Open a ZIP archive for streaming from a local path or a remote location (S3, GCS, FTP, HTTP).

    The returned reader owns the opened stream, closing the reader closes the stream.
    """

    settings = get_settings(settings)
    logger.debug(f"Opening ZIP stream for {uri}")

    if get_scheme_from_uri(uri) == "ftp":
        uri = add_ftp_credentials(uri, settings)

    tp = get_transport_params(uri, settings)

    stream = smart_open(uri, "rb", transport_params=tp)
    return StreamingZipReader.from_settings(stream, settings)
