"""
Default settings of the streaming ZIP reader.

Storage credentials are not defined here, the AWS_*, GCS_PROJECT_ID, FTP_USER and FTP_PASSWORD
settings that Scrapy already provides are used as-is.
"""
from __future__ import annotations

import sys

from scrapy.settings import Settings
from typing_extensions import Any, Dict, Union

from streaming_zip_reader import constants

ZIPSTREAM_SKIP_DIRECTORIES = True
ZIPSTREAM_LEAVE_OPEN = False
ZIPSTREAM_SKIP_BUFFER_SIZE = constants.BUFF_SIZE
ZIPSTREAM_READ_CHUNK_SIZE = constants.BUFF_SIZE
ZIPSTREAM_OPEN_TIMEOUT = 60


def get_settings(values: Union[Dict[str, Any], Settings, None] = None) -> Settings:
    """Return Scrapy settings holding the reader defaults, overridden by `values`."""

    settings = Settings()
    settings.setmodule(sys.modules[__name__], priority="default")

    if values:
        settings.update(values, priority="project")

    return settings
