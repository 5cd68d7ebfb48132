class ZipStreamError(Exception):
    """Base class for errors raised while reading a ZIP stream."""

    pass


class BadZipStreamError(ZipStreamError, ValueError):
    """The input is not a valid instance of the supported ZIP subset (bad signature, truncated data)."""

    pass


class UnsupportedZipFeatureError(ZipStreamError):
    """The archive uses a feature outside the accepted subset (version, flags, compression method)."""

    pass


class InvalidReaderStateError(ZipStreamError, RuntimeError):
    """The reader was used in a state that does not allow the requested operation."""

    pass


class DetachedStreamError(InvalidReaderStateError):
    """An entry stream was read after the reader moved on to the next entry."""

    pass
