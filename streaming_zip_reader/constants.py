LOCAL_FILE_HEADER_SIGNATURE = b"\x50\x4B\x03\x04"
CD_HEADER_SIGNATURE = b"\x50\x4B\x01\x02"
ZIP64_EXTRA_FIELD_TAG = b"\x01\x00"

LOCAL_FILE_HEADER_SIZE = 30
ZIP64_EXTRA_FIELD_HEADER_SIZE = 4

# Highest "version needed to extract" that has been tested (4.5).
MAX_SUPPORTED_VERSION = 45

ZIP64_LIMIT = 0xFFFFFFFF
DEFLATE_METHOD = 8
DATA_DESCRIPTOR_FLAG = 0x0008

BUFF_SIZE = 1024 * 64
