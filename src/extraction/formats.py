import posixpath

from .config import FileType
from .errors import UnsupportedFormatError

# .tar.gz must be matched before .gz
_SUFFIXES = (
    (".tar.gz", FileType.TAR_GZIP),
    (".gz", FileType.GZIP),
    (".zip", FileType.ZIP),
)


def detect_file_type(key: str) -> FileType:
    """Pick the extraction engine from the source key suffix (case-insensitive)."""
    lowered = key.lower()
    for suffix, file_type in _SUFFIXES:
        if lowered.endswith(suffix):
            return file_type
    raise UnsupportedFormatError(posixpath.splitext(key)[1])


def strip_gz_suffix(key: str) -> str:
    """Member name for a single-file gzip source: basename without .gz."""
    name = posixpath.basename(key)
    if name.lower().endswith(".gz"):
        name = name[:-3]
    return name
