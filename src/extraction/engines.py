"""
Archive Engines
---------------
Pull-based decoders that turn a source byte stream into extracted content.

- iter_zip_members: zip central directory walk, one member at a time
- iter_gunzip: streaming gzip decoder yielding decompressed chunks
- iter_tar_gz_members: iter_gunzip feeding a streaming tar reader

Each stage only asks the stage below for more input when its consumer asks
it for more output, so nothing is read ahead of the uploader.
"""

import io
import logging
import tarfile
import zipfile
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from .errors import ArchiveDecodeError, DecompressionError

# Setup logger (compatible with both local and Lambda)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Zip decoding failures raised by zipfile while reading an entry
_ZIP_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)


@dataclass(frozen=True)
class ArchiveMember:
    """One entry extracted from an archive."""
    name: str
    content: bytes = b""
    is_directory: bool = False


# =============================================================================
# ZIP
# =============================================================================

def iter_zip_members(fileobj: BinaryIO) -> Iterator[ArchiveMember]:
    """
    Yield the members of a zip archive in central directory order.

    Args:
        fileobj: Seekable file containing the whole archive

    Raises:
        ArchiveDecodeError: If the archive or one of its entries is corrupt
    """
    try:
        archive = zipfile.ZipFile(fileobj)
    except _ZIP_ERRORS as e:
        raise ArchiveDecodeError(f"Invalid zip archive: {e}") from e

    with archive:
        for info in archive.infolist():
            logger.info(
                f"Processing entry: {info.filename} "
                f"({'Directory' if info.is_dir() else 'File'}) - Size: {info.file_size} bytes"
            )
            if info.is_dir():
                yield ArchiveMember(info.filename, is_directory=True)
                continue
            try:
                content = archive.read(info)
            except _ZIP_ERRORS as e:
                raise ArchiveDecodeError(f"Corrupt zip entry {info.filename}: {e}") from e
            yield ArchiveMember(info.filename, content)


# =============================================================================
# GZIP
# =============================================================================

def _gunzip():
    return zlib.decompressobj(16 + zlib.MAX_WBITS)


def iter_gunzip(stream: BinaryIO, read_size: int) -> Iterator[bytes]:
    """
    Decompress a gzip stream chunk by chunk.

    Compressed input is read ``read_size`` bytes at a time and no yielded
    chunk is larger than ``read_size``. Concatenated gzip members are decoded
    back to back; NUL padding after the last member is ignored.

    Raises:
        DecompressionError: On malformed or truncated gzip data
    """
    decompressor = _gunzip()
    started = False

    while True:
        pending = stream.read(read_size)
        if not pending:
            break

        while pending:
            if decompressor.eof:
                # Next member, or trailing padding
                pending = pending.lstrip(b"\x00")
                if not pending:
                    break
                decompressor = _gunzip()

            started = True
            try:
                chunk = decompressor.decompress(pending, read_size)
            except zlib.error as e:
                raise DecompressionError(f"Error decompressing gzip: {e}") from e

            if chunk:
                yield chunk

            pending = decompressor.unused_data if decompressor.eof else decompressor.unconsumed_tail

    if started and not decompressor.eof:
        try:
            tail = decompressor.flush()
        except zlib.error as e:
            raise DecompressionError(f"Error decompressing gzip: {e}") from e
        if tail:
            yield tail

    if not started or not decompressor.eof:
        raise DecompressionError("Error decompressing gzip: unexpected end of stream")


class _ChunkReader(io.RawIOBase):
    """Read-only file object over an iterator of byte chunks."""

    def __init__(self, chunks: Iterator[bytes]):
        self._chunks = chunks
        self._buffer = b""

    def readable(self):
        return True

    def readinto(self, b):
        while not self._buffer:
            self._buffer = next(self._chunks, b"")
            if not self._buffer:
                return 0
        size = min(len(b), len(self._buffer))
        b[:size] = self._buffer[:size]
        self._buffer = self._buffer[size:]
        return size


# =============================================================================
# TAR + GZIP
# =============================================================================

def iter_tar_gz_members(stream: BinaryIO, read_size: int) -> Iterator[ArchiveMember]:
    """
    Yield the members of a gzip-compressed tar stream in stream order.

    Raises:
        DecompressionError: On gzip violations
        ArchiveDecodeError: On tar format violations
    """
    chunks = iter_gunzip(stream, read_size)
    reader = io.BufferedReader(_ChunkReader(chunks), buffer_size=read_size)

    try:
        with tarfile.open(fileobj=reader, mode="r|") as archive:
            for header in archive:
                if not header.isfile():
                    yield ArchiveMember(header.name, is_directory=True)
                    continue

                logger.info(f"Processing file from tar.gz: {header.name}")
                member_file = archive.extractfile(header)
                yield ArchiveMember(header.name, member_file.read())
    except tarfile.TarError as e:
        raise ArchiveDecodeError(f"Error extracting tar: {e}") from e

    # tarfile stops at the end-of-archive blocks; the gzip trailer is still unread
    for _ in chunks:
        pass
