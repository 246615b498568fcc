"""
Archive Extractor
-----------------
Extracts a .zip, .gz or .tar.gz object from S3 into a destination prefix.

Flow:
    parse URIs -> detect format -> get source object -> engine -> uploads

Any failure aborts the whole job. Members uploaded before the failure stay
in the destination; an open multipart upload is aborted first.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Iterable, List

from .config import ExtractionConfig, FileType, UploadPlan, UploadStrategy, config, select_upload_plan
from .engines import ArchiveMember, iter_gunzip, iter_tar_gz_members, iter_zip_members
from .errors import MalformedLocatorError
from .formats import detect_file_type, strip_gz_suffix
from .locations import Location, parse_s3_uri
from .s3_manager import S3Manager, SourceObject

# Setup logger (compatible with both local and Lambda)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass
class ProcessingResult:
    """Names of the members written to the destination, in upload order."""
    file_type: FileType
    processed_files: List[str] = field(default_factory=list)


class ArchiveExtractor:
    """
    Extracts one archive per call using injected source/destination stores.

    Re-running the same job uploads every member again and overwrites the
    destination keys; there is no duplicate detection.
    """

    def __init__(
        self,
        source_store: S3Manager,
        destination_store: S3Manager,
        extraction_config: ExtractionConfig = None
    ):
        self.source_store = source_store
        self.destination_store = destination_store
        self.config = extraction_config or config

    def extract(self, source_uri: str, destination_uri: str) -> ProcessingResult:
        """
        Extract ``source_uri`` into the prefix named by ``destination_uri``.

        Raises:
            ExtractionError: Any classified failure (see errors.py)
        """
        source = parse_s3_uri(source_uri)
        destination = parse_s3_uri(destination_uri)
        if not source.key:
            raise MalformedLocatorError(source_uri, "source must name an object")

        file_type = detect_file_type(source.key)
        logger.info(f"Processing {source.uri} as {file_type.value} file")

        source_object = self.source_store.get_object(source)
        plan = select_upload_plan(source_object.content_length, self.config)

        result = ProcessingResult(file_type=file_type)
        try:
            if file_type is FileType.TAR_GZIP:
                members = iter_tar_gz_members(source_object.body, self.config.read_chunk_bytes)
                self._upload_members(members, destination, result)
            elif file_type is FileType.GZIP:
                self._extract_gzip(source_object, source, destination, plan, result)
            else:
                self._extract_zip(source_object, destination, result)
        finally:
            source_object.body.close()

        logger.info(f"Finished processing {source.uri}: {len(result.processed_files)} files")
        return result

    # -------------------------------------------------------------------------
    # Member archives (zip, tar.gz)
    # -------------------------------------------------------------------------

    def _extract_zip(self, source_object: SourceObject, destination: Location, result: ProcessingResult):
        # zipfile needs a seekable file to read the central directory
        with tempfile.SpooledTemporaryFile(max_size=self.config.zip_spool_max_memory_bytes) as spool:
            shutil.copyfileobj(source_object.body, spool, self.config.read_chunk_bytes)
            spool.seek(0)
            self._upload_members(iter_zip_members(spool), destination, result)
        logger.info("Zip processing completed")

    def _upload_members(self, members: Iterable[ArchiveMember], destination: Location, result: ProcessingResult):
        for member in members:
            if member.is_directory:
                logger.info(f"Skipped directory: {member.name}")
                continue
            self.destination_store.put_object(destination.child(member.name), member.content)
            result.processed_files.append(member.name)
            logger.info(f"Successfully processed {member.name}")

    # -------------------------------------------------------------------------
    # Single-member gzip
    # -------------------------------------------------------------------------

    def _extract_gzip(
        self,
        source_object: SourceObject,
        source: Location,
        destination: Location,
        plan: UploadPlan,
        result: ProcessingResult
    ):
        name = strip_gz_suffix(source.key)
        target = destination.child(name)
        chunks = iter_gunzip(source_object.body, self.config.read_chunk_bytes)

        if plan.strategy is UploadStrategy.MULTIPART:
            logger.info("Using multipart upload for large file...")
            self._multipart_upload(chunks, target, plan.part_size_bytes)
        else:
            logger.info("Processing as standard gzip file...")
            data = b"".join(chunks)
            logger.info(f"Total decompressed size: {len(data) / 1024 / 1024:.2f} MB")
            self.destination_store.put_object(target, data)

        result.processed_files.append(name)

    def _multipart_upload(self, chunks: Iterable[bytes], target: Location, part_size: int):
        """Upload a chunk stream in part_size slices, buffering at most one part."""
        buffer = bytearray()
        total = 0

        with self.destination_store.start_multipart_upload(target) as upload:
            for chunk in chunks:
                buffer += chunk
                total += len(chunk)
                while len(buffer) >= part_size:
                    part_number = upload.next_part_number
                    upload.upload_part(part_number, bytes(buffer[:part_size]))
                    del buffer[:part_size]
                    logger.info(
                        f"Uploaded part {part_number}, size: {part_size / 1024 / 1024:.2f} MB, "
                        f"total: {total / 1024 / 1024:.2f} MB"
                    )

            # Last part may be smaller than part_size
            if buffer or not upload.parts:
                upload.upload_part(upload.next_part_number, bytes(buffer))
            upload.complete()
