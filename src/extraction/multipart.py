"""
Multipart Upload Coordinator
----------------------------
Drives one S3 multipart upload session:

    UNINITIATED -> OPEN(upload_id) -> COMPLETED | ABORTED

Once a session is open exactly one of complete() or abort() is issued.
Used as a context manager, an exception (or leaving the block without
completing) aborts the session before the exception propagates.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import UploadCompleteError, UploadInitError, UploadPartError
from .locations import Location

# Setup logger (compatible with both local and Lambda)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

_SDK_ERRORS = (ClientError, BotoCoreError)


class UploadState(Enum):
    """Lifecycle of a multipart upload session."""
    UNINITIATED = "uninitiated"
    OPEN = "open"
    COMPLETED = "completed"
    ABORTED = "aborted"


class MultipartUpload:
    """
    One multipart upload to a single destination key.

    Parts must be uploaded as 1, 2, 3, ... from a single ordered producer.
    ETags are recorded per part number as acknowledgements arrive, and
    complete() always presents them sorted by part number.
    """

    def __init__(self, s3_client, destination: Location):
        self.s3_client = s3_client
        self.destination = destination
        self.upload_id: Optional[str] = None
        self.parts: Dict[int, Optional[str]] = {}
        self.state = UploadState.UNINITIATED

    def __enter__(self) -> "MultipartUpload":
        if self.state is UploadState.UNINITIATED:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.state is UploadState.OPEN:
            if exc_type is None:
                logger.warning(f"Multipart upload {self.upload_id} left without completing, aborting")
            self.abort()
        return False

    @property
    def next_part_number(self) -> int:
        return len(self.parts) + 1

    def open(self) -> str:
        """Create the upload session and return its upload id."""
        if self.state is not UploadState.UNINITIATED:
            raise UploadInitError(f"Multipart upload already {self.state.value}")

        logger.info(f"Starting multipart upload to {self.destination.bucket}/{self.destination.key}")
        try:
            response = self.s3_client.create_multipart_upload(
                Bucket=self.destination.bucket,
                Key=self.destination.key,
            )
        except _SDK_ERRORS as e:
            logger.error(f"Error creating multipart upload for {self.destination.uri}: {e}")
            raise UploadInitError(f"Could not start multipart upload to {self.destination.uri}: {e}") from e

        self.upload_id = response["UploadId"]
        self.state = UploadState.OPEN
        return self.upload_id

    def upload_part(self, part_number: int, body: bytes) -> str:
        """
        Upload one part and record its ETag.

        Raises:
            ValueError: If part_number is not the next number in sequence
            UploadPartError: If the SDK call fails
        """
        self._require_open()
        if part_number != self.next_part_number:
            raise ValueError(f"Expected part {self.next_part_number}, got {part_number}")

        self.parts[part_number] = None
        try:
            response = self.s3_client.upload_part(
                Bucket=self.destination.bucket,
                Key=self.destination.key,
                UploadId=self.upload_id,
                PartNumber=part_number,
                Body=body,
            )
        except _SDK_ERRORS as e:
            logger.error(f"Error uploading part {part_number} of {self.upload_id}: {e}")
            raise UploadPartError(f"Part {part_number} upload failed: {e}") from e

        etag = response.get("ETag")
        self.acknowledge(part_number, etag)
        return etag

    def acknowledge(self, part_number: int, etag: Optional[str]) -> None:
        """Record the ETag returned for an uploaded part."""
        if part_number not in self.parts:
            raise ValueError(f"Part {part_number} was never uploaded")
        self.parts[part_number] = etag

    def sorted_parts(self) -> List[dict]:
        return [
            {"PartNumber": number, "ETag": self.parts[number]}
            for number in sorted(self.parts)
        ]

    def complete(self) -> None:
        """
        Assemble the uploaded parts into the destination object.

        Raises:
            UploadCompleteError: If a part has no ETag or the SDK call fails
        """
        self._require_open()
        missing = [number for number, etag in self.parts.items() if not etag]
        if missing:
            raise UploadCompleteError(f"Parts {sorted(missing)} have no ETag")

        try:
            self.s3_client.complete_multipart_upload(
                Bucket=self.destination.bucket,
                Key=self.destination.key,
                UploadId=self.upload_id,
                MultipartUpload={"Parts": self.sorted_parts()},
            )
        except _SDK_ERRORS as e:
            logger.error(f"Error completing multipart upload {self.upload_id}: {e}")
            raise UploadCompleteError(f"Could not complete multipart upload: {e}") from e

        self.state = UploadState.COMPLETED
        logger.info(f"Successfully uploaded {self.destination.key} in {len(self.parts)} parts")

    def abort(self) -> None:
        """Abort the session. Failures are logged, never raised."""
        if self.state is not UploadState.OPEN:
            return
        self.state = UploadState.ABORTED
        try:
            self.s3_client.abort_multipart_upload(
                Bucket=self.destination.bucket,
                Key=self.destination.key,
                UploadId=self.upload_id,
            )
            logger.info(f"Aborted multipart upload {self.upload_id}")
        except Exception as e:
            # Must not mask the error that triggered the abort
            logger.error(f"Error aborting multipart upload {self.upload_id}: {e}")

    def _require_open(self):
        if self.state is not UploadState.OPEN:
            raise UploadPartError(f"Multipart upload is {self.state.value}")
