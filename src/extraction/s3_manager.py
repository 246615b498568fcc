"""
S3 Manager for Archive Extraction
---------------------------------
Reads source archives and writes extracted members for one AWS region.
"""

import boto3
import logging
from dataclasses import dataclass
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from typing import BinaryIO, Optional

from .errors import SourceObjectError, UploadError
from .locations import Location
from .multipart import MultipartUpload

# Setup logger (compatible with both local and Lambda)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass
class SourceObject:
    """Streaming body of a source object and its declared size."""
    body: BinaryIO
    content_length: Optional[int]


class S3Manager:
    """
    Wraps an S3 client bound to one region.

    The extraction handler creates one manager for the source region and one
    for the destination region; tests pass a fake ``client`` instead.
    """

    def __init__(self, region: str, client=None):
        self.region = region
        if client is None:
            s3_config = Config(
                signature_version='s3v4',
                region_name=region
            )
            client = boto3.client('s3', config=s3_config)
        self.s3_client = client

    def get_object(self, location: Location) -> SourceObject:
        """
        Open a source object for streaming.

        Raises:
            SourceObjectError: If the object cannot be fetched
        """
        logger.info(f"Retrieving {location.uri} from region {self.region}")
        try:
            response = self.s3_client.get_object(
                Bucket=location.bucket,
                Key=location.key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error getting object {location.key} from bucket {location.bucket}: {e}")
            raise SourceObjectError(f"Could not read {location.uri}: {e}") from e

        size = response.get('ContentLength')
        if size is not None:
            logger.info(f"Source file size: {size / 1024 / 1024:.2f} MB")
        return SourceObject(body=response['Body'], content_length=size)

    def put_object(self, location: Location, data: bytes) -> None:
        """
        Upload a complete in-memory buffer.

        Raises:
            UploadError: If the upload fails
        """
        logger.info(f"Uploading to {location.bucket}/{location.key} in region {self.region} (size: {len(data)} bytes)")
        try:
            self.s3_client.put_object(
                Bucket=location.bucket,
                Key=location.key,
                Body=data,
                ContentLength=len(data),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading {location.key} to {location.bucket}: {e}")
            raise UploadError(f"Could not upload {location.uri}: {e}") from e
        logger.info(f"Successfully uploaded {location.key} to {location.bucket}")

    def start_multipart_upload(self, location: Location) -> MultipartUpload:
        """Coordinator for a multipart upload to ``location`` (not yet opened)."""
        return MultipartUpload(self.s3_client, location)
