"""
Extraction Configuration
------------------------
Central configuration for archive extraction and upload strategy selection.
"""

import os
from enum import Enum
from dataclasses import dataclass
from typing import Optional

MIB = 1024 * 1024


class FileType(Enum):
    """Supported source archive types (values are reported as fileType)."""
    ZIP = ".zip"
    GZIP = ".gz"
    TAR_GZIP = ".tar.gz"


class UploadStrategy(Enum):
    """How decompressed bytes are written to the destination."""
    DIRECT = "direct"          # single put_object
    MULTIPART = "multipart"    # create/upload_part/complete


@dataclass(frozen=True)
class UploadPlan:
    """Upload strategy chosen once per source object."""
    strategy: UploadStrategy
    part_size_bytes: int


@dataclass
class ExtractionConfig:
    """Archive extraction settings."""

    # Regions used when the request does not name one
    default_source_region: str = os.environ.get("DEFAULT_SOURCE_REGION", "us-east-1")
    default_destination_region: str = os.environ.get("DEFAULT_DESTINATION_REGION", "us-east-1")

    # Multipart upload (large gzip sources)
    multipart_threshold_bytes: int = int(os.environ.get("MULTIPART_THRESHOLD_BYTES", str(100 * MIB)))
    part_size_bytes: int = int(os.environ.get("MULTIPART_PART_SIZE_BYTES", str(5 * MIB)))

    # Streaming
    read_chunk_bytes: int = int(os.environ.get("READ_CHUNK_BYTES", str(MIB)))
    zip_spool_max_memory_bytes: int = int(os.environ.get("ZIP_SPOOL_MAX_MEMORY_BYTES", str(64 * MIB)))

    def __post_init__(self):
        """Reject sizes that would break the buffering loops."""
        for name in (
            "multipart_threshold_bytes",
            "part_size_bytes",
            "read_chunk_bytes",
            "zip_spool_max_memory_bytes",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")


def select_upload_plan(source_size: Optional[int], cfg: Optional[ExtractionConfig] = None) -> UploadPlan:
    """
    Choose direct vs multipart upload from the declared source size.

    The decision uses the compressed size reported by S3, not the
    decompressed size, which is unknown before reading.
    """
    cfg = cfg or config
    if (source_size or 0) > cfg.multipart_threshold_bytes:
        return UploadPlan(UploadStrategy.MULTIPART, cfg.part_size_bytes)
    return UploadPlan(UploadStrategy.DIRECT, cfg.part_size_bytes)


# Global config instance
config = ExtractionConfig()
