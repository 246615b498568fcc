# Archive extraction (zip / gzip / tar.gz from S3 to S3)
from .config import ExtractionConfig, FileType, UploadPlan, UploadStrategy, select_upload_plan
from .extractor import ArchiveExtractor, ProcessingResult
from .handlers import extract_handler
from .locations import Location, parse_s3_uri
from .s3_manager import S3Manager

__all__ = [
    "ArchiveExtractor",
    "ExtractionConfig",
    "FileType",
    "Location",
    "ProcessingResult",
    "S3Manager",
    "UploadPlan",
    "UploadStrategy",
    "extract_handler",
    "parse_s3_uri",
    "select_upload_plan",
]
