"""
Archive Extraction Lambda Handler
---------------------------------
POST /extract

Body:
    {
        "sourceUri": "s3://bucket/path/archive.zip",
        "destinationUri": "s3://bucket/output/prefix/",
        "sourceRegion": "us-east-1",        // optional
        "destinationRegion": "us-east-1"    // optional
    }

The payload may also be passed directly (Lambda invoke / Step Functions).
"""

import json
import logging
import traceback
from typing import Any

from ..config import ENVIRONMENT
from ..utils.http import api_response, parse_event_body
from ..utils.logger import configure_logging
from ..utils.validation import is_valid_aws_region
from .config import ExtractionConfig, config
from .errors import ExtractionError, InvalidRegionError, MissingParameterError, RequestBodyError
from .extractor import ArchiveExtractor
from .s3_manager import S3Manager

configure_logging()
logger = logging.getLogger(__name__)


def _error_response(error: Exception, message: str = "Error processing request") -> dict:
    """Failure envelope; status 400 for bad input, 500 for everything else."""
    status_code = getattr(error, "status_code", 500)
    body = {
        "message": message,
        "error": str(error),
        "errorType": type(error).__name__,
    }
    if ENVIRONMENT == "development":
        body["stackTrace"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return api_response(status_code, body)


def _read_request(event: Any, cfg: ExtractionConfig) -> dict:
    try:
        body = parse_event_body(event)
    except ValueError as e:
        raise RequestBodyError(str(e)) from e

    request = {
        "source_uri": body.get("sourceUri"),
        "destination_uri": body.get("destinationUri"),
        "source_region": body.get("sourceRegion") or cfg.default_source_region,
        "destination_region": body.get("destinationRegion") or cfg.default_destination_region,
    }
    if not request["source_uri"] or not request["destination_uri"]:
        raise MissingParameterError("sourceUri and destinationUri are required")

    for key in ("source_region", "destination_region"):
        if not is_valid_aws_region(request[key]):
            raise InvalidRegionError(request[key])
    return request


def extract_handler(event: dict, context: Any, extractor: ArchiveExtractor = None) -> dict:
    """
    Extract an archive from S3 and upload its members to a destination prefix.

    Returns:
        {
            "message": "File processed successfully",
            "source": "s3://...",
            "destination": "s3://...",
            "processedFiles": ["a.txt", "dir/b.txt"],
            "fileType": ".zip" | ".gz" | ".tar.gz"
        }
    """
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    try:
        request = _read_request(event, config)
    except RequestBodyError as e:
        logger.error(f"Error parsing request body: {e}")
        return _error_response(e, "Error parsing request body")
    except MissingParameterError as e:
        logger.error(f"Invalid request: {e}")
        return _error_response(e, "Missing required parameters")
    except InvalidRegionError as e:
        logger.error(f"Invalid request: {e}")
        return _error_response(e, "Invalid region")

    logger.info(
        f"Processing request: source={request['source_uri']} ({request['source_region']}), "
        f"destination={request['destination_uri']} ({request['destination_region']})"
    )

    try:
        if extractor is None:
            extractor = ArchiveExtractor(
                source_store=S3Manager(request["source_region"]),
                destination_store=S3Manager(request["destination_region"]),
            )
        result = extractor.extract(request["source_uri"], request["destination_uri"])

        return api_response(200, {
            "message": "File processed successfully",
            "source": request["source_uri"],
            "destination": request["destination_uri"],
            "processedFiles": result.processed_files,
            "fileType": result.file_type.value,
        })

    except ExtractionError as e:
        logger.error(f"Extraction failed ({type(e).__name__}): {e}")
        return _error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return _error_response(e)
