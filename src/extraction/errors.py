"""
Extraction Errors
-----------------
Failure taxonomy for the archive extraction pipeline.

Every error carries the HTTP status the handler should answer with:
malformed or missing input is a client error (400), everything that goes
wrong while reading, decoding or uploading is a server error (500).
"""


class ExtractionError(Exception):
    """Base class for archive extraction failures."""
    status_code = 500


# Client input errors (400)

class MissingParameterError(ExtractionError):
    """Raised when a required request parameter is absent."""
    status_code = 400


class RequestBodyError(ExtractionError):
    """Raised when the request body cannot be decoded."""
    status_code = 400


class MalformedLocatorError(ExtractionError):
    """Raised when an S3 URI has no scheme or no bucket."""
    status_code = 400

    def __init__(self, locator, reason: str = "expected s3://bucket/key"):
        self.locator = locator
        super().__init__(f"Malformed S3 URI {locator!r}: {reason}")


class UnsupportedFormatError(ExtractionError):
    """Raised when the source key has no supported archive suffix."""
    status_code = 400

    def __init__(self, suffix: str):
        self.suffix = suffix
        super().__init__(
            f"Unsupported file extension: {suffix or '(none)'}. "
            "Only .zip, .gz, and .tar.gz files are supported."
        )


class InvalidRegionError(ExtractionError):
    """Raised when a region parameter is not an AWS region name."""
    status_code = 400

    def __init__(self, region):
        self.region = region
        super().__init__(f"Invalid AWS region format: {region!r}")


# Operational errors (500)

class SourceObjectError(ExtractionError):
    """Raised when the source object cannot be fetched."""


class ArchiveDecodeError(ExtractionError):
    """Raised for corrupt zip entries or tar format violations."""


class DecompressionError(ExtractionError):
    """Raised for malformed or truncated gzip input."""


class UploadError(ExtractionError):
    """Raised when writing to the destination bucket fails."""


class UploadInitError(UploadError):
    """Raised when a multipart upload cannot be created."""


class UploadPartError(UploadError):
    """Raised when a multipart part upload fails."""


class UploadCompleteError(UploadError):
    """Raised when a multipart upload cannot be completed."""
