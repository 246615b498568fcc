"""
S3 Locations
------------
Parsing of s3://bucket/key URIs and destination key construction.
"""

from dataclasses import dataclass

from .errors import MalformedLocatorError


@dataclass(frozen=True)
class Location:
    """A bucket and a key (or key prefix) within it."""
    bucket: str
    key: str = ""

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def child(self, name: str) -> "Location":
        """Location of an extracted member below this key prefix."""
        name = name.lstrip("/")
        prefix = self.key.strip("/")
        key = f"{prefix}/{name}" if prefix else name
        return Location(self.bucket, key)


def parse_s3_uri(locator) -> Location:
    """
    Split ``scheme://bucket/key...`` on the first ``/`` after the scheme.

    Raises:
        MalformedLocatorError: If the locator has no scheme or no bucket
    """
    if not isinstance(locator, str):
        raise MalformedLocatorError(locator, "not a string")

    scheme, separator, rest = locator.partition("://")
    if not separator or not scheme:
        raise MalformedLocatorError(locator, "missing scheme")

    bucket, _, key = rest.partition("/")
    if not bucket:
        raise MalformedLocatorError(locator, "missing bucket")

    return Location(bucket=bucket, key=key)
