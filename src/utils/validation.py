import re

_AWS_REGION_PATTERN = re.compile(r"^[a-z]{2}(-gov)?-[a-z]+-\d$")


def is_valid_aws_region(region) -> bool:
    """Check a region name looks like ``us-east-1`` / ``us-gov-west-1``."""
    return isinstance(region, str) and bool(_AWS_REGION_PATTERN.match(region))
