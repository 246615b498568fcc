"""
Unit tests for the shared API Gateway helpers.
"""

import json

import pytest

from src.utils.http import api_response, is_proxy_event, parse_event_body
from src.utils.validation import is_valid_aws_region


class TestParseEventBody:
    """Tests for parse_event_body."""

    def test_json_string_body(self):
        """Test parsing a JSON string body."""
        assert parse_event_body({"body": '{"a": 1}'}) == {"a": 1}

    def test_dict_body(self):
        """Test a body that is already a dict."""
        assert parse_event_body({"body": {"a": 1}}) == {"a": 1}

    def test_empty_body(self):
        """Test an empty body parses to an empty dict."""
        assert parse_event_body({"body": None}) == {}

    def test_direct_invocation(self):
        """Test an event without a body is the payload."""
        assert parse_event_body({"a": 1}) == {"a": 1}
        assert not is_proxy_event({"a": 1})

    def test_non_object_body(self):
        """Test rejection of a JSON body that is not an object."""
        with pytest.raises(ValueError):
            parse_event_body({"body": "[1, 2]"})


class TestApiResponse:
    """Tests for api_response."""

    def test_envelope(self):
        """Test the proxy response envelope and CORS headers."""
        response = api_response(201, {"ok": True}, {"X-Extra": "1"})

        assert response["statusCode"] == 201
        assert json.loads(response["body"]) == {"ok": True}
        assert response["headers"]["X-Extra"] == "1"
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"


class TestRegionValidation:
    """Tests for is_valid_aws_region."""

    @pytest.mark.parametrize("region", ["us-east-1", "ap-southeast-2", "us-gov-west-1"])
    def test_valid(self, region):
        """Test well-formed region names."""
        assert is_valid_aws_region(region)

    @pytest.mark.parametrize("region", ["", "us-east", "US-EAST-1", "useast1", None])
    def test_invalid(self, region):
        """Test malformed region names."""
        assert not is_valid_aws_region(region)
