"""
Unit tests for the multipart upload coordinator.
"""

from unittest.mock import MagicMock

import pytest

from conftest import FakeS3Client, client_error
from src.extraction.errors import UploadCompleteError, UploadInitError, UploadPartError
from src.extraction.locations import Location
from src.extraction.multipart import MultipartUpload, UploadState

DESTINATION = Location("dest-bucket", "out/big.csv")


class TestMultipartLifecycle:
    """Tests for open / upload_part / complete / abort."""

    def test_open_upload_complete(self):
        """Test a full open, upload and complete cycle."""
        client = FakeS3Client()
        upload = MultipartUpload(client, DESTINATION)

        upload_id = upload.open()
        upload.upload_part(1, b"aaa")
        upload.upload_part(2, b"bb")
        upload.complete()

        assert upload.state is UploadState.COMPLETED
        assert client.objects[("dest-bucket", "out/big.csv")] == b"aaabb"
        assert client.ops("complete_multipart_upload")[0]["UploadId"] == upload_id
        assert client.ops("abort_multipart_upload") == []

    def test_open_failure_is_init_error(self):
        """Test a failed create is an init error."""
        client = FakeS3Client()
        client.fail_on["create_multipart_upload"] = client_error("NoSuchBucket", "CreateMultipartUpload")

        with pytest.raises(UploadInitError):
            MultipartUpload(client, DESTINATION).open()

    def test_part_numbers_must_be_sequential(self):
        """Test rejection of a skipped part number."""
        upload = MultipartUpload(FakeS3Client(), DESTINATION)
        upload.open()

        with pytest.raises(ValueError):
            upload.upload_part(2, b"skipped part 1")

    def test_part_failure_is_part_error(self):
        """Test a failed part upload is a part error."""
        client = FakeS3Client()
        client.fail_on["upload_part"] = client_error("SlowDown", "UploadPart")
        upload = MultipartUpload(client, DESTINATION)
        upload.open()

        with pytest.raises(UploadPartError):
            upload.upload_part(1, b"data")

    def test_cannot_upload_before_open(self):
        """Test parts cannot be sent before the upload is open."""
        with pytest.raises(UploadPartError):
            MultipartUpload(FakeS3Client(), DESTINATION).upload_part(1, b"data")


class TestMultipartOrdering:
    """Tests for part acknowledgement bookkeeping."""

    def _pending_client(self):
        client = MagicMock()
        client.create_multipart_upload.return_value = {"UploadId": "upload-123"}
        client.upload_part.return_value = {}  # acknowledgement arrives later
        return client

    def test_complete_sorts_out_of_order_acknowledgements(self):
        """Test parts are completed in part number order."""
        client = self._pending_client()
        upload = MultipartUpload(client, DESTINATION)
        upload.open()
        for number in (1, 2, 3):
            upload.upload_part(number, b"x")

        upload.acknowledge(3, '"e3"')
        upload.acknowledge(1, '"e1"')
        upload.acknowledge(2, '"e2"')
        upload.complete()

        parts = client.complete_multipart_upload.call_args.kwargs["MultipartUpload"]["Parts"]
        assert parts == [
            {"PartNumber": 1, "ETag": '"e1"'},
            {"PartNumber": 2, "ETag": '"e2"'},
            {"PartNumber": 3, "ETag": '"e3"'},
        ]

    def test_complete_fails_when_part_has_no_etag(self):
        """Test complete refuses a part without an ETag."""
        client = self._pending_client()
        upload = MultipartUpload(client, DESTINATION)
        upload.open()
        upload.upload_part(1, b"x")
        upload.upload_part(2, b"y")
        upload.acknowledge(1, '"e1"')

        with pytest.raises(UploadCompleteError):
            upload.complete()
        client.complete_multipart_upload.assert_not_called()

    def test_acknowledge_unknown_part(self):
        """Test acknowledging a part that was never sent."""
        upload = MultipartUpload(self._pending_client(), DESTINATION)
        upload.open()
        with pytest.raises(ValueError):
            upload.acknowledge(1, '"e1"')


class TestMultipartAbort:
    """Tests for abort on failure."""

    def test_context_manager_aborts_on_error(self):
        """Test an exception inside the block aborts the upload."""
        client = FakeS3Client()

        with pytest.raises(RuntimeError):
            with MultipartUpload(client, DESTINATION) as upload:
                upload.upload_part(1, b"data")
                raise RuntimeError("decoder failed")

        assert upload.state is UploadState.ABORTED
        assert client.ops("abort_multipart_upload")[0]["UploadId"] == upload.upload_id
        assert client.ops("complete_multipart_upload") == []

    def test_abort_failure_does_not_mask_part_error(self):
        """Test a failing abort leaves the part error intact."""
        client = FakeS3Client()
        client.fail_on["abort_multipart_upload"] = client_error("AccessDenied", "AbortMultipartUpload")

        with pytest.raises(RuntimeError, match="decoder failed"):
            with MultipartUpload(client, DESTINATION):
                raise RuntimeError("decoder failed")

    def test_failed_complete_is_aborted(self):
        """Test a failed complete is followed by an abort."""
        client = FakeS3Client()
        client.fail_on["complete_multipart_upload"] = client_error("InvalidPart", "CompleteMultipartUpload")

        with pytest.raises(UploadCompleteError):
            with MultipartUpload(client, DESTINATION) as upload:
                upload.upload_part(1, b"data")
                upload.complete()

        assert len(client.ops("abort_multipart_upload")) == 1

    def test_no_abort_after_complete(self):
        """Test a completed upload is not aborted."""
        client = FakeS3Client()
        with MultipartUpload(client, DESTINATION) as upload:
            upload.upload_part(1, b"data")
            upload.complete()

        upload.abort()
        assert client.ops("abort_multipart_upload") == []

    def test_leaving_without_complete_aborts(self):
        """Test leaving the block without completing aborts."""
        client = FakeS3Client()
        with MultipartUpload(client, DESTINATION) as upload:
            upload.upload_part(1, b"data")

        assert upload.state is UploadState.ABORTED
        assert len(client.ops("abort_multipart_upload")) == 1
