"""
Shared fixtures for the Lambda handler tests.

FakeS3Client implements the subset of the boto3 S3 client used by the
extraction pipeline and keeps every object in memory.
"""

import gzip
import io
import os
import sys
import tarfile
import zipfile

import pytest
from botocore.exceptions import ClientError

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

MIB = 1024 * 1024


def client_error(code="InternalError", operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": f"{code} (simulated)"}}, operation)


class FakeS3Client:
    """In-memory stand-in for boto3.client('s3')."""

    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.content_lengths = {}
        self.uploads = {}
        self.calls = []
        self.fail_on = {}

    def _record(self, operation, **kwargs):
        self.calls.append((operation, kwargs))
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def ops(self, operation):
        return [kwargs for name, kwargs in self.calls if name == operation]

    def get_object(self, Bucket, Key):
        self._record("get_object", Bucket=Bucket, Key=Key)
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject")
        data = self.objects[(Bucket, Key)]
        return {
            "Body": io.BytesIO(data),
            "ContentLength": self.content_lengths.get((Bucket, Key), len(data)),
        }

    def put_object(self, Bucket, Key, Body, **kwargs):
        self._record("put_object", Bucket=Bucket, Key=Key, Body=Body, **kwargs)
        self.objects[(Bucket, Key)] = bytes(Body)
        return {"ETag": '"put"'}

    def create_multipart_upload(self, Bucket, Key):
        self._record("create_multipart_upload", Bucket=Bucket, Key=Key)
        upload_id = f"upload-{len(self.uploads) + 1}"
        self.uploads[upload_id] = {"Bucket": Bucket, "Key": Key, "parts": {}, "state": "open"}
        return {"UploadId": upload_id}

    def upload_part(self, Bucket, Key, UploadId, PartNumber, Body):
        self._record("upload_part", Bucket=Bucket, Key=Key, UploadId=UploadId,
                     PartNumber=PartNumber, Body=Body)
        self.uploads[UploadId]["parts"][PartNumber] = bytes(Body)
        return {"ETag": f'"etag-{PartNumber}"'}

    def complete_multipart_upload(self, Bucket, Key, UploadId, MultipartUpload):
        self._record("complete_multipart_upload", Bucket=Bucket, Key=Key,
                     UploadId=UploadId, MultipartUpload=MultipartUpload)
        upload = self.uploads[UploadId]
        parts = [upload["parts"][p["PartNumber"]] for p in MultipartUpload["Parts"]]
        self.objects[(Bucket, Key)] = b"".join(parts)
        upload["state"] = "completed"
        return {}

    def abort_multipart_upload(self, Bucket, Key, UploadId):
        self._record("abort_multipart_upload", Bucket=Bucket, Key=Key, UploadId=UploadId)
        self.uploads[UploadId]["state"] = "aborted"
        return {}


def make_zip(files, directories=()):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as archive:
        for name in directories:
            archive.writestr(zipfile.ZipInfo(name), b"")
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def make_tar_gz(files, directories=()):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name in directories:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            archive.addfile(info)
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def make_gzip(content):
    return gzip.compress(content)


@pytest.fixture
def fake_s3():
    return FakeS3Client()
