from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from linkgate.core.errors import SignerError
from linkgate.services import storage_browser
from linkgate.services.signer import S3Signer, build_s3_client, content_disposition


@pytest.fixture()
def s3_settings(settings):
    return settings.model_copy(
        update={
            "storage_endpoint_url": "https://oss-cn-hangzhou.aliyuncs.com",
            "storage_region": "oss-cn-hangzhou",
            "storage_access_key_id": "AKIDEXAMPLE",
            "storage_secret_access_key": "not-a-real-secret",
        }
    )


def test_presigned_url_for_object(s3_settings):
    signer = S3Signer.from_settings(s3_settings)
    url = signer.sign(None, "reports/q1.pdf", 300, "Q1 report.pdf")

    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert parsed.netloc == "files.oss-cn-hangzhou.aliyuncs.com"
    assert parsed.path == "/reports/q1.pdf"
    assert query["X-Amz-Expires"] == ["300"]
    assert query["response-content-disposition"] == ['attachment; filename="Q1 report.pdf"']
    assert "X-Amz-Signature" in query


def test_bucket_override(s3_settings):
    url = S3Signer.from_settings(s3_settings).sign("archive", "x.bin", 60)
    assert urlparse(url).netloc.startswith("archive.")
    assert "response-content-disposition" not in url


def test_missing_bucket(s3_settings):
    signer = S3Signer(build_s3_client(s3_settings), default_bucket=None)
    with pytest.raises(SignerError):
        signer.sign(None, "x.bin", 60)


def test_provider_error_becomes_signer_error():
    class FailingClient:
        def generate_presigned_url(self, *args, **kwargs):
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject")

    with pytest.raises(SignerError):
        S3Signer(FailingClient(), default_bucket="files").sign(None, "x.bin", 60)


def test_content_disposition_strips_quotes():
    assert content_disposition('a"b\r\n.txt') == 'attachment; filename="ab.txt"'


def test_list_objects(s3_settings):
    client = build_s3_client(s3_settings)
    modified = datetime(2026, 1, 2, tzinfo=timezone.utc)
    with Stubber(client) as stubber:
        stubber.add_response(
            "list_objects_v2",
            {
                "Contents": [{"Key": "reports/q1.pdf", "Size": 1024, "LastModified": modified, "ETag": '"abc"'}],
                "CommonPrefixes": [{"Prefix": "reports/2025/"}],
                "IsTruncated": True,
                "NextContinuationToken": "next",
            },
            {"Bucket": "files", "Delimiter": "/", "MaxKeys": 1000, "Prefix": "reports/"},
        )
        page = storage_browser.list_objects(client, "files", prefix="reports/")

    assert page["objects"] == [
        {"key": "reports/q1.pdf", "size": 1024, "last_modified": modified, "etag": "abc"}
    ]
    assert page["common_prefixes"] == ["reports/2025/"]
    assert page["is_truncated"] is True
    assert page["next_continuation_token"] == "next"


def test_list_buckets_error(s3_settings):
    client = build_s3_client(s3_settings)
    with Stubber(client) as stubber:
        stubber.add_client_error("list_buckets", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(SignerError):
            storage_browser.list_buckets(client)
