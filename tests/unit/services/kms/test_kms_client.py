import base64
import json

import pytest

from cos_sdk.aws.api import ErrorType
from cos_sdk.config import SdkGlobalConfiguration
from cos_sdk.services.kms import (
    CLIENT_METADATA,
    AWSKMSException,
    InvalidCiphertextException,
    KMSClient,
    KMSInvalidStateException,
    NotFoundException,
)


@pytest.fixture
def kms_client(http_client):
    return KMSClient(region="us-east-1", http_client=http_client, configuration=SdkGlobalConfiguration())


def test_client_metadata():
    assert CLIENT_METADATA.protocol_version == "1.1"
    assert not CLIENT_METADATA.supports_cbor
    assert CLIENT_METADATA.base_service_exception is AWSKMSException
    codes = [shape.error_code for shape in CLIENT_METADATA.error_shapes]
    assert "KMSInvalidStateException" in codes
    assert len(codes) == len(set(codes))


def test_decrypt(kms_client, http_client):
    http_client.respond_with(
        json.dumps(
            {
                "KeyId": "arn:aws:kms:us-east-1:000000000000:key/1234",
                "Plaintext": base64.b64encode(b"secret").decode(),
                "EncryptionAlgorithm": "SYMMETRIC_DEFAULT",
            }
        ),
        headers={"x-amzn-RequestId": "r1"},
    )

    result = kms_client.decrypt(
        {
            "CiphertextBlob": b"\x01\x02\x03",
            "EncryptionContext": {"purpose": "test"},
            "KeyId": "alias/my-key",
        }
    )

    assert result == {
        "KeyId": "arn:aws:kms:us-east-1:000000000000:key/1234",
        "Plaintext": b"secret",
        "EncryptionAlgorithm": "SYMMETRIC_DEFAULT",
    }

    request = http_client.last_request
    assert request.method == "POST"
    assert request.path == "/"
    assert request.host == "kms.us-east-1.amazonaws.com"
    assert request.headers["X-Amz-Target"] == "TrentService.Decrypt"
    assert request.headers["Content-Type"] == "application/x-amz-json-1.1"
    assert json.loads(request.data) == {
        "CiphertextBlob": "AQID",
        "EncryptionContext": {"purpose": "test"},
        "KeyId": "alias/my-key",
    }


def test_cancel_key_deletion(kms_client, http_client):
    http_client.respond_with(b'{"KeyId":"1234"}')

    assert kms_client.cancel_key_deletion("1234") == {"KeyId": "1234"}
    assert http_client.last_request.headers["X-Amz-Target"] == "TrentService.CancelKeyDeletion"
    assert json.loads(http_client.last_request.data) == {"KeyId": "1234"}


def test_generate_random(kms_client, http_client):
    http_client.respond_with(json.dumps({"Plaintext": base64.b64encode(b"\x00" * 4).decode()}))

    assert kms_client.generate_random(number_of_bytes=4) == {"Plaintext": b"\x00\x00\x00\x00"}
    assert json.loads(http_client.last_request.data) == {"NumberOfBytes": 4}


def test_generate_random_without_arguments(kms_client, http_client):
    http_client.respond_with(b"{}")

    assert kms_client.generate_random() == {}
    assert http_client.last_request.data == b"{}"


def test_invalid_state(kms_client, http_client):
    http_client.respond_with(
        json.dumps({"__type": "KMSInvalidStateException", "message": "key is pending deletion"}),
        status=400,
        headers={"x-amzn-RequestId": "r2"},
    )

    with pytest.raises(KMSInvalidStateException) as e:
        kms_client.cancel_key_deletion("1234")

    assert isinstance(e.value, AWSKMSException)
    assert e.value.message == "key is pending deletion"
    assert e.value.request_id == "r2"
    assert e.value.service_name == "AWSKMS"
    assert e.value.status_code == 400
    assert e.value.error_type == ErrorType.Client


@pytest.mark.parametrize(
    "error_code, exception_type",
    [
        ("NotFoundException", NotFoundException),
        ("com.amazonaws.kms#InvalidCiphertextException", InvalidCiphertextException),
        ("UnrecognizedClientException", AWSKMSException),
    ],
)
def test_error_codes(kms_client, http_client, error_code, exception_type):
    http_client.respond_with(json.dumps({"__type": error_code}), status=400)

    with pytest.raises(AWSKMSException) as e:
        kms_client.decrypt({"CiphertextBlob": b"\x01"})

    assert type(e.value) is exception_type
    assert e.value.code == error_code.rsplit("#", 1)[-1]


def test_default_endpoint_from_environment(http_client, monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-de")
    client = KMSClient(http_client=http_client)
    assert client.endpoint == "https://kms.eu-de.amazonaws.com"
