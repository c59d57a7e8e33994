from typing import List, Optional

import pytest

from cos_sdk.http import Request, Response
from cos_sdk.http.client import HttpClient


@pytest.fixture(autouse=True)
def clean_sdk_environment(monkeypatch, tmp_path):
    """
    Automatically removes the SDK switches from the environment for all unit tests, and points the profile lookup to
    a file which does not exist.
    """
    for name in ("AWS_CBOR_DISABLE", "AWS_ION_BINARY_DISABLE", "AWS_REGION", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "does-not-exist"))


class RecordingHttpClient(HttpClient):
    """HttpClient which records all requests and answers with a prepared response."""

    requests: List[Request]
    response: Optional[Response]

    def __init__(self):
        self.requests = []
        self.response = None

    def respond_with(self, body=b"", status: int = 200, headers: dict = None) -> "RecordingHttpClient":
        self.response = Response(response=body, status=status, headers=headers or {})
        return self

    def request(self, request: Request) -> Response:
        self.requests.append(request)
        return self.response

    @property
    def last_request(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def http_client() -> RecordingHttpClient:
    return RecordingHttpClient().respond_with(b"{}")
