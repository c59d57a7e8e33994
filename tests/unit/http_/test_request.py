from cos_sdk.http.request import Request, get_raw_base_url, get_raw_path


def test_get_json():
    r = Request(
        "POST",
        "/",
        headers={"Content-Type": "application/x-amz-json-1.1"},
        body=b'{"KeyId": "alias/my-key"}',
    )
    assert r.get_json(force=True) == {"KeyId": "alias/my-key"}
    assert r.content_type == "application/x-amz-json-1.1"


def test_get_data():
    r = Request("POST", "/", body="foobar")
    assert r.data == b"foobar"


def test_args():
    r = Request("GET", "/", query_string="prefix=foo&max-keys=10")
    assert r.args["prefix"] == "foo"
    assert r.args["max-keys"] == "10"


def test_headers_are_mutable():
    r = Request("POST", "/", headers={"X-Amz-Target": "TrentService.Decrypt"}, body=b"{}")
    r.headers["X-Amz-Target"] = "TrentService.Encrypt"
    assert r.headers["X-Amz-Target"] == "TrentService.Encrypt"


def test_content_length_is_kept():
    r = Request("POST", "/", headers={"Content-Length": "2"}, body=b"{}")
    assert r.headers["Content-Length"] == "2"


def test_raw_path_keeps_encoding():
    r = Request("GET", "/bucket/a%20b/c%2Fd", query_string="versionId=1")
    assert r.path == "/bucket/a b/c/d"
    assert get_raw_path(r) == "/bucket/a%20b/c%2Fd"


def test_raw_base_url():
    r = Request("GET", "/bucket/a%20b", scheme="http", server=("localhost", 4566), query_string="x=1")
    assert get_raw_base_url(r) == "http://localhost:4566/bucket/a%20b"


def test_default_server():
    r = Request("POST", "/")
    assert r.host == "localhost"
    assert r.scheme == "https"
