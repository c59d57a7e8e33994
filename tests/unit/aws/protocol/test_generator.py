import base64
import datetime
import json
from decimal import Decimal

import cbor2
import pytest
from amazon.ion import simpleion

from cos_sdk.aws.api import SdkClientException
from cos_sdk.aws.protocol.factory import (
    ION_BINARY_VERSION_MARKER,
    SDK_CBOR_FACTORY,
    SDK_ION_BINARY_FACTORY,
    SDK_ION_TEXT_FACTORY,
    SDK_JSON_FACTORY,
)
from cos_sdk.aws.protocol.generator import NO_OP_GENERATOR, CborGenerator, IonGenerator, JsonGenerator

TIMESTAMP = datetime.datetime(2021, 6, 1, 12, 30, 15, 123000, tzinfo=datetime.timezone.utc)


def _write_sample(generator):
    generator.write_start_object()
    generator.write_field_name("KeyId").write_value("alias/my-key")
    generator.write_field_name("CiphertextBlob").write_value(b"\x00\x01\x02")
    generator.write_field_name("CreationDate").write_value(TIMESTAMP)
    generator.write_field_name("GrantTokens").write_start_array().write_value("t1").write_value("t2")
    generator.write_end_array()
    generator.write_field_name("EncryptionContext").write_value({"purpose": "test", "skipped": None})
    generator.write_end_object()
    return generator.get_bytes()


class TestJsonGenerator:
    def test_document(self):
        body = _write_sample(JsonGenerator())
        assert json.loads(body) == {
            "KeyId": "alias/my-key",
            "CiphertextBlob": base64.b64encode(b"\x00\x01\x02").decode(),
            "CreationDate": 1622550615.123,
            "GrantTokens": ["t1", "t2"],
            "EncryptionContext": {"purpose": "test"},
        }

    def test_compact_encoding(self):
        body = JsonGenerator().write_start_object().write_field_name("a").write_value(1).write_end_object().get_bytes()
        assert body == b'{"a":1}'

    def test_naive_datetime_is_utc(self):
        body = JsonGenerator().write_value(datetime.datetime(1970, 1, 1, 0, 1)).get_bytes()
        assert body == b"60.0"

    def test_decimal(self):
        assert JsonGenerator().write_value(Decimal("1.5")).get_bytes() == b"1.5"

    def test_null(self):
        generator = JsonGenerator().write_start_object().write_field_name("a").write_null().write_end_object()
        assert generator.get_bytes() == b'{"a":null}'

    def test_empty_generator(self):
        assert JsonGenerator().get_bytes() == b""

    def test_incomplete_document(self):
        generator = JsonGenerator().write_start_object()
        with pytest.raises(SdkClientException):
            generator.get_bytes()

    def test_value_without_field_name(self):
        generator = JsonGenerator().write_start_object()
        with pytest.raises(SdkClientException):
            generator.write_value("foo")

    def test_field_name_outside_of_object(self):
        with pytest.raises(SdkClientException):
            JsonGenerator().write_start_array().write_field_name("foo")

    def test_unbalanced_end(self):
        with pytest.raises(SdkClientException):
            JsonGenerator().write_start_object().write_end_array()

    def test_multiple_root_values(self):
        generator = JsonGenerator().write_value(1)
        with pytest.raises(SdkClientException):
            generator.write_value(2)


class TestCborGenerator:
    def test_document(self):
        body = _write_sample(CborGenerator())
        assert cbor2.loads(body) == {
            "KeyId": "alias/my-key",
            "CiphertextBlob": b"\x00\x01\x02",
            "CreationDate": 1622550615123,
            "GrantTokens": ["t1", "t2"],
            "EncryptionContext": {"purpose": "test"},
        }

    def test_parse_with_data_factory(self):
        body = _write_sample(CborGenerator())
        document = SDK_CBOR_FACTORY.parse(body)
        assert SDK_CBOR_FACTORY.decode_blob(document["CiphertextBlob"]) == b"\x00\x01\x02"
        assert SDK_CBOR_FACTORY.decode_timestamp(document["CreationDate"]) == TIMESTAMP


class TestIonGenerator:
    def test_binary_document(self):
        body = _write_sample(IonGenerator(binary=True))
        assert body.startswith(ION_BINARY_VERSION_MARKER)

        document = SDK_ION_BINARY_FACTORY.parse(body)
        assert document["KeyId"] == "alias/my-key"
        assert document["CiphertextBlob"] == b"\x00\x01\x02"
        assert document["GrantTokens"] == ["t1", "t2"]
        assert document["EncryptionContext"] == {"purpose": "test"}
        assert SDK_ION_BINARY_FACTORY.decode_timestamp(document["CreationDate"]) == TIMESTAMP

    def test_text_document(self):
        body = _write_sample(IonGenerator(binary=False))
        assert not body.startswith(ION_BINARY_VERSION_MARKER)
        assert b"alias/my-key" in body

        document = simpleion.loads(body.decode("utf-8"), single_value=True)
        assert document["KeyId"] == "alias/my-key"

    def test_text_factory_parses_binary_responses(self):
        body = IonGenerator(binary=True).write_value({"Enabled": True}).get_bytes()
        assert SDK_ION_TEXT_FACTORY.parse(body) == {"Enabled": True}


class TestJsonDataFactory:
    def test_parse(self):
        assert SDK_JSON_FACTORY.parse(b'{"KeyId":"k","Count":2}') == {"KeyId": "k", "Count": 2}

    def test_decode_blob(self):
        assert SDK_JSON_FACTORY.decode_blob("AAEC") == b"\x00\x01\x02"
        assert SDK_JSON_FACTORY.decode_blob(None) is None

    def test_decode_timestamp(self):
        assert SDK_JSON_FACTORY.decode_timestamp(1622550615.123) == TIMESTAMP
        assert SDK_JSON_FACTORY.decode_timestamp(None) is None


def test_no_op_generator():
    generator = NO_OP_GENERATOR
    generator.write_start_object().write_field_name("a").write_value(1).write_end_object()
    assert generator.get_bytes() == b""
