"""
Structured data generators, used by the request marshallers to build request bodies.

A generator is fed with a sequence of write calls (like a streaming JSON writer) and produces the encoded body with
``get_bytes``. The generators build the document in memory and hand it over to the codec of their wire encoding
(``json``, ``cbor2``, ``amazon.ion``) once the document is complete. The encodings differ in how they represent
binary data and timestamps, which is handled by ``_convert_value``.
"""
import abc
import datetime
import json
import logging
from decimal import Decimal
from typing import Any, List, Optional, Union

import cbor2
from amazon.ion import simpleion

from cos_sdk.aws.api import SdkClientException
from cos_sdk.utils.strings import base64_encode, to_bytes

LOG = logging.getLogger(__name__)

_NOTHING = object()

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def _to_aware_datetime(value: datetime.datetime) -> datetime.datetime:
    # naive datetimes are interpreted as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


class StructuredGenerator(abc.ABC):
    """
    Base class of all structured data generators. The write methods return the generator itself, so calls can be
    chained::

        generator.write_start_object().write_field_name("KeyId").write_value("alias/key").write_end_object()
    """

    def write_start_object(self) -> "StructuredGenerator":
        raise NotImplementedError

    def write_end_object(self) -> "StructuredGenerator":
        raise NotImplementedError

    def write_start_array(self) -> "StructuredGenerator":
        raise NotImplementedError

    def write_end_array(self) -> "StructuredGenerator":
        raise NotImplementedError

    def write_field_name(self, name: str) -> "StructuredGenerator":
        raise NotImplementedError

    def write_null(self) -> "StructuredGenerator":
        raise NotImplementedError

    def write_value(self, value: Any) -> "StructuredGenerator":
        raise NotImplementedError

    def get_bytes(self) -> bytes:
        raise NotImplementedError


class NoOpGenerator(StructuredGenerator):
    """A generator which ignores all writes. Used for operations which must not send a body at all."""

    def write_start_object(self) -> "StructuredGenerator":
        return self

    def write_end_object(self) -> "StructuredGenerator":
        return self

    def write_start_array(self) -> "StructuredGenerator":
        return self

    def write_end_array(self) -> "StructuredGenerator":
        return self

    def write_field_name(self, name: str) -> "StructuredGenerator":
        return self

    def write_null(self) -> "StructuredGenerator":
        return self

    def write_value(self, value: Any) -> "StructuredGenerator":
        return self

    def get_bytes(self) -> bytes:
        return b""


NO_OP_GENERATOR = NoOpGenerator()


class DocumentGenerator(StructuredGenerator, abc.ABC):
    """
    Generator which assembles the document as a tree of dicts and lists, and encodes it once it is complete.
    Subclasses define the value conversion and the final encoding.
    """

    _root: Any
    _stack: List[Union[dict, list]]
    _field_name: Optional[str]

    def __init__(self):
        self._root = _NOTHING
        self._stack = []
        self._field_name = None

    def _add(self, value: Any):
        if not self._stack:
            if self._root is not _NOTHING:
                raise SdkClientException("Cannot write more than one root value to a document")
            self._root = value
            return

        parent = self._stack[-1]
        if isinstance(parent, list):
            parent.append(value)
            return

        if self._field_name is None:
            raise SdkClientException("Cannot write a value to an object without a field name")
        parent[self._field_name] = value
        self._field_name = None

    def write_start_object(self) -> "StructuredGenerator":
        obj = {}
        self._add(obj)
        self._stack.append(obj)
        return self

    def write_end_object(self) -> "StructuredGenerator":
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise SdkClientException("Cannot end an object outside of an object")
        self._stack.pop()
        return self

    def write_start_array(self) -> "StructuredGenerator":
        array = []
        self._add(array)
        self._stack.append(array)
        return self

    def write_end_array(self) -> "StructuredGenerator":
        if not self._stack or not isinstance(self._stack[-1], list):
            raise SdkClientException("Cannot end an array outside of an array")
        self._stack.pop()
        return self

    def write_field_name(self, name: str) -> "StructuredGenerator":
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise SdkClientException(f"Cannot write field name '{name}' outside of an object")
        self._field_name = name
        return self

    def write_null(self) -> "StructuredGenerator":
        self._add(None)
        return self

    def write_value(self, value: Any) -> "StructuredGenerator":
        """
        Writes a scalar, or an entire nested value: dicts become objects, lists and tuples become arrays.
        """
        if value is None:
            return self.write_null()
        if isinstance(value, dict):
            self.write_start_object()
            for key, item in value.items():
                if item is None:
                    continue
                self.write_field_name(key)
                self.write_value(item)
            return self.write_end_object()
        if isinstance(value, (list, tuple)):
            self.write_start_array()
            for item in value:
                self.write_value(item)
            return self.write_end_array()

        self._add(self._convert_value(value))
        return self

    def get_bytes(self) -> bytes:
        if self._stack:
            raise SdkClientException("Cannot encode an incomplete document, not all objects/arrays have been closed")
        if self._root is _NOTHING:
            return b""
        return self._encode(self._root)

    def _convert_value(self, value: Any) -> Any:
        return value

    @abc.abstractmethod
    def _encode(self, document: Any) -> bytes:
        raise NotImplementedError


class JsonGenerator(DocumentGenerator):
    """Plain JSON. Blobs are base64 encoded, timestamps are epoch seconds (with millisecond precision)."""

    def _convert_value(self, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return base64_encode(bytes(value))
        if isinstance(value, datetime.datetime):
            return round(_to_aware_datetime(value).timestamp(), 3)
        if isinstance(value, Decimal):
            return float(value)
        return value

    def _encode(self, document: Any) -> bytes:
        return to_bytes(json.dumps(document, separators=(",", ":")))


class CborGenerator(DocumentGenerator):
    """
    CBOR (via ``cbor2``). Blobs are written as byte strings. AWS services expect timestamps as epoch milliseconds
    (as integer), not as tagged CBOR datetimes.
    """

    def _convert_value(self, value: Any) -> Any:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, datetime.datetime):
            return (_to_aware_datetime(value) - _EPOCH) // datetime.timedelta(milliseconds=1)
        return value

    def _encode(self, document: Any) -> bytes:
        return cbor2.dumps(document)


class IonGenerator(DocumentGenerator):
    """Amazon Ion (via ``amazon.ion``), in binary or text representation. Blobs and timestamps are native."""

    binary: bool

    def __init__(self, binary: bool = True):
        super().__init__()
        self.binary = binary

    def _convert_value(self, value: Any) -> Any:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, datetime.datetime):
            return _to_aware_datetime(value)
        return value

    def _encode(self, document: Any) -> bytes:
        return to_bytes(simpleion.dumps(document, binary=self.binary))
