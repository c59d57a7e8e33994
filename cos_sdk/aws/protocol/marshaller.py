"""
Marshalling of service requests into HTTP requests for the JSON-family protocols.

A ``JsonProtocolMarshaller`` is created per request by the ``SdkJsonProtocolFactory``. Each member of the service
request is passed to ``marshall`` together with its ``MarshallingInfo``, which places the value in a header, the query
string, the request path, or the body. ``finish_marshalling`` assembles the resulting ``Request``.

Instead of one marshaller class per operation, operations define their members as a table of ``MarshallingInfo``
bindings, which is processed by ``marshall_request``.
"""
import datetime
import enum
import json
import logging
import re
from email.utils import format_datetime
from typing import Any, Iterable, List, Optional, Tuple
from urllib.parse import quote, urlencode, urlsplit

from werkzeug.datastructures import Headers

from cos_sdk.aws.api import SdkClientException, ServiceRequest
from cos_sdk.constants import HEADER_AMZ_TARGET, HEADER_CONTENT_LENGTH, HEADER_CONTENT_TYPE
from cos_sdk.http import Request
from cos_sdk.utils.strings import base64_encode, to_bytes

from .generator import NO_OP_GENERATOR, StructuredGenerator
from .model import MarshallingInfo, MarshallingType, MarshallLocation, OperationInfo, Protocol

LOG = logging.getLogger(__name__)

_PATH_PLACEHOLDER = re.compile(r"{([^}+]+)(\+?)}")


class EmptyBodyMarshaller(enum.Enum):
    """What is written if the explicit payload member of a request is not set."""

    # write nothing, the request is sent without a body
    NULL = "null"
    # write an empty document (f.e. "{}" for JSON)
    EMPTY = "empty"

    def marshall(self, generator: StructuredGenerator):
        if self is EmptyBodyMarshaller.EMPTY:
            generator.write_start_object()
            generator.write_end_object()


def _format_timestamp(value: datetime.datetime, timestamp_format: str) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    value = value.astimezone(datetime.timezone.utc)
    if timestamp_format == "rfc822":
        return format_datetime(value, usegmt=True)
    if timestamp_format == "unixTimestamp":
        return str(round(value.timestamp(), 3))
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_string(value: Any, info: MarshallingInfo, default_timestamp_format: str) -> str:
    """Converts a value for a header, query or path location."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.datetime):
        return _format_timestamp(value, info.timestamp_format or default_timestamp_format)
    if isinstance(value, (bytes, bytearray)):
        return base64_encode(bytes(value))
    return str(value)


class JsonProtocolMarshaller:
    """
    Marshals the members of one request. The body is written to the generator selected by the protocol factory,
    which is the no-op generator for operations that never send a body.
    """

    generator: StructuredGenerator
    content_type: Optional[str]
    operation_info: OperationInfo
    original_request: Any
    empty_body_marshaller: EmptyBodyMarshaller

    def __init__(
        self,
        generator: StructuredGenerator,
        content_type: Optional[str],
        operation_info: OperationInfo,
        original_request: Any = None,
        empty_body_marshaller: EmptyBodyMarshaller = EmptyBodyMarshaller.NULL,
    ):
        self.generator = generator
        self.content_type = content_type
        self.operation_info = operation_info
        self.original_request = original_request
        self.empty_body_marshaller = empty_body_marshaller

        self.headers = Headers()
        self.query_params: List[Tuple[str, str]] = []
        self.path_params = {}
        self.content: Optional[bytes] = None

    @property
    def has_explicit_payload_member(self) -> bool:
        return self.operation_info.has_explicit_payload_member

    def start_marshalling(self):
        if not self.has_explicit_payload_member:
            self.generator.write_start_object()

    def marshall(self, value: Any, info: MarshallingInfo):
        """
        Marshals a single member of the request.

        :param value: the value of the member, None if it is not set
        :param info: the binding of the member
        """
        if info.explicit_payload_member:
            self._marshall_explicit_payload(value, info)
            return

        if value is None:
            return

        if info.location == MarshallLocation.PAYLOAD:
            self._marshall_payload_field(value, info)
        elif info.location == MarshallLocation.HEADER:
            self._marshall_header(value, info)
        elif info.location == MarshallLocation.QUERY_PARAM:
            self._marshall_query_param(value, info)
        elif info.location in (MarshallLocation.PATH, MarshallLocation.GREEDY_PATH):
            self._marshall_path_param(value, info)
        else:
            raise SdkClientException(f"Unsupported marshall location {info.location}")

    def _marshall_explicit_payload(self, value: Any, info: MarshallingInfo):
        if value is None:
            self.empty_body_marshaller.marshall(self.generator)
        elif info.marshalling_type == MarshallingType.BYTE_BUFFER:
            # binary payloads are the raw body, they bypass the generator
            self.content = bytes(value)
        elif info.marshalling_type == MarshallingType.STRING:
            self.content = to_bytes(value)
        else:
            self.generator.write_value(value)

    def _marshall_payload_field(self, value: Any, info: MarshallingInfo):
        self.generator.write_field_name(info.location_name)
        if info.marshalling_type == MarshallingType.JSON_VALUE:
            # JSON values are documents in a string, they are embedded as-is
            self.generator.write_value(json.loads(value) if isinstance(value, str) else value)
        else:
            self.generator.write_value(value)

    def _marshall_header(self, value: Any, info: MarshallingInfo):
        if info.marshalling_type == MarshallingType.JSON_VALUE:
            value = base64_encode(value if isinstance(value, str) else json.dumps(value))
        elif info.marshalling_type == MarshallingType.MAP:
            # header maps use the location name as prefix, f.e. "x-amz-meta-"
            for key, item in value.items():
                self.headers[f"{info.location_name}{key}"] = _to_string(item, info, "rfc822")
            return
        elif info.marshalling_type == MarshallingType.LIST:
            value = ",".join(_to_string(item, info, "rfc822") for item in value)
        self.headers[info.location_name] = _to_string(value, info, "rfc822")

    def _marshall_query_param(self, value: Any, info: MarshallingInfo):
        if info.marshalling_type == MarshallingType.MAP:
            for key, item in value.items():
                items = item if isinstance(item, (list, tuple)) else [item]
                self.query_params.extend((key, _to_string(i, info, "iso8601")) for i in items)
        elif info.marshalling_type == MarshallingType.LIST:
            self.query_params.extend(
                (info.location_name, _to_string(item, info, "iso8601")) for item in value
            )
        else:
            self.query_params.append((info.location_name, _to_string(value, info, "iso8601")))

    def _marshall_path_param(self, value: Any, info: MarshallingInfo):
        value = _to_string(value, info, "iso8601")
        if not value:
            raise SdkClientException(f"Path parameter {info.location_name} must not be empty")
        safe = "/~" if info.location == MarshallLocation.GREEDY_PATH else "~"
        self.path_params[info.location_name] = quote(value, safe=safe)

    def _resolve_path(self) -> Tuple[str, str]:
        uri = self.operation_info.request_uri or "/"
        path, _, static_query = uri.partition("?")

        def _replace(match: re.Match) -> str:
            name = match.group(1)
            if name not in self.path_params:
                raise SdkClientException(f"Missing required path parameter {name}")
            return self.path_params[name]

        path = _PATH_PLACEHOLDER.sub(_replace, path)
        return path, static_query

    def finish_marshalling(self, endpoint: str = "https://localhost") -> Request:
        """
        Completes the body and assembles the HTTP request.

        :param endpoint: the endpoint of the service (scheme and host, optionally with a base path)
        :return: the marshalled request
        :raises SdkClientException: if the body cannot be encoded
        """
        content = self.content
        try:
            if not self.has_explicit_payload_member:
                self.generator.write_end_object()
            if content is None:
                content = self.generator.get_bytes()
        except Exception as e:
            raise SdkClientException(f"Unable to marshall request to JSON: {e}") from e

        headers = Headers(self.headers)
        if content:
            headers[HEADER_CONTENT_LENGTH] = str(len(content))
        if HEADER_CONTENT_TYPE not in headers and self.content_type and self.generator is not NO_OP_GENERATOR:
            headers[HEADER_CONTENT_TYPE] = self.content_type
        if self.operation_info.protocol == Protocol.AWS_JSON and self.operation_info.operation_identifier:
            headers[HEADER_AMZ_TARGET] = self.operation_info.operation_identifier

        path, static_query = self._resolve_path()
        endpoint_parts = urlsplit(endpoint)
        base_path = endpoint_parts.path.rstrip("/")
        path = f"{base_path}{path}" if path.startswith("/") else f"{base_path}/{path}"

        query_string = urlencode(self.query_params, quote_via=quote)
        if static_query:
            # static query parts of the request URI (f.e. "/{Bucket}?uploads") are sent as written
            query_string = f"{static_query}&{query_string}" if query_string else static_query

        return Request(
            method=self.operation_info.http_method,
            path=path,
            headers=headers,
            body=content,
            scheme=endpoint_parts.scheme or "https",
            query_string=query_string,
            server=(endpoint_parts.hostname, endpoint_parts.port),
        )


def marshall_request(
    request: Optional[ServiceRequest],
    bindings: Iterable[MarshallingInfo],
    marshaller: JsonProtocolMarshaller,
):
    """
    Marshals all members of a service request according to the given bindings.

    :param request: the service request (dict)
    :param bindings: the bindings of the operation's members
    :param marshaller: the marshaller of the request
    :raises SdkClientException: if the request is None, or if any member cannot be marshalled
    """
    if request is None:
        raise SdkClientException("Invalid argument passed to marshall(...)")

    try:
        for info in bindings:
            marshaller.marshall(request.get(info.member), info)
    except Exception as e:
        raise SdkClientException(f"Unable to marshall request to JSON: {e}") from e
