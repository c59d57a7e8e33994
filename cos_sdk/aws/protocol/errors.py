"""
Classification of error responses into typed exceptions.

Every modeled error of a service is represented by a ``JsonErrorUnmarshaller`` binding an error code to an exception
type. The unmarshallers of a service are kept in an ordered tuple, the first unmarshaller matching the error code of a
response creates the exception. The last unmarshaller of the tuple is always bound to the base exception of the
service and matches any error code, so unknown error codes still result in a (generic) typed exception.
"""
import logging
from typing import Any, Dict, Iterable, NamedTuple, Optional, Tuple, Type

from werkzeug.datastructures import Headers

from cos_sdk.aws.api import ServiceException
from cos_sdk.constants import (
    ERROR_CODE_FIELD_NAME,
    ERROR_MESSAGE_FIELD_NAMES,
    HEADER_AMZN_ERROR_TYPE,
)

from .model import JsonErrorShapeMetadata

LOG = logging.getLogger(__name__)

HEADER_AMZN_ERROR_MESSAGE = "x-amzn-error-message"

# attributes of ServiceException which are populated by the error response handler, never from the response body
_RESERVED_ATTRIBUTES = {
    "code",
    "message",
    "status_code",
    "sender_fault",
    "error_type",
    "request_id",
    "service_name",
    "headers",
    "raw_response",
}


class JsonErrorContent(NamedTuple):
    """The body of an error response. ``fields`` is empty if the body could not be parsed."""

    raw: bytes
    fields: Dict[str, Any]


def parse_error_code(
    headers: Headers, content: JsonErrorContent, error_code_field_name: Optional[str] = None
) -> Optional[str]:
    """
    Extracts the error code from an error response. The ``x-amzn-ErrorType`` header takes precedence over the error
    code field in the body. Namespaces and additional information are stripped, i.e.,
    ``aws.protocoltests#FooError`` and ``FooError:http://internal.amazon.com/`` both become ``FooError``.

    :param headers: the headers of the response
    :param content: the parsed body of the response
    :param error_code_field_name: the body field carrying the error code, defaults to ``__type``
    :return: the error code or None if the response does not carry one
    """
    header_value = headers.get(HEADER_AMZN_ERROR_TYPE)
    if header_value:
        return header_value.split(":", 1)[0]

    value = content.fields.get(error_code_field_name or ERROR_CODE_FIELD_NAME)
    if value is None:
        return None
    return str(value).rsplit("#", 1)[-1]


def parse_error_message(headers: Headers, content: JsonErrorContent) -> Optional[str]:
    header_value = headers.get(HEADER_AMZN_ERROR_MESSAGE)
    if header_value:
        return header_value
    for field_name in ERROR_MESSAGE_FIELD_NAMES:
        value = content.fields.get(field_name)
        if value is not None:
            return str(value)
    return None


def _modeled_members(exception_type: Type[ServiceException]) -> Dict[str, str]:
    """Returns the annotated members of an exception type, keyed by their lowercase name."""
    members = {}
    for cls in reversed(exception_type.__mro__):
        for name in getattr(cls, "__annotations__", {}):
            if name not in _RESERVED_ATTRIBUTES and not name.startswith("_"):
                members[name.lower()] = name
    return members


class JsonErrorUnmarshaller:
    """
    Creates the exception for an error code. An unmarshaller without an error code matches every error.
    Services with special error bodies can pass subclasses as custom unmarshallers in their error shape metadata.
    """

    exception_type: Type[ServiceException]
    error_code: Optional[str]

    def __init__(self, exception_type: Type[ServiceException], error_code: Optional[str] = None):
        self.exception_type = exception_type
        self.error_code = error_code
        self._members = _modeled_members(exception_type)

    def matches(self, error_code: Optional[str]) -> bool:
        return self.error_code is None or self.error_code == error_code

    def unmarshall(self, content: JsonErrorContent, message: Optional[str]) -> ServiceException:
        """
        Creates the exception and copies the modeled members of the exception type from the body (matched case
        insensitively) onto it.
        """
        exception = self.exception_type(message)
        for key, value in content.fields.items():
            member = self._members.get(key.lower())
            if member:
                setattr(exception, member, value)
        return exception

    def __repr__(self):
        return f"JsonErrorUnmarshaller({self.exception_type.__name__}, error_code={self.error_code!r})"


def build_error_unmarshallers(
    error_shapes: Iterable[JsonErrorShapeMetadata],
    base_exception: Type[ServiceException] = ServiceException,
) -> Tuple[JsonErrorUnmarshaller, ...]:
    """
    Builds the ordered error unmarshallers of a service. Custom unmarshallers are used as they are, all other error
    shapes get an unmarshaller for their modeled exception type. A catch-all unmarshaller for the base exception is
    always appended last.

    :param error_shapes: the modeled errors of the service, in matching order
    :param base_exception: the exception raised for all unmatched error codes
    :return: an immutable tuple of unmarshallers
    """
    unmarshallers = []
    for shape in error_shapes:
        if shape.exception_unmarshaller is not None:
            unmarshallers.append(shape.exception_unmarshaller)
        elif shape.modeled_class is not None:
            unmarshallers.append(JsonErrorUnmarshaller(shape.modeled_class, shape.error_code))
        else:
            LOG.warning("Error shape %s has neither an exception type nor an unmarshaller", shape.error_code)

    unmarshallers.append(JsonErrorUnmarshaller(base_exception or ServiceException, None))
    return tuple(unmarshallers)


def find_error_unmarshaller(
    unmarshallers: Iterable[JsonErrorUnmarshaller], error_code: Optional[str]
) -> Optional[JsonErrorUnmarshaller]:
    """Returns the first unmarshaller matching the error code."""
    for unmarshaller in unmarshallers:
        if unmarshaller.matches(error_code):
            return unmarshaller
    return None
