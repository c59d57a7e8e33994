"""
Response handlers for the JSON-family protocols.

The ``JsonResponseHandler`` turns a successful (2xx) response into the result of an operation, the
``JsonErrorResponseHandler`` turns all other responses into a typed ``ServiceException``. Both read the body with the
``StructuredDataFactory`` of the wire encoding the client was created with.
"""
import datetime
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple

from werkzeug import Response

from cos_sdk.aws.api import (
    AmazonWebServiceResponse,
    ErrorType,
    ResponseMetadata,
    SdkClientException,
    ServiceException,
    ServiceResponse,
)
from cos_sdk.constants import HEADER_AMZ_CRC32, HEADER_AMZN_REQUEST_ID
from cos_sdk.utils.strings import checksum_crc32, truncate

from .errors import (
    JsonErrorContent,
    JsonErrorUnmarshaller,
    find_error_unmarshaller,
    parse_error_code,
    parse_error_message,
)
from .model import JsonOperationMetadata

if TYPE_CHECKING:
    from .factory import StructuredDataFactory

LOG = logging.getLogger(__name__)


class Crc32MismatchError(SdkClientException):
    """Raised if the CRC32 checksum sent by the service does not match the received body."""

    pass


class JsonUnmarshallerContext:
    """
    Gives the unmarshaller of an operation access to the parsed body and the headers of a response. Blobs and
    timestamps are decoded according to the wire encoding of the response.
    """

    content: Any
    response: Response
    data_factory: "StructuredDataFactory"

    def __init__(self, content: Any, response: Response, data_factory: "StructuredDataFactory"):
        self.content = content
        self.response = response
        self.data_factory = data_factory

    def get(self, name: str, default: Any = None) -> Any:
        if not isinstance(self.content, dict):
            return default
        return self.content.get(name, default)

    def blob(self, name: str) -> Optional[bytes]:
        return self.data_factory.decode_blob(self.get(name))

    def timestamp(self, name: str) -> Optional[datetime.datetime]:
        return self.data_factory.decode_timestamp(self.get(name))

    def header(self, name: str) -> Optional[str]:
        return self.response.headers.get(name)

    @property
    def raw(self) -> bytes:
        return self.response.get_data()


class JsonResponseHandler:
    data_factory: "StructuredDataFactory"
    unmarshaller: Optional[Callable[[JsonUnmarshallerContext], ServiceResponse]]
    operation_metadata: JsonOperationMetadata

    def __init__(
        self,
        data_factory: "StructuredDataFactory",
        unmarshaller: Optional[Callable[[JsonUnmarshallerContext], ServiceResponse]],
        operation_metadata: JsonOperationMetadata = None,
    ):
        self.data_factory = data_factory
        self.unmarshaller = unmarshaller
        self.operation_metadata = operation_metadata or JsonOperationMetadata()

    def handle(self, response: Response) -> AmazonWebServiceResponse:
        """
        :param response: the successful HTTP response
        :return: the unmarshalled result together with the response metadata
        :raises Crc32MismatchError: if the body does not match the checksum header
        :raises SdkClientException: if the body cannot be parsed
        """
        request_id = response.headers.get(HEADER_AMZN_REQUEST_ID)
        LOG.debug("Received successful response: %s, request id: %s", response.status_code, request_id)

        body = response.get_data()
        self._check_crc32(response, body)

        content = None
        metadata = self.operation_metadata
        if body and metadata.is_payload_json and not metadata.has_streaming_success_response:
            try:
                content = self.data_factory.parse(body)
            except Exception as e:
                raise SdkClientException(
                    f"Unable to unmarshall response ({e}). Response body: {truncate(repr(body))}"
                ) from e

        result = None
        if self.unmarshaller:
            result = self.unmarshaller(JsonUnmarshallerContext(content, response, self.data_factory))

        return AmazonWebServiceResponse(
            result=result,
            response_metadata=ResponseMetadata(request_id=request_id, headers=dict(response.headers)),
        )

    @staticmethod
    def _check_crc32(response: Response, body: bytes):
        expected = response.headers.get(HEADER_AMZ_CRC32)
        if expected is None:
            return
        actual = checksum_crc32(body)
        if str(actual) != expected.strip():
            raise Crc32MismatchError(
                f"Client calculated crc32 checksum didn't match that calculated by server side "
                f"(expected {expected}, got {actual})"
            )


class JsonErrorResponseHandler:
    data_factory: "StructuredDataFactory"
    error_unmarshallers: Tuple[JsonErrorUnmarshaller, ...]
    custom_error_code_field_name: Optional[str]
    service_name: Optional[str]

    def __init__(
        self,
        data_factory: "StructuredDataFactory",
        error_unmarshallers: Tuple[JsonErrorUnmarshaller, ...],
        custom_error_code_field_name: Optional[str] = None,
        service_name: Optional[str] = None,
    ):
        self.data_factory = data_factory
        self.error_unmarshallers = error_unmarshallers
        self.custom_error_code_field_name = custom_error_code_field_name
        self.service_name = service_name

    def handle(self, response: Response) -> ServiceException:
        """
        Classifies an error response. This never raises for malformed bodies or unknown error codes, those result
        in the base exception of the service.

        :param response: the HTTP error response
        :return: the exception to raise
        """
        content = self._parse_content(response)
        error_code = parse_error_code(response.headers, content, self.custom_error_code_field_name)
        message = parse_error_message(response.headers, content)

        exception = self._create_exception(error_code, content, message)
        if error_code:
            exception.code = error_code
        if exception.message is None:
            exception.message = message
        exception.status_code = response.status_code
        exception.error_type = ErrorType.Service if response.status_code >= 500 else ErrorType.Client
        exception.request_id = response.headers.get(HEADER_AMZN_REQUEST_ID)
        exception.service_name = self.service_name
        exception.headers = response.headers
        exception.raw_response = content.raw

        LOG.debug(
            "Received error response: %s, error code: %s, request id: %s",
            response.status_code,
            error_code,
            exception.request_id,
        )
        return exception

    def _parse_content(self, response: Response) -> JsonErrorContent:
        body = response.get_data()
        if not body:
            return JsonErrorContent(body, {})
        try:
            fields = self.data_factory.parse(body)
        except Exception:
            LOG.debug("Unable to parse HTTP response content: %s", truncate(repr(body)), exc_info=True)
            return JsonErrorContent(body, {})
        if not isinstance(fields, dict):
            return JsonErrorContent(body, {})
        return JsonErrorContent(body, fields)

    def _create_exception(
        self, error_code: Optional[str], content: JsonErrorContent, message: Optional[str]
    ) -> ServiceException:
        unmarshaller = find_error_unmarshaller(self.error_unmarshallers, error_code)
        if unmarshaller is not None:
            try:
                return unmarshaller.unmarshall(content, message)
            except Exception:
                LOG.debug("Unable to unmarshall exception content with %s", unmarshaller, exc_info=True)

        return ServiceException("Unable to unmarshall exception response with the unmarshallers provided")
