import enum
from typing import Any, Dict, NamedTuple, Optional, TypedDict

from werkzeug.datastructures import Headers


class ServiceRequest(TypedDict):
    pass


ServiceResponse = Any


class SdkClientException(Exception):
    """
    An exception that indicates that a failure occurred on the client side, i.e., the request could not be built or
    sent, or the response could not be processed. The service has either not been reached, or its response is
    unusable.
    """

    pass


class ErrorType(enum.Enum):
    """Which side is at fault for a service error."""

    Client = "Client"
    Service = "Service"
    Unknown = "Unknown"


class ServiceException(Exception):
    """
    An exception that indicates that a service returned an error response.
    Subclasses for the modeled errors of a service set ``code``, ``sender_fault`` and ``status_code`` as class
    attributes. The error response handler populates the remaining attributes from the actual HTTP response.
    """

    code: str = "ServiceException"
    sender_fault: bool = False
    status_code: int = 400

    message: Optional[str]
    error_type: ErrorType
    request_id: Optional[str]
    service_name: Optional[str]
    headers: Headers
    raw_response: bytes

    def __init__(self, message: str = None):
        super().__init__(message)
        self.message = message
        self.error_type = ErrorType.Unknown
        self.request_id = None
        self.service_name = None
        self.headers = Headers()
        self.raw_response = b""

    def __str__(self):
        return (
            f"{self.message} (Service: {self.service_name}; Status Code: {self.status_code}; "
            f"Error Code: {self.code}; Request ID: {self.request_id})"
        )


class ResponseMetadata(NamedTuple):
    request_id: Optional[str] = None
    headers: Optional[Dict[str, str]] = None


class AmazonWebServiceResponse(NamedTuple):
    """The result of a successful service call together with the metadata of its HTTP response."""

    result: ServiceResponse
    response_metadata: ResponseMetadata
