"""
Static descriptions of services and operations, as they are consumed by the protocol factory and the marshallers.

Everything in here is immutable. The descriptions are usually defined once per service (as module-level constants)
and shared by all clients of that service.
"""
import enum
from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple, Type

from cos_sdk.aws.api import ServiceException

if TYPE_CHECKING:
    from .errors import JsonErrorUnmarshaller


class Protocol(str, enum.Enum):
    """The wire protocols of AWS compatible services."""

    AWS_JSON = "json"
    REST_JSON = "rest-json"
    CBOR = "cbor"
    ION = "ion"
    API_GATEWAY = "api-gateway"
    QUERY = "query"
    REST_XML = "rest-xml"
    EC2 = "ec2"


class MarshallLocation(enum.Enum):
    """Where the value of a request member ends up in the HTTP request."""

    PAYLOAD = "payload"
    HEADER = "header"
    PATH = "path"
    # path parameter which may contain slashes (f.e. "{Key+}")
    GREEDY_PATH = "greedy-path"
    QUERY_PARAM = "querystring"


class MarshallingType(enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIG_DECIMAL = "bigdecimal"
    BOOLEAN = "boolean"
    DATE = "timestamp"
    BYTE_BUFFER = "blob"
    LIST = "list"
    MAP = "map"
    STRUCTURED = "structure"
    JSON_VALUE = "jsonvalue"


class MarshallingInfo(NamedTuple):
    """
    Binds a member of a request to its location in the HTTP request.

    :ivar marshalling_type: the type of the member value
    :ivar location: where the value is written to
    :ivar location_name: the name of the header / query parameter / path placeholder / payload field
    :ivar member_name: the key of the member in the request dict, defaults to the location name
    :ivar explicit_payload_member: whether this member is the entire payload of the request
    :ivar timestamp_format: overrides the default timestamp format of the location (``iso8601``, ``rfc822``,
                            ``unixTimestamp``)
    """

    marshalling_type: MarshallingType
    location: MarshallLocation
    location_name: str
    member_name: Optional[str] = None
    explicit_payload_member: bool = False
    timestamp_format: Optional[str] = None

    @property
    def member(self) -> str:
        return self.member_name or self.location_name


class OperationInfo(NamedTuple):
    """
    Describes a single operation (API call) of a service.

    :ivar protocol: the wire protocol the operation is called with
    :ivar request_uri: the request path, possibly containing path placeholders (f.e. ``/{Bucket}/{Key+}``)
    :ivar http_method: the HTTP method
    :ivar operation_identifier: the operation identifier, for ``AWS_JSON`` it's sent in the ``X-Amz-Target`` header
                                (f.e. ``TrentService.Decrypt``)
    :ivar service_name: the name of the service (used in error messages)
    :ivar has_explicit_payload_member: whether a single member of the request is the entire payload
    :ivar has_payload_members: whether the request has any members bound to the payload
    """

    protocol: Protocol
    request_uri: str
    http_method: str
    operation_identifier: Optional[str] = None
    service_name: Optional[str] = None
    has_explicit_payload_member: bool = False
    has_payload_members: bool = False


class JsonOperationMetadata(NamedTuple):
    """Describes the response of an operation."""

    has_streaming_success_response: bool = False
    is_payload_json: bool = True


class JsonErrorShapeMetadata(NamedTuple):
    """
    Binds a modeled error of a service to its error code.

    :ivar error_code: the error code sent by the service (f.e. ``KMSInvalidStateException``)
    :ivar modeled_class: the exception raised for this error code
    :ivar exception_unmarshaller: optional custom unmarshaller, used instead of one synthesized from the other fields
    :ivar http_status_code: the HTTP status code the service uses for this error, if modeled
    """

    error_code: str
    modeled_class: Optional[Type[ServiceException]] = None
    exception_unmarshaller: Optional["JsonErrorUnmarshaller"] = None
    http_status_code: Optional[int] = None


class JsonClientMetadata(NamedTuple):
    """
    Everything the protocol factory needs to know about a service.

    :ivar protocol_version: the JSON protocol version of the service (f.e. ``1.1``), completes the content type
    :ivar content_type_override: content type used instead of the variant specific one (f.e. ``application/json``)
    :ivar supports_cbor: whether the service accepts CBOR encoded bodies
    :ivar supports_ion: whether the service accepts Ion encoded bodies
    :ivar base_service_exception: the exception raised for errors without a modeled error code
    :ivar error_shapes: the modeled errors of the service, in the order they are matched
    """

    protocol_version: str = "1.1"
    content_type_override: Optional[str] = None
    supports_cbor: bool = False
    supports_ion: bool = False
    base_service_exception: Type[ServiceException] = ServiceException
    error_shapes: Tuple[JsonErrorShapeMetadata, ...] = ()
