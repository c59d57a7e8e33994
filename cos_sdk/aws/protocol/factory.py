"""
Selection of the wire encoding of a JSON-family client, and the factory deriving all protocol handlers from it.

Services speaking one of the JSON protocols (``json``, ``rest-json``) may additionally accept CBOR or Amazon Ion
encoded bodies. Which encoding a client uses is decided once, when the client is constructed, based on what the
service supports and on the global switches of the ``SdkGlobalConfiguration``:
::

    supports CBOR and CBOR not disabled  ->  CBOR
    supports Ion                         ->  ION_BINARY (or ION_TEXT if Ion binary is disabled)
    otherwise                            ->  JSON
::

Each ``ProtocolVariant`` maps to exactly one ``StructuredDataFactory`` (which creates the body generators and parses
response bodies) and one ``ContentTypeResolver``. Both lookups are always done with the same variant value, so the
encoding of a body and the content type it is sent with never diverge.

The ``SdkJsonProtocolFactory`` captures the result of this selection, together with the ordered error unmarshallers
of the service, and uses it to create the per-operation marshallers and response handlers. It is immutable after
construction and can be shared between threads.
"""
import abc
import datetime
import enum
import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple

import cbor2
from amazon.ion import simpleion
from amazon.ion.simple_types import IonPyNull
from botocore.utils import parse_timestamp

from cos_sdk.aws.api import ServiceResponse
from cos_sdk.config import SdkGlobalConfiguration, load_global_configuration
from cos_sdk.constants import (
    APPLICATION_AMZ_CBOR_PREFIX,
    APPLICATION_AMZ_ION_PREFIX,
    APPLICATION_AMZ_JSON_PREFIX,
    TEXT_AMZ_ION_PREFIX,
)
from cos_sdk.utils.strings import base64_decode, to_str

from .errors import JsonErrorUnmarshaller, build_error_unmarshallers
from .generator import (
    NO_OP_GENERATOR,
    CborGenerator,
    IonGenerator,
    JsonGenerator,
    StructuredGenerator,
)
from .handlers import JsonErrorResponseHandler, JsonResponseHandler, JsonUnmarshallerContext
from .marshaller import EmptyBodyMarshaller, JsonProtocolMarshaller
from .model import JsonClientMetadata, JsonOperationMetadata, OperationInfo, Protocol

LOG = logging.getLogger(__name__)

# binary Ion documents start with this version marker
ION_BINARY_VERSION_MARKER = b"\xe0\x01\x00\xea"

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


class ProtocolConfigurationError(Exception):
    """
    Error which indicates that the protocol factory has been set up or used in an invalid way. This is a programming
    error: it is raised when a client or marshaller is constructed and must never be retried.
    """

    pass


class ProtocolVariant(enum.Enum):
    """The wire encodings a JSON-family client can use for request and response bodies."""

    JSON = "json"
    CBOR = "cbor"
    ION_TEXT = "ion-text"
    ION_BINARY = "ion-binary"


def resolve_variant(
    supports_cbor: bool,
    cbor_disabled: bool,
    supports_ion: bool,
    ion_binary_disabled: bool,
) -> ProtocolVariant:
    """
    Resolves the wire encoding of a client. CBOR takes precedence over Ion, Ion takes precedence over plain JSON.

    :param supports_cbor: whether the service supports CBOR
    :param cbor_disabled: whether CBOR has been disabled globally
    :param supports_ion: whether the service supports Ion
    :param ion_binary_disabled: whether the binary Ion encoding has been disabled globally
    :return: the variant to use for the whole lifetime of the client
    """
    if supports_cbor and not cbor_disabled:
        return ProtocolVariant.CBOR
    if supports_ion:
        return ProtocolVariant.ION_TEXT if ion_binary_disabled else ProtocolVariant.ION_BINARY
    return ProtocolVariant.JSON


def _to_plain(value: Any) -> Any:
    # the Ion reader returns its own container and null types, convert them to plain dicts, lists and None
    if isinstance(value, IonPyNull):
        return None
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


class StructuredDataFactory(abc.ABC):
    """
    Creates generators for request bodies, and reads response bodies, of one wire encoding. Instances are stateless
    and shared by all clients using the encoding.
    """

    variant: ProtocolVariant

    @abc.abstractmethod
    def create_generator(self) -> StructuredGenerator:
        raise NotImplementedError

    @abc.abstractmethod
    def parse(self, body: bytes) -> Any:
        """Decodes a (non-empty) response body into dicts, lists and scalars."""
        raise NotImplementedError

    def decode_blob(self, value: Any) -> Optional[bytes]:
        if value is None:
            return None
        return bytes(value)

    def decode_timestamp(self, value: Any) -> Optional[datetime.datetime]:
        if value is None or isinstance(value, datetime.datetime):
            return value
        return parse_timestamp(value)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.variant.value})"


class JsonDataFactory(StructuredDataFactory):
    variant = ProtocolVariant.JSON

    def create_generator(self) -> StructuredGenerator:
        return JsonGenerator()

    def parse(self, body: bytes) -> Any:
        return json.loads(to_str(body))

    def decode_blob(self, value: Any) -> Optional[bytes]:
        if value is None:
            return None
        return base64_decode(value)


class CborDataFactory(StructuredDataFactory):
    variant = ProtocolVariant.CBOR

    def create_generator(self) -> StructuredGenerator:
        return CborGenerator()

    def parse(self, body: bytes) -> Any:
        return cbor2.loads(body)

    def decode_timestamp(self, value: Any) -> Optional[datetime.datetime]:
        # AWS CBOR timestamps are epoch milliseconds
        if isinstance(value, (int, float)):
            return _EPOCH + datetime.timedelta(milliseconds=value)
        return super().decode_timestamp(value)


class IonDataFactory(StructuredDataFactory):
    binary: bool

    def __init__(self, binary: bool):
        self.binary = binary
        self.variant = ProtocolVariant.ION_BINARY if binary else ProtocolVariant.ION_TEXT

    def create_generator(self) -> StructuredGenerator:
        return IonGenerator(binary=self.binary)

    def parse(self, body: bytes) -> Any:
        # services may answer in either representation, independent of the one we sent
        if not body.startswith(ION_BINARY_VERSION_MARKER):
            body = to_str(body)
        return _to_plain(simpleion.loads(body, single_value=True))


SDK_JSON_FACTORY = JsonDataFactory()
SDK_CBOR_FACTORY = CborDataFactory()
SDK_ION_BINARY_FACTORY = IonDataFactory(binary=True)
SDK_ION_TEXT_FACTORY = IonDataFactory(binary=False)

_DATA_FACTORIES: Dict[ProtocolVariant, StructuredDataFactory] = {
    ProtocolVariant.JSON: SDK_JSON_FACTORY,
    ProtocolVariant.CBOR: SDK_CBOR_FACTORY,
    ProtocolVariant.ION_BINARY: SDK_ION_BINARY_FACTORY,
    ProtocolVariant.ION_TEXT: SDK_ION_TEXT_FACTORY,
}


class ContentTypeResolver:
    """
    Resolves the content type of request bodies. The content type is the variant specific prefix completed with the
    protocol version of the service (f.e. ``application/x-amz-json-1.1``), unless the service overrides it.
    """

    variant: ProtocolVariant
    prefix: str

    def __init__(self, variant: ProtocolVariant, prefix: str):
        self.variant = variant
        self.prefix = prefix

    def resolve_content_type(self, metadata: JsonClientMetadata) -> str:
        if metadata.content_type_override:
            return metadata.content_type_override
        return f"{self.prefix}{metadata.protocol_version}"

    def __repr__(self):
        return f"ContentTypeResolver({self.prefix}*)"


JSON_CONTENT_TYPE_RESOLVER = ContentTypeResolver(ProtocolVariant.JSON, APPLICATION_AMZ_JSON_PREFIX)
CBOR_CONTENT_TYPE_RESOLVER = ContentTypeResolver(ProtocolVariant.CBOR, APPLICATION_AMZ_CBOR_PREFIX)
ION_BINARY_CONTENT_TYPE_RESOLVER = ContentTypeResolver(
    ProtocolVariant.ION_BINARY, APPLICATION_AMZ_ION_PREFIX
)
ION_TEXT_CONTENT_TYPE_RESOLVER = ContentTypeResolver(ProtocolVariant.ION_TEXT, TEXT_AMZ_ION_PREFIX)

_CONTENT_TYPE_RESOLVERS: Dict[ProtocolVariant, ContentTypeResolver] = {
    ProtocolVariant.JSON: JSON_CONTENT_TYPE_RESOLVER,
    ProtocolVariant.CBOR: CBOR_CONTENT_TYPE_RESOLVER,
    ProtocolVariant.ION_BINARY: ION_BINARY_CONTENT_TYPE_RESOLVER,
    ProtocolVariant.ION_TEXT: ION_TEXT_CONTENT_TYPE_RESOLVER,
}


def build_encoder_factory(variant: ProtocolVariant) -> StructuredDataFactory:
    """
    :param variant: the resolved wire encoding
    :return: the shared data factory of the variant
    :raises ProtocolConfigurationError: if the variant is unknown
    """
    try:
        return _DATA_FACTORIES[variant]
    except KeyError:
        raise ProtocolConfigurationError(f"Unsupported protocol variant: {variant!r}") from None


def build_content_type_resolver(variant: ProtocolVariant) -> ContentTypeResolver:
    """
    :param variant: the resolved wire encoding
    :return: the content type resolver of the variant
    :raises ProtocolConfigurationError: if the variant is unknown
    """
    try:
        return _CONTENT_TYPE_RESOLVERS[variant]
    except KeyError:
        raise ProtocolConfigurationError(f"Unsupported protocol variant: {variant!r}") from None


def select_empty_body_marshaller(operation_info: OperationInfo) -> EmptyBodyMarshaller:
    """
    Decides what an operation sends if its explicit payload member is not set: nothing (``NULL``) for operations
    without payload members, an empty document (``EMPTY``) otherwise.

    :raises ProtocolConfigurationError: for the API Gateway protocol, which has its own factory and must never reach
                                        this one
    """
    if operation_info.protocol == Protocol.API_GATEWAY:
        raise ProtocolConfigurationError(
            "Detected the API_GATEWAY protocol which should not be used with this protocol factory."
        )
    if not operation_info.has_payload_members:
        return EmptyBodyMarshaller.NULL
    return EmptyBodyMarshaller.EMPTY


class SdkJsonProtocolFactory:
    """
    Creates the marshallers and response handlers of a JSON-family client, all using the single wire encoding
    resolved when the factory is created.
    """

    metadata: JsonClientMetadata
    variant: ProtocolVariant
    data_factory: StructuredDataFactory
    content_type_resolver: ContentTypeResolver
    error_unmarshallers: Tuple[JsonErrorUnmarshaller, ...]

    def __init__(
        self,
        metadata: JsonClientMetadata,
        configuration: Optional[SdkGlobalConfiguration] = None,
    ):
        """
        :param metadata: the static description of the service
        :param configuration: snapshot of the global protocol switches, taken from the environment if not given
        """
        if configuration is None:
            configuration = load_global_configuration()

        self.metadata = metadata
        self.variant = resolve_variant(
            supports_cbor=metadata.supports_cbor,
            cbor_disabled=configuration.cbor_disabled,
            supports_ion=metadata.supports_ion,
            ion_binary_disabled=configuration.ion_binary_disabled,
        )
        self.data_factory = build_encoder_factory(self.variant)
        self.content_type_resolver = build_content_type_resolver(self.variant)
        self.error_unmarshallers = build_error_unmarshallers(
            metadata.error_shapes, metadata.base_service_exception
        )
        LOG.debug(
            "Using %s wire encoding (content type %s) with %d error unmarshallers",
            self.variant.value,
            self.content_type,
            len(self.error_unmarshallers),
        )

    @property
    def content_type(self) -> str:
        return self.content_type_resolver.resolve_content_type(self.metadata)

    def create_generator(self, operation_info: Optional[OperationInfo] = None) -> StructuredGenerator:
        """
        Creates the body generator for a request. Operations without payload members do not send a body at all
        (the no-op generator is returned), except for the ``AWS_JSON`` protocol, which always expects a document.

        :param operation_info: the operation to create the generator for, or None to always create a real generator
        :return: a new generator, or the shared no-op generator
        """
        if (
            operation_info is None
            or operation_info.has_payload_members
            or operation_info.protocol == Protocol.AWS_JSON
        ):
            return self.data_factory.create_generator()
        return NO_OP_GENERATOR

    def select_empty_body_marshaller(self, operation_info: OperationInfo) -> EmptyBodyMarshaller:
        return select_empty_body_marshaller(operation_info)

    def create_protocol_marshaller(
        self, operation_info: OperationInfo, original_request: Any = None
    ) -> JsonProtocolMarshaller:
        """
        Creates the marshaller for a single request of the given operation. The marshaller has already been started,
        i.e., request members can be marshalled right away.

        :raises ProtocolConfigurationError: if the operation uses the API Gateway protocol
        """
        empty_body_marshaller = self.select_empty_body_marshaller(operation_info)
        marshaller = JsonProtocolMarshaller(
            generator=self.create_generator(operation_info),
            content_type=self.content_type,
            operation_info=operation_info,
            original_request=original_request,
            empty_body_marshaller=empty_body_marshaller,
        )
        marshaller.start_marshalling()
        return marshaller

    def create_response_handler(
        self,
        operation_metadata: JsonOperationMetadata,
        unmarshaller: Optional[Callable[[JsonUnmarshallerContext], ServiceResponse]],
    ) -> JsonResponseHandler:
        """Returns the response handler to be used for handling a successful response."""
        return JsonResponseHandler(self.data_factory, unmarshaller, operation_metadata)

    def create_error_response_handler(
        self, custom_error_code_field_name: Optional[str] = None, service_name: Optional[str] = None
    ) -> JsonErrorResponseHandler:
        """Creates a response handler for handling an error response (non 2xx response)."""
        return JsonErrorResponseHandler(
            self.data_factory,
            self.error_unmarshallers,
            custom_error_code_field_name=custom_error_code_field_name,
            service_name=service_name,
        )
