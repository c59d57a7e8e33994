"""Generic client for services speaking one of the JSON-family protocols."""
import logging
from typing import Callable, Iterable, Optional

from cos_sdk.aws.api import SdkClientException, ServiceRequest, ServiceResponse
from cos_sdk.config import SdkGlobalConfiguration
from cos_sdk.http.client import HttpClient, SimpleRequestsClient
from cos_sdk.regions import AwsRegionProvider, DefaultAwsRegionProviderChain

from .protocol.factory import SdkJsonProtocolFactory
from .protocol.handlers import JsonUnmarshallerContext
from .protocol.marshaller import marshall_request
from .protocol.model import JsonClientMetadata, JsonOperationMetadata, MarshallingInfo, OperationInfo

LOG = logging.getLogger(__name__)


def create_default_endpoint(endpoint_prefix: str, region: str) -> str:
    return f"https://{endpoint_prefix}.{region}.amazonaws.com"


class JsonServiceClient:
    """
    Base class of the clients of JSON-family services. The wire encoding is resolved once, when the client is
    created, and used for all requests of the client.
    """

    service_name: str
    endpoint_prefix: str
    metadata: JsonClientMetadata
    protocol_factory: SdkJsonProtocolFactory
    http_client: HttpClient
    endpoint: str

    def __init__(
        self,
        service_name: str,
        endpoint_prefix: str,
        metadata: JsonClientMetadata,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        configuration: Optional[SdkGlobalConfiguration] = None,
        region_provider: Optional[AwsRegionProvider] = None,
        custom_error_code_field_name: Optional[str] = None,
    ):
        """
        :param service_name: the name of the service, attached to all service exceptions
        :param endpoint_prefix: the prefix of the default endpoint host (f.e. ``kms``)
        :param metadata: the static description of the service
        :param endpoint: the endpoint URL, defaults to the regional AWS endpoint
        :param region: the region of the default endpoint, resolved with the region provider if not set
        :param http_client: the HTTP client to send the requests with
        :param configuration: the global protocol switches, taken from the environment if not set
        :param region_provider: the provider used to look up the region, defaults to the default provider chain
        :param custom_error_code_field_name: body field carrying the error code, if it is not ``__type``
        :raises SdkClientException: if neither an endpoint nor a region is given, and no region can be found
        """
        self.service_name = service_name
        self.endpoint_prefix = endpoint_prefix
        self.metadata = metadata
        self.protocol_factory = SdkJsonProtocolFactory(metadata, configuration)
        self.http_client = http_client or SimpleRequestsClient()

        if not endpoint:
            region = region or (region_provider or DefaultAwsRegionProviderChain()).get_region()
            if not region:
                raise SdkClientException(
                    "Unable to find a region via the region provider chain. "
                    "Must provide an explicit region or endpoint."
                )
            endpoint = create_default_endpoint(endpoint_prefix, region)
        self.endpoint = endpoint.rstrip("/")

        self._error_response_handler = self.protocol_factory.create_error_response_handler(
            custom_error_code_field_name=custom_error_code_field_name, service_name=service_name
        )

    def invoke(
        self,
        operation_info: OperationInfo,
        request: ServiceRequest,
        bindings: Iterable[MarshallingInfo],
        unmarshaller: Optional[Callable[[JsonUnmarshallerContext], ServiceResponse]] = None,
        operation_metadata: JsonOperationMetadata = None,
    ) -> ServiceResponse:
        """
        Calls an operation of the service.

        :param operation_info: the operation to call
        :param request: the request of the operation
        :param bindings: the member bindings of the request
        :param unmarshaller: creates the result from the response, the result is None if not set
        :param operation_metadata: describes the response of the operation
        :return: the result of the operation
        :raises ServiceException: if the service returned an error response (typed according to its error code)
        :raises SdkClientException: if the request could not be sent, or the response could not be processed
        """
        marshaller = self.protocol_factory.create_protocol_marshaller(operation_info, request)
        marshall_request(request, bindings, marshaller)
        http_request = marshaller.finish_marshalling(self.endpoint)

        LOG.debug(
            "Sending request %s to %s", operation_info.operation_identifier or operation_info.request_uri, self.endpoint
        )
        response = self.http_client.request(http_request)

        if 200 <= response.status_code < 300:
            handler = self.protocol_factory.create_response_handler(
                operation_metadata or JsonOperationMetadata(), unmarshaller
            )
            return handler.handle(response).result

        raise self._error_response_handler.handle(response)

    def close(self):
        self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
