from .core import (
    AmazonWebServiceResponse,
    ErrorType,
    ResponseMetadata,
    SdkClientException,
    ServiceException,
    ServiceRequest,
    ServiceResponse,
)

__all__ = [
    "AmazonWebServiceResponse",
    "ErrorType",
    "ResponseMetadata",
    "SdkClientException",
    "ServiceException",
    "ServiceRequest",
    "ServiceResponse",
]
