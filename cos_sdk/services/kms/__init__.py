from .client import CLIENT_METADATA, KMSClient
from .model import (
    AWSKMSException,
    DisabledException,
    InvalidCiphertextException,
    KMSInvalidStateException,
    NotFoundException,
)

__all__ = [
    "CLIENT_METADATA",
    "KMSClient",
    "AWSKMSException",
    "DisabledException",
    "InvalidCiphertextException",
    "KMSInvalidStateException",
    "NotFoundException",
]
