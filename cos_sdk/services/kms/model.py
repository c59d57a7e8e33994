from typing import Dict, List, Optional, TypedDict

from cos_sdk.aws.api import ServiceException, ServiceRequest

CiphertextType = bytes
CustomKeyStoreIdType = str
EncryptionAlgorithmSpec = str
EncryptionContextKey = str
EncryptionContextValue = str
GrantTokenType = str
KeyIdType = str
NumberOfBytesType = int
PlaintextType = bytes

EncryptionContextType = Dict[EncryptionContextKey, EncryptionContextValue]
GrantTokenList = List[GrantTokenType]


class EncryptionAlgorithm(str):
    SYMMETRIC_DEFAULT = "SYMMETRIC_DEFAULT"
    RSAES_OAEP_SHA_1 = "RSAES_OAEP_SHA_1"
    RSAES_OAEP_SHA_256 = "RSAES_OAEP_SHA_256"


class AWSKMSException(ServiceException):
    """Base exception for all errors returned by KMS."""

    code: str = "AWSKMSException"
    sender_fault: bool = False
    status_code: int = 400


class DependencyTimeoutException(AWSKMSException):
    code: str = "DependencyTimeoutException"
    sender_fault: bool = False
    status_code: int = 500


class DisabledException(AWSKMSException):
    code: str = "DisabledException"
    sender_fault: bool = False
    status_code: int = 409


class IncorrectKeyException(AWSKMSException):
    code: str = "IncorrectKeyException"
    sender_fault: bool = False
    status_code: int = 400


class InvalidArnException(AWSKMSException):
    code: str = "InvalidArnException"
    sender_fault: bool = False
    status_code: int = 400


class InvalidCiphertextException(AWSKMSException):
    code: str = "InvalidCiphertextException"
    sender_fault: bool = False
    status_code: int = 400


class InvalidGrantTokenException(AWSKMSException):
    code: str = "InvalidGrantTokenException"
    sender_fault: bool = False
    status_code: int = 400


class InvalidKeyUsageException(AWSKMSException):
    code: str = "InvalidKeyUsageException"
    sender_fault: bool = False
    status_code: int = 400


class KMSInternalException(AWSKMSException):
    code: str = "KMSInternalException"
    sender_fault: bool = False
    status_code: int = 500


class KMSInvalidStateException(AWSKMSException):
    """
    The request was rejected because the state of the specified resource is not valid for this request, f.e. the key
    is pending deletion.
    """

    code: str = "KMSInvalidStateException"
    sender_fault: bool = False
    status_code: int = 409


class KeyUnavailableException(AWSKMSException):
    code: str = "KeyUnavailableException"
    sender_fault: bool = False
    status_code: int = 500


class NotFoundException(AWSKMSException):
    code: str = "NotFoundException"
    sender_fault: bool = False
    status_code: int = 400


class CustomKeyStoreNotFoundException(AWSKMSException):
    code: str = "CustomKeyStoreNotFoundException"
    sender_fault: bool = False
    status_code: int = 400


class CustomKeyStoreInvalidStateException(AWSKMSException):
    code: str = "CustomKeyStoreInvalidStateException"
    sender_fault: bool = False
    status_code: int = 400


class CancelKeyDeletionRequest(ServiceRequest):
    KeyId: KeyIdType


class CancelKeyDeletionResponse(TypedDict, total=False):
    KeyId: Optional[KeyIdType]


class DecryptRequest(ServiceRequest, total=False):
    CiphertextBlob: CiphertextType
    EncryptionContext: Optional[EncryptionContextType]
    GrantTokens: Optional[GrantTokenList]
    KeyId: Optional[KeyIdType]
    EncryptionAlgorithm: Optional[EncryptionAlgorithmSpec]


class DecryptResponse(TypedDict, total=False):
    KeyId: Optional[KeyIdType]
    Plaintext: Optional[PlaintextType]
    EncryptionAlgorithm: Optional[EncryptionAlgorithmSpec]


class GenerateRandomRequest(ServiceRequest, total=False):
    NumberOfBytes: Optional[NumberOfBytesType]
    CustomKeyStoreId: Optional[CustomKeyStoreIdType]


class GenerateRandomResponse(TypedDict, total=False):
    Plaintext: Optional[PlaintextType]
