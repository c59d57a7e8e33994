"""
Client for the AWS Key Management Service. KMS uses the ``json`` protocol (version 1.1), all operations are
``POST /`` requests with the operation in the ``X-Amz-Target`` header.
"""
from typing import Optional

from cos_sdk.aws.client import JsonServiceClient
from cos_sdk.aws.protocol.handlers import JsonUnmarshallerContext
from cos_sdk.aws.protocol.model import (
    JsonClientMetadata,
    JsonErrorShapeMetadata,
    MarshallingInfo,
    MarshallingType,
    MarshallLocation,
    OperationInfo,
    Protocol,
)
from cos_sdk.config import SdkGlobalConfiguration
from cos_sdk.http.client import HttpClient

from .model import (
    AWSKMSException,
    CancelKeyDeletionRequest,
    CancelKeyDeletionResponse,
    CustomKeyStoreInvalidStateException,
    CustomKeyStoreNotFoundException,
    DecryptRequest,
    DecryptResponse,
    DependencyTimeoutException,
    DisabledException,
    GenerateRandomRequest,
    GenerateRandomResponse,
    IncorrectKeyException,
    InvalidArnException,
    InvalidCiphertextException,
    InvalidGrantTokenException,
    InvalidKeyUsageException,
    KeyIdType,
    KeyUnavailableException,
    KMSInternalException,
    KMSInvalidStateException,
    NotFoundException,
)

SERVICE_NAME = "AWSKMS"
ENDPOINT_PREFIX = "kms"
TARGET_PREFIX = "TrentService"

CLIENT_METADATA = JsonClientMetadata(
    protocol_version="1.1",
    supports_cbor=False,
    supports_ion=False,
    base_service_exception=AWSKMSException,
    error_shapes=tuple(
        JsonErrorShapeMetadata(error_code=exception.code, modeled_class=exception)
        for exception in (
            CustomKeyStoreInvalidStateException,
            CustomKeyStoreNotFoundException,
            DependencyTimeoutException,
            DisabledException,
            IncorrectKeyException,
            InvalidArnException,
            InvalidCiphertextException,
            InvalidGrantTokenException,
            InvalidKeyUsageException,
            KeyUnavailableException,
            KMSInternalException,
            KMSInvalidStateException,
            NotFoundException,
        )
    ),
)


def _operation(name: str) -> OperationInfo:
    return OperationInfo(
        protocol=Protocol.AWS_JSON,
        request_uri="/",
        http_method="POST",
        operation_identifier=f"{TARGET_PREFIX}.{name}",
        service_name=SERVICE_NAME,
        has_explicit_payload_member=False,
        has_payload_members=True,
    )


def _payload(marshalling_type: MarshallingType, name: str) -> MarshallingInfo:
    return MarshallingInfo(marshalling_type, MarshallLocation.PAYLOAD, name)


CANCEL_KEY_DELETION = _operation("CancelKeyDeletion")
CANCEL_KEY_DELETION_BINDINGS = (_payload(MarshallingType.STRING, "KeyId"),)

DECRYPT = _operation("Decrypt")
DECRYPT_BINDINGS = (
    _payload(MarshallingType.BYTE_BUFFER, "CiphertextBlob"),
    _payload(MarshallingType.MAP, "EncryptionContext"),
    _payload(MarshallingType.LIST, "GrantTokens"),
    _payload(MarshallingType.STRING, "KeyId"),
    _payload(MarshallingType.STRING, "EncryptionAlgorithm"),
)

GENERATE_RANDOM = _operation("GenerateRandom")
GENERATE_RANDOM_BINDINGS = (
    _payload(MarshallingType.INTEGER, "NumberOfBytes"),
    _payload(MarshallingType.STRING, "CustomKeyStoreId"),
)


def _unmarshall_cancel_key_deletion(context: JsonUnmarshallerContext) -> CancelKeyDeletionResponse:
    result = CancelKeyDeletionResponse()
    if context.get("KeyId") is not None:
        result["KeyId"] = context.get("KeyId")
    return result


def _unmarshall_decrypt(context: JsonUnmarshallerContext) -> DecryptResponse:
    result = DecryptResponse()
    if context.get("KeyId") is not None:
        result["KeyId"] = context.get("KeyId")
    if context.get("Plaintext") is not None:
        result["Plaintext"] = context.blob("Plaintext")
    if context.get("EncryptionAlgorithm") is not None:
        result["EncryptionAlgorithm"] = context.get("EncryptionAlgorithm")
    return result


def _unmarshall_generate_random(context: JsonUnmarshallerContext) -> GenerateRandomResponse:
    result = GenerateRandomResponse()
    if context.get("Plaintext") is not None:
        result["Plaintext"] = context.blob("Plaintext")
    return result


class KMSClient(JsonServiceClient):
    def __init__(
        self,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        configuration: Optional[SdkGlobalConfiguration] = None,
    ):
        super().__init__(
            service_name=SERVICE_NAME,
            endpoint_prefix=ENDPOINT_PREFIX,
            metadata=CLIENT_METADATA,
            endpoint=endpoint,
            region=region,
            http_client=http_client,
            configuration=configuration,
        )

    def cancel_key_deletion(self, key_id: KeyIdType) -> CancelKeyDeletionResponse:
        """
        Cancels the scheduled deletion of a key. The key is left in the ``Disabled`` state.

        :raises NotFoundException: if the key does not exist
        :raises KMSInvalidStateException: if the key is not pending deletion
        """
        request = CancelKeyDeletionRequest(KeyId=key_id)
        return self.invoke(CANCEL_KEY_DELETION, request, CANCEL_KEY_DELETION_BINDINGS, _unmarshall_cancel_key_deletion)

    def decrypt(self, request: DecryptRequest) -> DecryptResponse:
        """
        Decrypts a ciphertext that was encrypted by a KMS key.

        :raises InvalidCiphertextException: if the ciphertext is corrupted or was not created by KMS
        :raises KMSInvalidStateException: if the key is not in a usable state
        """
        return self.invoke(DECRYPT, request, DECRYPT_BINDINGS, _unmarshall_decrypt)

    def generate_random(
        self, number_of_bytes: Optional[int] = None, custom_key_store_id: Optional[str] = None
    ) -> GenerateRandomResponse:
        request = GenerateRandomRequest()
        if number_of_bytes is not None:
            request["NumberOfBytes"] = number_of_bytes
        if custom_key_store_id is not None:
            request["CustomKeyStoreId"] = custom_key_store_id
        return self.invoke(GENERATE_RANDOM, request, GENERATE_RANDOM_BINDINGS, _unmarshall_generate_random)
