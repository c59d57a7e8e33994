import os

import cos_sdk

# SDK version
VERSION = cos_sdk.__version__

USER_AGENT = f"cos-sdk-core/{VERSION}"

# default encoding used to convert strings to byte arrays
DEFAULT_ENCODING = "utf-8"

# environment variables which globally disable wire encodings
ENV_CBOR_DISABLE = "AWS_CBOR_DISABLE"
ENV_ION_BINARY_DISABLE = "AWS_ION_BINARY_DISABLE"

# environment variables for region and profile resolution
ENV_AWS_REGION = "AWS_REGION"
ENV_AWS_CONFIG_FILE = "AWS_CONFIG_FILE"
ENV_AWS_PROFILE = "AWS_PROFILE"

DEFAULT_PROFILE_NAME = "default"
DEFAULT_CONFIG_FILE = os.path.join(os.path.expanduser("~"), ".aws", "config")

# profile sections in the config file may be declared as "[profile <name>]"
PROFILE_PREFIX = "profile "

# mime type prefixes, completed with the protocol version of the service (e.g., "1.1")
APPLICATION_AMZ_JSON_PREFIX = "application/x-amz-json-"
APPLICATION_AMZ_CBOR_PREFIX = "application/x-amz-cbor-"
APPLICATION_AMZ_ION_PREFIX = "application/x-amz-ion-"
TEXT_AMZ_ION_PREFIX = "text/x-amz-ion-"

# HTTP headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_AMZ_TARGET = "X-Amz-Target"
HEADER_AMZN_ERROR_TYPE = "x-amzn-ErrorType"
HEADER_AMZN_REQUEST_ID = "x-amzn-RequestId"
HEADER_AMZ_CRC32 = "x-amz-crc32"

# body field carrying the error code in JSON error responses
ERROR_CODE_FIELD_NAME = "__type"
ERROR_MESSAGE_FIELD_NAMES = ("message", "Message", "errorMessage")

TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")

LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
SDK_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [SDK_LOG_TRACE]
