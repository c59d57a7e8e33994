import logging
import os
from typing import Mapping, NamedTuple, Optional, Union

from cos_sdk.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_PROFILE_NAME,
    ENV_AWS_CONFIG_FILE,
    ENV_AWS_PROFILE,
    ENV_AWS_REGION,
    ENV_CBOR_DISABLE,
    ENV_ION_BINARY_DISABLE,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    sdk_log = os.environ.get(env_var_name, "").lower().strip()
    return sdk_log if sdk_log in LOG_LEVELS else False


def parse_boolean_env(env_var_name: str) -> Optional[bool]:
    """Parse the value of the given env variable and return True/False, or None if it is not a boolean value."""
    value = os.environ.get(env_var_name, "").lower().strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    return None


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


def is_flag_set(env_var_name: str, env: Mapping[str, str] = None) -> bool:
    """
    Whether the given flag variable is present in the environment and not set to ``false`` (in any case). This means
    that ``AWS_CBOR_DISABLE=`` (empty) and ``AWS_CBOR_DISABLE=0`` switch the flag on, while
    ``AWS_CBOR_DISABLE=False`` does not.
    """
    env = os.environ if env is None else env
    if env_var_name not in env:
        return False
    return env[env_var_name].strip().lower() != "false"


def get_aws_region(env: Mapping[str, str] = None) -> Optional[str]:
    """Returns the region override from ``AWS_REGION``, or None if it is not set."""
    env = os.environ if env is None else env
    return env.get(ENV_AWS_REGION, "").strip() or None


def get_aws_config_file(env: Mapping[str, str] = None) -> str:
    """Returns the profile file named by ``AWS_CONFIG_FILE``, defaults to ``~/.aws/config``."""
    env = os.environ if env is None else env
    return env.get(ENV_AWS_CONFIG_FILE, "").strip() or DEFAULT_CONFIG_FILE


def get_aws_profile(env: Mapping[str, str] = None) -> str:
    """Returns the profile named by ``AWS_PROFILE``, defaults to ``default``."""
    env = os.environ if env is None else env
    return env.get(ENV_AWS_PROFILE, "").strip() or DEFAULT_PROFILE_NAME


class SdkGlobalConfiguration(NamedTuple):
    """
    Snapshot of the process-wide switches that influence the wire protocol of a client. A snapshot is taken once and
    passed to the protocol factory, which never looks at the environment itself.
    """

    cbor_disabled: bool = False
    ion_binary_disabled: bool = False


def load_global_configuration(env: Mapping[str, str] = None) -> SdkGlobalConfiguration:
    """
    Captures the global protocol switches from the given environment (defaults to ``os.environ``).

    :param env: the environment to read from
    :return: an immutable configuration snapshot
    """
    env = os.environ if env is None else env
    return SdkGlobalConfiguration(
        cbor_disabled=is_flag_set(ENV_CBOR_DISABLE, env),
        ion_binary_disabled=is_flag_set(ENV_ION_BINARY_DISABLE, env),
    )


# whether to enable verbose debug logging
SDK_LOG = eval_log_type("SDK_LOG")
DEBUG = is_env_true("DEBUG") or SDK_LOG in TRACE_LOG_LEVELS

# timeouts (in seconds) of the HTTP client
CONNECTION_TIMEOUT = float(os.environ.get("CONNECTION_TIMEOUT", "").strip() or 10)
SOCKET_TIMEOUT = float(os.environ.get("SOCKET_TIMEOUT", "").strip() or 50)


def is_trace_logging_enabled():
    if SDK_LOG:
        log_level = str(SDK_LOG).upper()
        return log_level.lower() in TRACE_LOG_LEVELS
    return False


# set log levels immediately, but will be overwritten later by setup_logging
if DEBUG:
    logging.getLogger("").setLevel(logging.DEBUG)
    logging.getLogger("cos_sdk").setLevel(logging.DEBUG)
