import pytest

from cos_sdk import config
from cos_sdk.config import SdkGlobalConfiguration, load_global_configuration
from cos_sdk.constants import DEFAULT_CONFIG_FILE


class TestFlags:
    @pytest.mark.parametrize("value", ["", "0", "1", "true", "True", "yes", "anything"])
    def test_flag_set_if_present_and_not_false(self, value):
        assert config.is_flag_set("AWS_CBOR_DISABLE", {"AWS_CBOR_DISABLE": value})

    @pytest.mark.parametrize("value", ["false", "False", "FALSE", " false "])
    def test_flag_not_set_if_false(self, value):
        assert not config.is_flag_set("AWS_CBOR_DISABLE", {"AWS_CBOR_DISABLE": value})

    def test_flag_not_set_if_absent(self):
        assert not config.is_flag_set("AWS_CBOR_DISABLE", {})

    def test_flag_reads_os_environ_by_default(self, monkeypatch):
        assert not config.is_flag_set("AWS_ION_BINARY_DISABLE")
        monkeypatch.setenv("AWS_ION_BINARY_DISABLE", "true")
        assert config.is_flag_set("AWS_ION_BINARY_DISABLE")


class TestProfileSettings:
    def test_region(self):
        assert config.get_aws_region({}) is None
        assert config.get_aws_region({"AWS_REGION": "  "}) is None
        assert config.get_aws_region({"AWS_REGION": " eu-west-1 "}) == "eu-west-1"

    def test_config_file(self):
        assert config.get_aws_config_file({}) == DEFAULT_CONFIG_FILE
        assert config.get_aws_config_file({"AWS_CONFIG_FILE": "/tmp/aws-config"}) == "/tmp/aws-config"

    def test_profile(self, monkeypatch):
        assert config.get_aws_profile({}) == "default"
        monkeypatch.setenv("AWS_PROFILE", "dev")
        assert config.get_aws_profile() == "dev"


class TestLoadGlobalConfiguration:
    def test_defaults(self):
        assert load_global_configuration({}) == SdkGlobalConfiguration(
            cbor_disabled=False, ion_binary_disabled=False
        )

    def test_from_mapping(self):
        configuration = load_global_configuration(
            {"AWS_CBOR_DISABLE": "1", "AWS_ION_BINARY_DISABLE": "false"}
        )
        assert configuration.cbor_disabled
        assert not configuration.ion_binary_disabled

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("AWS_CBOR_DISABLE", "")
        monkeypatch.setenv("AWS_ION_BINARY_DISABLE", "true")
        configuration = load_global_configuration()
        assert configuration.cbor_disabled
        assert configuration.ion_binary_disabled

    def test_snapshot_is_not_affected_by_later_changes(self, monkeypatch):
        configuration = load_global_configuration()
        monkeypatch.setenv("AWS_CBOR_DISABLE", "true")
        assert not configuration.cbor_disabled


class TestEnvHelpers:
    def test_is_env_true(self, monkeypatch):
        monkeypatch.setenv("TEST_FLAG", "1")
        assert config.is_env_true("TEST_FLAG")
        monkeypatch.setenv("TEST_FLAG", "")
        assert not config.is_env_true("TEST_FLAG")

    def test_is_env_not_false(self, monkeypatch):
        monkeypatch.delenv("TEST_FLAG", raising=False)
        assert config.is_env_not_false("TEST_FLAG")
        monkeypatch.setenv("TEST_FLAG", "false")
        assert not config.is_env_not_false("TEST_FLAG")

    def test_parse_boolean_env(self, monkeypatch):
        monkeypatch.setenv("TEST_FLAG", "true")
        assert config.parse_boolean_env("TEST_FLAG") is True
        monkeypatch.setenv("TEST_FLAG", "0")
        assert config.parse_boolean_env("TEST_FLAG") is False
        monkeypatch.setenv("TEST_FLAG", "maybe")
        assert config.parse_boolean_env("TEST_FLAG") is None

    def test_eval_log_type(self, monkeypatch):
        monkeypatch.setenv("SDK_LOG", "Trace")
        assert config.eval_log_type("SDK_LOG") == "trace"
        monkeypatch.setenv("SDK_LOG", "verbose")
        assert config.eval_log_type("SDK_LOG") is False
