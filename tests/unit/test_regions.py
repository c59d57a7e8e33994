import pytest

from cos_sdk.regions import (
    AwsEnvVarOverrideRegionProvider,
    AwsProfileRegionProvider,
    AwsRegionProvider,
    AwsRegionProviderChain,
    DefaultAwsRegionProviderChain,
)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config"
    path.write_text("[default]\nregion = eu-central-1\n\n[profile dev]\nregion = us-west-1\n")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(path))
    return str(path)


class FailingRegionProvider(AwsRegionProvider):
    def get_region(self):
        raise ValueError("broken")


def test_env_var_provider(monkeypatch):
    assert AwsEnvVarOverrideRegionProvider().get_region() is None
    monkeypatch.setenv("AWS_REGION", "us-east-2")
    assert AwsEnvVarOverrideRegionProvider().get_region() == "us-east-2"


def test_profile_provider(config_file, monkeypatch):
    assert AwsProfileRegionProvider().get_region() == "eu-central-1"
    assert AwsProfileRegionProvider(profile_name="dev").get_region() == "us-west-1"
    assert AwsProfileRegionProvider(profile_name="unknown").get_region() is None

    monkeypatch.setenv("AWS_PROFILE", "dev")
    assert AwsProfileRegionProvider().get_region() == "us-west-1"


def test_profile_provider_without_file():
    assert AwsProfileRegionProvider().get_region() is None


def test_chain_skips_failing_providers(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "us-east-2")
    chain = AwsRegionProviderChain(FailingRegionProvider(), AwsEnvVarOverrideRegionProvider())
    assert chain.get_region() == "us-east-2"


def test_chain_without_region():
    assert AwsRegionProviderChain(FailingRegionProvider()).get_region() is None


def test_default_chain_prefers_environment(config_file, monkeypatch):
    assert DefaultAwsRegionProviderChain().get_region() == "eu-central-1"
    monkeypatch.setenv("AWS_REGION", "us-east-2")
    assert DefaultAwsRegionProviderChain().get_region() == "us-east-2"


def test_default_chain_with_malformed_profile_file(tmp_path, monkeypatch):
    path = tmp_path / "config"
    path.write_text("region = us-east-1\n")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(path))
    assert DefaultAwsRegionProviderChain().get_region() is None
