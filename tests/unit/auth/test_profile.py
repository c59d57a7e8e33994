import textwrap

import pytest

from cos_sdk.auth.profile import ProfileConfigLoader, load_profiles
from cos_sdk.aws.api import SdkClientException


@pytest.fixture
def profile_file(tmp_path):
    def _create(content: str) -> str:
        path = tmp_path / "config"
        path.write_text(textwrap.dedent(content))
        return str(path)

    return _create


def _load(profile_file, content: str):
    return ProfileConfigLoader().load_profiles(profile_file(content))


def test_basic_profile_with_access_key_and_secret_key(profile_file):
    profiles = _load(
        profile_file,
        """
        # default profile
        [default]
        aws_access_key_id = defaultAccessKey
        aws_secret_access_key = defaultSecretAccessKey
        region = us-east-1
        """,
    )

    profile = profiles.get_profile("default")
    assert profile.aws_access_key_id == "defaultAccessKey"
    assert profile.aws_secret_access_key == "defaultSecretAccessKey"
    assert profile.aws_session_token is None
    assert profile.region == "us-east-1"


@pytest.mark.parametrize("header", ["test", "test]", "[test"])
def test_profile_name_without_brackets(profile_file, header):
    with pytest.raises(ValueError):
        _load(profile_file, f"{header}\naws_access_key_id = key\n")


@pytest.mark.parametrize("header", ["[]", "[   ]"])
def test_blank_profile_name(profile_file, header):
    with pytest.raises(SdkClientException):
        _load(profile_file, f"{header}\naws_access_key_id = key\n")


def test_duplicate_profile_replaces_earlier_one(profile_file):
    profiles = _load(
        profile_file,
        """
        [test]
        aws_access_key_id = testProfile1
        aws_secret_access_key = testProfile1
        [test]
        aws_access_key_id = testProfile2
        aws_secret_access_key = testProfile2
        aws_session_token = testProfile2
        """,
    )

    profile = profiles.get_profile("test")
    assert profile.aws_access_key_id == "testProfile2"
    assert profile.aws_secret_access_key == "testProfile2"
    assert profile.aws_session_token == "testProfile2"


def test_duplicate_property(profile_file):
    with pytest.raises(ValueError):
        _load(
            profile_file,
            """
            [test]
            aws_access_key_id = key1
            aws_access_key_id = key2
            """,
        )


def test_property_before_profile(profile_file):
    with pytest.raises(ValueError):
        _load(profile_file, "aws_access_key_id = key\n[test]\n")


def test_property_without_value(profile_file):
    profiles = _load(
        profile_file,
        """
        [test]
        aws_access_key_id =
        """,
    )
    assert profiles.get_profile("test").aws_access_key_id == ""


def test_prefix_profiles_can_be_loaded(profile_file):
    profiles = _load(
        profile_file,
        """
        [profile test]
        aws_access_key_id = withPrefix
        """,
    )
    assert profiles.get_profile("test").aws_access_key_id == "withPrefix"


@pytest.mark.parametrize("prefixed_first", [True, False])
def test_prefix_profiles_have_lower_priority(profile_file, prefixed_first):
    prefixed = "[profile test]\naws_access_key_id = withPrefix\n"
    plain = "[test]\naws_access_key_id = withoutPrefix\n"
    content = prefixed + plain if prefixed_first else plain + prefixed

    profiles = _load(profile_file, content)

    assert profiles.get_profile("test").aws_access_key_id == "withoutPrefix"
    assert len(profiles) == 1


def test_custom_properties(profile_file):
    profiles = _load(
        profile_file,
        """
        [default]
        ibm_service_instance_id = instance = 1
        """,
    )
    assert profiles.get_profile("default").get_property("ibm_service_instance_id") == "instance = 1"
    assert profiles.get_profiles().keys() == {"default"}


def test_load_profiles_missing_file(tmp_path):
    assert load_profiles(str(tmp_path / "missing")) is None
