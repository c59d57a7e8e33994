"""
Loader for AWS style profile configuration files (``~/.aws/config``, ``~/.aws/credentials``).

The files are INI-like, but the format is stricter than what ``configparser`` accepts: properties must not be
repeated within a profile, and profiles may be declared either as ``[name]`` or as ``[profile name]``.
::

    # comment
    [default]
    aws_access_key_id = defaultAccessKey
    region = us-east-1

    [profile test]
    aws_access_key_id = withPrefix
::
"""
import logging
import os
from typing import Dict, List, Optional

from cos_sdk.aws.api import SdkClientException
from cos_sdk.constants import PROFILE_PREFIX

LOG = logging.getLogger(__name__)

AWS_ACCESS_KEY_ID = "aws_access_key_id"
AWS_SECRET_ACCESS_KEY = "aws_secret_access_key"
AWS_SESSION_TOKEN = "aws_session_token"
REGION = "region"


class BasicProfile:
    """A single profile of a profile file, with convenience accessors for the well-known properties."""

    profile_name: str
    properties: Dict[str, str]

    def __init__(self, profile_name: str, properties: Dict[str, str]):
        self.profile_name = profile_name
        self.properties = dict(properties)

    def get_property(self, name: str) -> Optional[str]:
        return self.properties.get(name)

    @property
    def aws_access_key_id(self) -> Optional[str]:
        return self.get_property(AWS_ACCESS_KEY_ID)

    @property
    def aws_secret_access_key(self) -> Optional[str]:
        return self.get_property(AWS_SECRET_ACCESS_KEY)

    @property
    def aws_session_token(self) -> Optional[str]:
        return self.get_property(AWS_SESSION_TOKEN)

    @property
    def region(self) -> Optional[str]:
        return self.get_property(REGION)

    def __repr__(self):
        return f"BasicProfile({self.profile_name!r}, properties={sorted(self.properties)})"


class AllProfiles:
    """All profiles of a profile file, keyed by their (unprefixed) name."""

    def __init__(self, profiles: Dict[str, BasicProfile]):
        self._profiles = dict(profiles)

    def get_profile(self, profile_name: str) -> Optional[BasicProfile]:
        return self._profiles.get(profile_name)

    def get_profiles(self) -> Dict[str, BasicProfile]:
        return dict(self._profiles)

    def __len__(self):
        return len(self._profiles)


class _ParsedProfile:
    def __init__(self, name: str, prefixed: bool):
        self.name = name
        self.prefixed = prefixed
        self.properties: Dict[str, str] = {}


class ProfileConfigLoader:
    def load_profiles(self, path: str) -> AllProfiles:
        """
        Loads all profiles of the given file.

        :param path: the path of the profile file
        :return: the profiles of the file
        :raises ValueError: if the file is malformed
        :raises SdkClientException: if a profile name is blank
        """
        with open(path, "r") as fd:
            return self.parse(fd.read().splitlines(), source=path)

    def parse(self, lines: List[str], source: str = "<string>") -> AllProfiles:
        parsed: Dict[str, _ParsedProfile] = {}
        current: Optional[_ParsedProfile] = None

        for line_number, line in enumerate(lines, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("[") or line.endswith("]"):
                current = self._parse_profile_header(line, line_number, source)
                key = (current.name, current.prefixed)
                if key in parsed:
                    LOG.warning("Duplicate profile %r in %s, the latest one wins", current.name, source)
                parsed[key] = current
                continue

            if current is None:
                raise ValueError(f"Property is defined without a preceding profile name ({source}:{line_number})")

            if "=" not in line:
                raise ValueError(f"Invalid property format, no '=' found ({source}:{line_number})")
            name, _, value = line.partition("=")
            name = name.strip()
            if name in current.properties:
                raise ValueError(
                    f"Duplicate property {name!r} in profile {current.name!r} ({source}:{line_number})"
                )
            current.properties[name] = value.strip()

        profiles: Dict[str, BasicProfile] = {}
        # profiles declared without the prefix take precedence
        for (name, prefixed), profile in sorted(parsed.items(), key=lambda item: not item[0][1]):
            profiles[name] = BasicProfile(name, profile.properties)
        return AllProfiles(profiles)

    @staticmethod
    def _parse_profile_header(line: str, line_number: int, source: str) -> _ParsedProfile:
        if not (line.startswith("[") and line.endswith("]")):
            raise ValueError(f"Invalid profile name declaration {line!r} ({source}:{line_number})")

        name = line[1:-1].strip()
        prefixed = name.startswith(PROFILE_PREFIX)
        if prefixed:
            name = name[len(PROFILE_PREFIX) :].strip()
        if not name:
            raise SdkClientException(f"Profile name must not be blank ({source}:{line_number})")
        return _ParsedProfile(name, prefixed)


def load_profiles(path: str) -> Optional[AllProfiles]:
    """Loads the profiles of the given file, or returns None if the file does not exist."""
    if not os.path.isfile(path):
        return None
    return ProfileConfigLoader().load_profiles(path)
