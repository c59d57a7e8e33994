"""
Region lookup. The region is only needed to build the default endpoint of a client, it is looked up with a chain of
providers: the ``AWS_REGION`` environment variable first, then the ``region`` of the active profile.
"""
import abc
import logging
from typing import List, Optional

from cos_sdk import config
from cos_sdk.auth.profile import load_profiles

LOG = logging.getLogger(__name__)


class AwsRegionProvider(abc.ABC):
    @abc.abstractmethod
    def get_region(self) -> Optional[str]:
        """
        :return: the region, or None if this provider cannot determine one
        :raises SdkClientException: if the source of the provider is invalid
        """
        raise NotImplementedError


class AwsEnvVarOverrideRegionProvider(AwsRegionProvider):
    """Reads the region from the ``AWS_REGION`` environment variable."""

    def get_region(self) -> Optional[str]:
        return config.get_aws_region()


class AwsProfileRegionProvider(AwsRegionProvider):
    """
    Reads the region of a profile in the AWS config file. The file and profile default to ``AWS_CONFIG_FILE`` and
    ``AWS_PROFILE`` (looked up on every call), or ``~/.aws/config`` and ``default``.
    """

    def __init__(self, profile_name: str = None, config_file: str = None):
        self.profile_name = profile_name
        self.config_file = config_file

    def get_region(self) -> Optional[str]:
        config_file = self.config_file or config.get_aws_config_file()
        profile_name = self.profile_name or config.get_aws_profile()

        profiles = load_profiles(config_file)
        if profiles is None:
            return None
        profile = profiles.get_profile(profile_name)
        if profile is None:
            return None
        return profile.region or None


class AwsRegionProviderChain(AwsRegionProvider):
    """Returns the region of the first provider which finds one. Failing providers are skipped."""

    providers: List[AwsRegionProvider]

    def __init__(self, *providers: AwsRegionProvider):
        self.providers = list(providers)

    def get_region(self) -> Optional[str]:
        for provider in self.providers:
            try:
                region = provider.get_region()
            except Exception as e:
                LOG.debug("Unable to load region from %s: %s", provider.__class__.__name__, e)
                continue
            if region:
                return region
        return None


class DefaultAwsRegionProviderChain(AwsRegionProviderChain):
    def __init__(self):
        super().__init__(AwsEnvVarOverrideRegionProvider(), AwsProfileRegionProvider())
