"""
Resource providers: the clouds and APIs volumes and snapshots are listed from.
"""

from .base import ResourceProvider
from .cloud_api import CloudApiProvider
from .ec2 import EC2_REGIONS, Ec2Provider

__all__ = [
    "ResourceProvider",
    "CloudApiProvider",
    "Ec2Provider",
    "EC2_REGIONS",
    "build_provider",
]


def build_provider(config) -> ResourceProvider:
    """Construct the provider selected by a SweepConfig."""
    if config.provider == "ec2":
        return Ec2Provider(regions=config.regions, timeout=config.timeout)
    if config.provider == "cloud-api":
        return CloudApiProvider(
            config.api_url,
            token=config.api_token,
            timeout=config.timeout,
            legacy_regions=EC2_REGIONS if config.legacy_ec2 else (),
        )
    raise ValueError(f"Unknown provider: {config.provider}")
