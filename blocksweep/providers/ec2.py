"""
EC2 provider: EBS volumes and snapshots listed and deleted through boto3.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import DeletionError, ListingError
from ..models import ResourceKind, ResourceRecord, SweepTarget
from ..normalize import from_ec2
from .base import DEFAULT_GROUP, ResourceProvider

logger = logging.getLogger(__name__)

EC2_REGIONS: Tuple[Tuple[int, str], ...] = (
    (1, "us-east-1"),
    (2, "eu-west-1"),
    (3, "us-west-1"),
    (4, "ap-southeast-1"),
    (5, "ap-northeast-1"),
    (6, "us-west-2"),
    (7, "sa-east-1"),
)


class Ec2Provider(ResourceProvider):
    """Sweeps EBS resources owned by the current account, one region at a time."""

    name = "ec2"

    def __init__(self, regions: Optional[Sequence[str]] = None, timeout: float = 30.0):
        self.regions = list(regions or [name for _, name in EC2_REGIONS])
        self.client_config = Config(connect_timeout=timeout, read_timeout=timeout)
        self._clients: Dict[str, object] = {}

    def _client(self, region: str):
        if region not in self._clients:
            self._clients[region] = boto3.client("ec2", region_name=region, config=self.client_config)
        return self._clients[region]

    def targets(self, kind: ResourceKind, group: str = DEFAULT_GROUP) -> List[SweepTarget]:
        return [SweepTarget(target_id=region, name=region) for region in self.regions]

    def list_volumes(self, target: SweepTarget) -> List[ResourceRecord]:
        try:
            paginator = self._client(target.target_id).get_paginator("describe_volumes")
            return [
                from_ec2(volume, ResourceKind.VOLUME, target.target_id)
                for page in paginator.paginate()
                for volume in page.get("Volumes", [])
            ]
        except (ClientError, BotoCoreError) as e:
            raise ListingError(target.name, str(e))

    def list_snapshots(self, target: SweepTarget) -> List[ResourceRecord]:
        try:
            paginator = self._client(target.target_id).get_paginator("describe_snapshots")
            return [
                from_ec2(snapshot, ResourceKind.SNAPSHOT, target.target_id)
                for page in paginator.paginate(OwnerIds=["self"])
                for snapshot in page.get("Snapshots", [])
            ]
        except (ClientError, BotoCoreError) as e:
            raise ListingError(target.name, str(e))

    def delete(self, record: ResourceRecord) -> None:
        ec2 = self._client(record.cloud)
        try:
            if record.kind is ResourceKind.VOLUME:
                ec2.delete_volume(VolumeId=record.resource_uid)
            else:
                ec2.delete_snapshot(SnapshotId=record.resource_uid)
        except (ClientError, BotoCoreError) as e:
            raise DeletionError(record.rs_id, str(e))
        logger.debug(f"Deleted {record.kind.value} {record.resource_uid} in {record.cloud}")
