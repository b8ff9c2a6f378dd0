"""
Multi-cloud management API provider.

Lists clouds through the 1.5 API and sweeps each one that advertises
volumes or snapshots. Optionally also sweeps the EC2 regions exposed
through the legacy 1.0 API.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..errors import DeletionError, ListingError
from ..models import CloudDescriptor, ResourceKind, ResourceRecord, SweepTarget
from ..normalize import from_cloud_api, from_legacy_api
from .base import ResourceProvider

logger = logging.getLogger(__name__)

API_VERSION = "1.5"
LEGACY_API_VERSION = "1.0"

_COLLECTIONS = {
    ResourceKind.VOLUME: "volumes",
    ResourceKind.SNAPSHOT: "volume_snapshots",
}
_LEGACY_COLLECTIONS = {
    ResourceKind.VOLUME: "ec2_ebs_volumes",
    ResourceKind.SNAPSHOT: "ec2_ebs_snapshots",
}

LEGACY_GROUP = "legacy"
CURRENT_GROUP = "current"

# Failed requests, undecodable bodies and payloads of the wrong shape
_LISTING_ERRORS = (requests.RequestException, ValueError, AttributeError, TypeError, KeyError)


class CloudApiProvider(ResourceProvider):
    """Sweeps every cloud registered with the management API."""

    name = "cloud-api"

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        legacy_regions: Sequence[Tuple[int, str]] = (),
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.legacy_regions = list(legacy_regions)
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        self._clouds: Optional[List[CloudDescriptor]] = None

    def _url(self, path_or_href: str) -> str:
        if path_or_href.startswith("http"):
            return path_or_href
        return f"{self.base_url}{path_or_href}"

    def _get(self, path: str, api_version: str = API_VERSION, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.session.get(
            self._url(path),
            headers={"X-API-Version": api_version, "Accept": "application/json"},
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def _get_list(self, path: str, **kwargs) -> List[Dict[str, Any]]:
        """GET a collection; anything but a JSON list is a malformed response."""
        payload = self._get(path, **kwargs)
        if not isinstance(payload, list):
            raise TypeError(f"expected a list from {path}, got {type(payload).__name__}")
        return payload

    def clouds(self) -> List[CloudDescriptor]:
        """Fetch (once per provider) the clouds known to the account."""
        if self._clouds is None:
            try:
                self._clouds = [
                    CloudDescriptor(
                        cloud_id=_cloud_id(cloud),
                        name=cloud.get("name", ""),
                        links=[link for link in cloud.get("links") or [] if isinstance(link, dict)],
                    )
                    for cloud in self._get_list("/api/clouds")
                ]
            except _LISTING_ERRORS as e:
                raise ListingError("clouds", str(e))
        return self._clouds

    def target_groups(self) -> List[str]:
        # legacy regions never depend on the cloud list, so they go first
        if self.legacy_regions:
            return [LEGACY_GROUP, CURRENT_GROUP]
        return [CURRENT_GROUP]

    def targets(self, kind: ResourceKind, group: str = CURRENT_GROUP) -> List[SweepTarget]:
        if group == LEGACY_GROUP:
            return [SweepTarget(target_id=str(cloud_id), name=name, legacy=True)
                    for cloud_id, name in self.legacy_regions]
        return [SweepTarget(target_id=cloud.cloud_id, name=cloud.name)
                for cloud in self.clouds() if cloud.supports(kind)]

    def _list(self, target: SweepTarget, kind: ResourceKind) -> List[ResourceRecord]:
        try:
            if target.legacy:
                items = self._get_list(f"/api/acct/{_LEGACY_COLLECTIONS[kind]}",
                                       api_version=LEGACY_API_VERSION,
                                       params={"cloud_id": target.target_id})
                return [from_legacy_api(item, kind, target.name) for item in items]

            items = self._get_list(f"/api/clouds/{target.target_id}/{_COLLECTIONS[kind]}")
            return [from_cloud_api(item, kind, target.name) for item in items]
        except _LISTING_ERRORS as e:
            raise ListingError(target.name, str(e))

    def list_volumes(self, target: SweepTarget) -> List[ResourceRecord]:
        return self._list(target, ResourceKind.VOLUME)

    def list_snapshots(self, target: SweepTarget) -> List[ResourceRecord]:
        return self._list(target, ResourceKind.SNAPSHOT)

    def delete(self, record: ResourceRecord) -> None:
        if not record.href:
            raise DeletionError(record.rs_id, "record has no href")
        version = LEGACY_API_VERSION if "/api/acct/" in record.href else API_VERSION
        try:
            response = self.session.delete(
                self._url(record.href),
                headers={"X-API-Version": version},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise DeletionError(record.rs_id, str(e))
        logger.debug(f"DELETE {record.href} returned {response.status_code}")


def _cloud_id(cloud: Dict[str, Any]) -> str:
    """Cloud id from the self link, e.g. /api/clouds/6 -> "6"."""
    for link in cloud.get("links", []) or []:
        if isinstance(link, dict) and link.get("rel") == "self":
            return (link.get("href") or "").rstrip("/").rsplit("/", 1)[-1]
    return str(cloud.get("id", ""))
