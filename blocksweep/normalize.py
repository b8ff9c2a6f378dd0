"""
Adapters mapping provider payloads onto the canonical ResourceRecord.

Each API surface names the same fields differently; everything after
listing only sees ResourceRecord.
"""

from typing import Any, Dict, List, Optional

from .models import ResourceKind, ResourceRecord


def _self_href(payload: Dict[str, Any]) -> Optional[str]:
    for link in payload.get("links", []) or []:
        if link.get("rel") == "self":
            return link.get("href")
    return payload.get("href")


def _rs_id_from_href(href: Optional[str]) -> str:
    if not href:
        return ""
    return href.rstrip("/").rsplit("/", 1)[-1]


def _tag_strings(tags: Any) -> List[str]:
    """Flatten tags given as strings, {"name": ...} dicts or EC2 Key/Value pairs."""
    result = []
    for tag in tags or []:
        if isinstance(tag, str):
            result.append(tag)
        elif isinstance(tag, dict):
            if "Key" in tag:
                result.append(f"{tag['Key']}={tag.get('Value', '')}")
            elif "name" in tag:
                result.append(str(tag["name"]))
    return result


def from_cloud_api(payload: Dict[str, Any], kind: ResourceKind, cloud: Optional[str] = None) -> ResourceRecord:
    """Normalize a record from the multi-cloud (1.5 style) management API."""
    href = _self_href(payload)
    return ResourceRecord(
        resource_uid=payload.get("resource_uid", ""),
        rs_id=_rs_id_from_href(href),
        href=href or "",
        kind=kind,
        status=payload.get("status"),
        nickname=payload.get("nickname", payload.get("name")),
        description=payload.get("description"),
        created_at=payload.get("created_at"),
        updated_at=payload.get("updated_at"),
        tags=_tag_strings(payload.get("tags")),
        cloud=cloud,
        raw=payload,
    )


def from_legacy_api(payload: Dict[str, Any], kind: ResourceKind, cloud: Optional[str] = None) -> ResourceRecord:
    """
    Normalize a record from the legacy (1.0 style) EC2 API surface.

    Status and id live under aws_* names there, and snapshots carry
    aws_started_at instead of created_at.
    """
    href = payload.get("href") or _self_href(payload)
    return ResourceRecord(
        resource_uid=payload.get("aws_id", ""),
        rs_id=str(payload.get("rs_id") or _rs_id_from_href(href)),
        href=href or "",
        kind=kind,
        status=payload.get("aws_status"),
        nickname=payload.get("nickname"),
        description=payload.get("description"),
        created_at=payload.get("created_at") or payload.get("aws_started_at"),
        updated_at=payload.get("updated_at"),
        tags=_tag_strings(payload.get("tags")),
        cloud=cloud,
        raw=payload,
    )


def from_ec2(payload: Dict[str, Any], kind: ResourceKind, region: Optional[str] = None) -> ResourceRecord:
    """Normalize a boto3 describe_volumes / describe_snapshots item."""
    tags = payload.get("Tags", []) or []
    name = next((t.get("Value") for t in tags if t.get("Key") == "Name"), None)

    if kind is ResourceKind.VOLUME:
        uid = payload.get("VolumeId", "")
        created_at = payload.get("CreateTime")
    else:
        uid = payload.get("SnapshotId", "")
        created_at = payload.get("StartTime")

    return ResourceRecord(
        resource_uid=uid,
        rs_id=uid,
        href=f"ec2://{region}/{uid}" if region else uid,
        kind=kind,
        status=payload.get("State"),
        nickname=name,
        description=payload.get("Description"),
        created_at=created_at,
        tags=_tag_strings(tags),
        cloud=region,
        raw=payload,
    )
