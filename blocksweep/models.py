"""
Data models for swept resources and run results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ResourceKind(Enum):
    """Kinds of block-storage resources the sweeper handles."""
    VOLUME = "volume"
    SNAPSHOT = "snapshot"


class DeletionOutcome(Enum):
    """Result of handing an eligible record to the executor."""
    SIMULATED = "simulated"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass
class ResourceRecord:
    """Canonical volume or snapshot record, independent of the API it came from."""
    resource_uid: str           # provider-assigned id, e.g. "vol-0abc..."
    rs_id: str                  # management-system id used in logs
    href: str                   # management-system handle used for deletion
    kind: ResourceKind
    status: Optional[str] = None            # "available", "in-use", ...
    nickname: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[Any] = None        # str or datetime
    updated_at: Optional[Any] = None
    tags: List[str] = field(default_factory=list)
    cloud: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class CloudDescriptor:
    """A cloud exposed by the management API, with its resource links."""
    cloud_id: str
    name: str
    links: List[Dict[str, str]] = field(default_factory=list)

    def supports(self, kind: ResourceKind) -> bool:
        """True when one of the cloud's links advertises the resource kind."""
        marker = kind.value
        return any(marker in (link.get("rel") or "") for link in self.links)


@dataclass
class RunSummary:
    """Counters collected over one sweep run."""
    examined: int = 0
    too_young: int = 0
    protected: int = 0
    eligible: int = 0
    simulated: int = 0
    deleted: int = 0
    failed: int = 0
    unparseable: int = 0
    listing_errors: List[Tuple[str, str, str]] = field(default_factory=list)

    def record_outcome(self, outcome: DeletionOutcome) -> None:
        if outcome is DeletionOutcome.SIMULATED:
            self.simulated += 1
        elif outcome is DeletionOutcome.DELETED:
            self.deleted += 1
        else:
            self.failed += 1

    @property
    def exit_code(self) -> int:
        return 1 if (self.failed or self.listing_errors) else 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "examined": self.examined,
            "too_young": self.too_young,
            "protected": self.protected,
            "eligible": self.eligible,
            "simulated": self.simulated,
            "deleted": self.deleted,
            "failed": self.failed,
            "unparseable": self.unparseable,
            "listing_errors": len(self.listing_errors),
        }


@dataclass(frozen=True)
class SweepTarget:
    """One cloud or region the sweeper lists resources from."""
    target_id: str
    name: str
    legacy: bool = False  # listed through the legacy (1.0 style) API surface
