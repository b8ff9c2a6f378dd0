"""
Sweep orchestration: list, age, filter and delete, target by target.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .age import age_seconds
from .config import SweepConfig
from .errors import ListingError, TimestampParseError
from .executor import DeletionExecutor
from .models import ResourceKind, RunSummary, SweepTarget
from .providers.base import ResourceProvider
from .retention import evaluate

logger = logging.getLogger(__name__)


class Sweeper:
    """
    Runs one sweep over every target of a provider.

    Targets come in groups (e.g. legacy regions, then clouds); each group
    is swept volumes first, then snapshots. Work is sequential;
    a failing target or record is logged and skipped so the rest of the
    run still happens.
    """

    def __init__(self, provider: ResourceProvider, config: SweepConfig,
                 logger: Optional[logging.Logger] = None):
        self.provider = provider
        self.config = config
        self.policy = config.retention_policy
        self.logger = logger or logging.getLogger(__name__)
        self.executor = DeletionExecutor(provider.delete, dry_run=config.dry_run, logger=self.logger)

    def threshold_for(self, kind: ResourceKind) -> int:
        if kind is ResourceKind.VOLUME:
            return self.config.volumes_age_seconds
        return self.config.snapshots_age_seconds

    def run(self, now: Optional[datetime] = None) -> RunSummary:
        """
        Sweep every target group in order, volumes then snapshots within each.

        Args:
            now: Reference instant for every age computation, defaults to
                 the current UTC time captured once at the start of the run

        Returns:
            Counters for the run
        """
        now = now or datetime.now(timezone.utc)
        summary = RunSummary()

        self.logger.info(
            "Starting run, skipping any volumes and snapshots containing words: "
            + " ".join(self.policy.safe_words)
        )
        if self.config.dry_run:
            self.logger.info("Dry run: nothing will be deleted")

        for group in self.provider.target_groups():
            for kind in (ResourceKind.VOLUME, ResourceKind.SNAPSHOT):
                try:
                    targets = self.provider.targets(kind, group)
                except ListingError as e:
                    self.logger.error(f"Unable to discover {kind.value} targets ({group}): {e}")
                    summary.listing_errors.append(("*", kind.value, e.detail))
                    continue

                for target in targets:
                    self.sweep_target(target, kind, now, summary)

        self.logger.info(f"Run complete: {summary.as_dict()}")
        return summary

    def sweep_target(self, target: SweepTarget, kind: ResourceKind, now: datetime,
                     summary: RunSummary) -> None:
        self.logger.info(f"========== {target.name} ({kind.value}s) =========")
        try:
            records = self.provider.list_resources(target, kind)
        except ListingError as e:
            self.logger.error(f"Skipping {target.name} ({kind.value}s): {e}")
            summary.listing_errors.append((target.name, kind.value, e.detail))
            return

        threshold = self.threshold_for(kind)
        for record in records:
            summary.examined += 1
            try:
                age = age_seconds(record, now)
            except TimestampParseError as e:
                self.logger.warning(f"Skipping {record.rs_id}: {e}")
                summary.unparseable += 1
                continue

            self.logger.debug(
                f"RS_ID:{record.rs_id} RESOURCE_ID:{record.resource_uid} NICKNAME:{record.nickname} "
                f"STATE:{record.status} AGE(HRS):{age // 3600}"
            )
            decision = evaluate(record, age, threshold, kind, self.policy)
            if not decision.eligible:
                if decision.reason == "too young":
                    summary.too_young += 1
                else:
                    summary.protected += 1
                continue

            summary.eligible += 1
            summary.record_outcome(self.executor.execute(record))
