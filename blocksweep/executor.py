"""
Deletion of eligible records, or simulation of it in dry-run mode.
"""

import logging
from typing import Callable, Optional

from .models import DeletionOutcome, ResourceRecord


class DeletionExecutor:
    """Deletes records one at a time, isolating each failure."""

    def __init__(self, deleter: Callable[[ResourceRecord], None], dry_run: bool = True,
                 logger: Optional[logging.Logger] = None):
        self.deleter = deleter
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, record: ResourceRecord) -> DeletionOutcome:
        """
        Delete (or pretend to delete) a record.

        Failures from the delete call are logged and reported as FAILED,
        never raised.
        """
        if self.dry_run:
            self.logger.info(f"WOULD DELETE {record.href} ({record.nickname})")
            return DeletionOutcome.SIMULATED

        self.logger.info(f"DELETING {record.href} ({record.nickname})")
        try:
            self.deleter(record)
        except Exception as e:
            self.logger.error(f"Unable to delete item: {record.rs_id}")
            self.logger.error(f"Exception occurred: {e!r}")
            return DeletionOutcome.FAILED

        self.logger.info("Deletion successful")
        return DeletionOutcome.DELETED
