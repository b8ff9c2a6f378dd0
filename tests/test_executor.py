"""
Tests for the deletion executor.
"""

import logging
from unittest.mock import Mock

from blocksweep.errors import DeletionError
from blocksweep.executor import DeletionExecutor
from blocksweep.models import DeletionOutcome, ResourceKind, ResourceRecord


def make_record():
    return ResourceRecord(resource_uid="vol-1", rs_id="42", href="/api/clouds/1/volumes/42",
                          kind=ResourceKind.VOLUME, nickname="temp-vol")


class TestDeletionExecutor:
    """Dry-run, success and failure paths."""

    def test_dry_run_never_deletes(self, caplog):
        deleter = Mock()
        executor = DeletionExecutor(deleter, dry_run=True)

        with caplog.at_level(logging.INFO):
            outcome = executor.execute(make_record())

        assert outcome is DeletionOutcome.SIMULATED
        deleter.assert_not_called()
        assert "WOULD DELETE /api/clouds/1/volumes/42 (temp-vol)" in caplog.text

    def test_live_success(self, caplog):
        deleter = Mock()
        executor = DeletionExecutor(deleter, dry_run=False)

        with caplog.at_level(logging.INFO):
            outcome = executor.execute(make_record())

        assert outcome is DeletionOutcome.DELETED
        deleter.assert_called_once()
        assert "DELETING /api/clouds/1/volumes/42 (temp-vol)" in caplog.text
        assert "Deletion successful" in caplog.text

    def test_failure_is_swallowed(self, caplog):
        deleter = Mock(side_effect=DeletionError("42", "connection reset"))
        executor = DeletionExecutor(deleter, dry_run=False)

        outcome = executor.execute(make_record())

        assert outcome is DeletionOutcome.FAILED
        assert "Unable to delete item: 42" in caplog.text
        assert "connection reset" in caplog.text

    def test_unexpected_exception_is_swallowed(self):
        executor = DeletionExecutor(Mock(side_effect=RuntimeError("boom")), dry_run=False)
        assert executor.execute(make_record()) is DeletionOutcome.FAILED

    def test_uses_injected_logger(self):
        log = Mock(spec=logging.Logger)
        DeletionExecutor(Mock(), dry_run=True, logger=log).execute(make_record())
        log.info.assert_called_once_with("WOULD DELETE /api/clouds/1/volumes/42 (temp-vol)")
