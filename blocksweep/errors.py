"""
Error types raised by the sweep pipeline.
"""


class SweepError(Exception):
    """Base class for all blocksweep errors."""


class TimestampParseError(SweepError):
    """A record has no usable creation timestamp."""


class ListingError(SweepError):
    """Listing resources for a cloud or region failed."""

    def __init__(self, target: str, detail: str):
        super().__init__(f"Failed to list resources for {target}: {detail}")
        self.target = target
        self.detail = detail


class DeletionError(SweepError):
    """A remote delete call failed."""

    def __init__(self, rs_id: str, detail: str):
        super().__init__(f"Failed to delete {rs_id}: {detail}")
        self.rs_id = rs_id
        self.detail = detail


class ConfigError(SweepError):
    """Invalid configuration value."""
