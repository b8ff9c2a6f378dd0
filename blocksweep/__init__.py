"""
Blocksweep - Stale volume and snapshot cleanup across clouds and regions.

This package provides a CLI that finds old, unprotected block-storage
resources and deletes them (or reports what it would delete in dry-run mode).
"""

__version__ = "0.1.0"
