"""
Retention rules deciding which volumes and snapshots may be deleted.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .models import ResourceKind, ResourceRecord

logger = logging.getLogger(__name__)

# save and do_not cover human intervention; install and media protect the
# install-media volumes used to build images
SAFE_WORDS: Tuple[str, ...] = ("save", "install", "do_not", "do not", "media")

BASE_IMAGE_PATTERN = re.compile(r"^(ubuntu|centos|base_image)", re.IGNORECASE)


@dataclass(frozen=True)
class RetentionPolicy:
    """Protection settings applied on top of the age threshold."""
    safe_words: Tuple[str, ...] = SAFE_WORDS
    check_tags: bool = False  # tag lookups are slow on large accounts


@dataclass(frozen=True)
class RetentionDecision:
    eligible: bool
    reason: str


def contains_safe_word(text: Optional[str], safe_words: Iterable[str] = SAFE_WORDS) -> bool:
    """Case-insensitive substring match of any safe word in `text`."""
    lowered = (text or "").lower()
    return any(word.lower() in lowered for word in safe_words)


def is_base_image(nickname: Optional[str]) -> bool:
    return BASE_IMAGE_PATTERN.match(nickname or "") is not None


def evaluate(
    record: ResourceRecord,
    age_seconds: int,
    age_threshold_seconds: int,
    kind: ResourceKind,
    policy: Optional[RetentionPolicy] = None,
) -> RetentionDecision:
    """
    Run a record through every retention stage.

    Args:
        record: Normalized resource record
        age_seconds: Age of the record in seconds
        age_threshold_seconds: Minimum age before deletion is allowed
        kind: Whether the record is a volume or a snapshot
        policy: Protection settings, defaults to RetentionPolicy()

    Returns:
        Decision with the reason the record was kept, or "eligible"
    """
    policy = policy or RetentionPolicy()

    if age_seconds < age_threshold_seconds:
        logger.debug(f"Skipping {record.resource_uid}, too young ({age_seconds // 3600}h)")
        return RetentionDecision(False, "too young")

    if kind is ResourceKind.VOLUME and record.status != "available":
        logger.debug(f"Skipping {record.resource_uid}, in use (status {record.status})")
        return RetentionDecision(False, "in use")

    if (contains_safe_word(record.nickname, policy.safe_words)
            or contains_safe_word(record.description, policy.safe_words)):
        logger.debug(f"Skipping {record.resource_uid}, nickname or description contain a safe word")
        return RetentionDecision(False, "safe word")

    if policy.check_tags and any(contains_safe_word(tag, policy.safe_words) for tag in record.tags or []):
        logger.debug(f"Skipping {record.resource_uid}, tags contain a safe word")
        return RetentionDecision(False, "safe word tag")

    if kind is ResourceKind.SNAPSHOT and is_base_image(record.nickname):
        logger.debug(f"Skipping {record.resource_uid}, appears to be a base image snapshot")
        return RetentionDecision(False, "base image")

    return RetentionDecision(True, "eligible")


def is_deletable(
    record: ResourceRecord,
    age_seconds: int,
    age_threshold_seconds: int,
    kind: ResourceKind,
    policy: Optional[RetentionPolicy] = None,
) -> bool:
    """True when the record clears every retention stage."""
    return evaluate(record, age_seconds, age_threshold_seconds, kind, policy).eligible
