"""
Tests for the retention rules.
"""

import pytest

from blocksweep.models import ResourceKind, ResourceRecord
from blocksweep.retention import (
    SAFE_WORDS,
    RetentionPolicy,
    contains_safe_word,
    evaluate,
    is_base_image,
    is_deletable,
)

DAY = 86400


def make_record(kind=ResourceKind.VOLUME, **kw):
    base = dict(
        resource_uid="vol-123",
        rs_id="123",
        href="/api/clouds/1/volumes/123",
        kind=kind,
        status="available",
        nickname="temp-vol",
        description="",
    )
    base.update(kw)
    return ResourceRecord(**base)


class TestAgeGate:
    """Records younger than the threshold are always kept."""

    @pytest.mark.parametrize("kind", [ResourceKind.VOLUME, ResourceKind.SNAPSHOT])
    def test_too_young_regardless_of_fields(self, kind):
        record = make_record(kind=kind, nickname="scratch")
        decision = evaluate(record, 6 * DAY, 7 * DAY, kind)
        assert not decision.eligible
        assert decision.reason == "too young"

    def test_exactly_threshold_is_old_enough(self):
        assert is_deletable(make_record(), 7 * DAY, 7 * DAY, ResourceKind.VOLUME)


class TestVolumes:
    """Volume specific rules."""

    def test_old_available_volume_is_eligible(self):
        assert is_deletable(make_record(), 10 * DAY, 7 * DAY, ResourceKind.VOLUME)

    @pytest.mark.parametrize("status", ["in-use", "creating", None, ""])
    def test_not_available_is_kept(self, status):
        record = make_record(status=status)
        decision = evaluate(record, 100 * DAY, 7 * DAY, ResourceKind.VOLUME)
        assert not decision.eligible
        assert decision.reason == "in use"

    def test_safe_word_in_nickname_case_insensitive(self):
        record = make_record(nickname="SAVE-this-temp-vol")
        assert not is_deletable(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)

    def test_safe_word_in_description(self):
        record = make_record(description="SQL2K8R2-Install-Media")
        decision = evaluate(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)
        assert decision.reason == "safe word"

    def test_volume_named_like_base_image_is_not_protected(self):
        record = make_record(nickname="ubuntu-scratch")
        assert is_deletable(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)


class TestSnapshots:
    """Snapshot specific rules."""

    def test_status_is_ignored(self):
        record = make_record(kind=ResourceKind.SNAPSHOT, status="completed", nickname="nightly")
        assert is_deletable(record, 40 * DAY, 30 * DAY, ResourceKind.SNAPSHOT)

    def test_base_image_snapshot_is_kept(self):
        record = make_record(kind=ResourceKind.SNAPSHOT, nickname="ubuntu-14.04-base")
        decision = evaluate(record, 400 * DAY, 30 * DAY, ResourceKind.SNAPSHOT)
        assert not decision.eligible
        assert decision.reason == "base image"

    @pytest.mark.parametrize("nickname", ["CentOS 6.5", "base_image_v2", "Ubuntu"])
    def test_base_image_pattern_is_case_insensitive(self, nickname):
        record = make_record(kind=ResourceKind.SNAPSHOT, nickname=nickname)
        assert not is_deletable(record, 400 * DAY, 30 * DAY, ResourceKind.SNAPSHOT)

    def test_base_image_pattern_anchors_at_start(self):
        record = make_record(kind=ResourceKind.SNAPSHOT, nickname="my-ubuntu-snap")
        assert is_deletable(record, 400 * DAY, 30 * DAY, ResourceKind.SNAPSHOT)

    def test_safe_word_protects_snapshot(self):
        record = make_record(kind=ResourceKind.SNAPSHOT, nickname="nightly", description="Do Not delete")
        assert not is_deletable(record, 400 * DAY, 30 * DAY, ResourceKind.SNAPSHOT)


class TestSafeWords:
    """Safe word and tag protection."""

    def test_default_words(self):
        assert SAFE_WORDS == ("save", "install", "do_not", "do not", "media")

    def test_substring_match(self):
        assert contains_safe_word("unsaved-work")
        assert contains_safe_word("multimedia")

    def test_missing_text_never_matches(self):
        assert not contains_safe_word(None)
        assert not contains_safe_word("")

    def test_missing_nickname_and_description(self):
        record = make_record(nickname=None, description=None)
        assert is_deletable(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)

    def test_tags_ignored_by_default(self):
        record = make_record(tags=["keep:save=true"])
        assert is_deletable(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)

    def test_tags_checked_when_enabled(self):
        record = make_record(tags=["owner=ops", "Retention=DO_NOT_DELETE"])
        policy = RetentionPolicy(check_tags=True)
        decision = evaluate(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME, policy)
        assert not decision.eligible
        assert decision.reason == "safe word tag"

    def test_custom_safe_words(self):
        policy = RetentionPolicy(safe_words=("keep",))
        assert not is_deletable(make_record(nickname="KEEP me"), 10 * DAY, 7 * DAY,
                                ResourceKind.VOLUME, policy)
        assert is_deletable(make_record(nickname="save me"), 10 * DAY, 7 * DAY,
                            ResourceKind.VOLUME, policy)

    def test_is_base_image_handles_none(self):
        assert not is_base_image(None)


def test_evaluation_is_repeatable():
    record = make_record(nickname="scratch")
    first = evaluate(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)
    second = evaluate(record, 10 * DAY, 7 * DAY, ResourceKind.VOLUME)
    assert first == second
    assert record == make_record(nickname="scratch")
