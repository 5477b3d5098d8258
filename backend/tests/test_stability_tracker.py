"""
Tests for StabilityTracker.

These tests verify:
1. New children are cataloged and checksummed
2. Cooldown: unchanged for cooldown-1 seconds stays WATCHING,
   unchanged for >= cooldown becomes READY_TO_SEND
3. A checksum change resets the stability clock
4. Structural changes reset the stability clock
5. Items with a pending checksum are skipped
6. Per-child failures are isolated and leave the entry untouched
7. One catalog save per changed cycle, none for an idle cycle
8. A checksum request that cannot be scheduled leaves nothing pending
9. Symbolic link loops inside a child do not stop it from stabilizing
"""

import os
from concurrent.futures import Future

import pytest

from filepusher.items import ItemService, ItemStatus
from filepusher.watchfolders import StabilityTracker, WatchFolderNotFoundError
from tests.helpers import InlineChecksumService, make_tree


def _only_item(catalog):
    items = catalog.list_items()
    assert len(items) == 1
    return items[0]


class TestNewChildren:

    def test_new_child_is_created_and_checksummed(self, tracker, catalog, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})

        result = tracker.scan(watch_root)

        item = _only_item(catalog)
        assert result.created == [item.source_path]
        assert result.changed is True
        assert item.status == ItemStatus.WATCHING
        assert item.last_checksum is not None
        assert item.checksum_pending is False
        assert item.last_checksum_stable_since is None

    def test_new_items_are_persisted(self, tracker, catalog, persistence, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})

        tracker.scan(watch_root)

        assert len(persistence.load_all_items()) == 1
        assert not catalog.has_unsaved_changes

    def test_files_and_directories_are_both_tracked(self, tracker, catalog, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        (watch_root / "movie.mkv").write_text("xyz")

        result = tracker.scan(watch_root)

        assert len(result.created) == 2
        assert catalog.count() == 2

    def test_hidden_children_are_ignored(self, tracker, catalog, watch_root):
        (watch_root / ".partial").write_text("x")

        tracker.scan(watch_root)

        assert catalog.count() == 0

    def test_missing_root_raises(self, tracker, tmp_path):
        with pytest.raises(WatchFolderNotFoundError):
            tracker.scan(tmp_path / "missing")


class TestCooldown:

    def test_first_unchanged_observation_starts_clock(self, tracker, catalog, clock, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)

        clock.advance(10)
        tracker.scan(watch_root)

        assert _only_item(catalog).last_checksum_stable_since == clock.now

    def test_stays_watching_before_cooldown(self, tracker, catalog, clock, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        clock.advance(10)
        tracker.scan(watch_root)  # clock starts

        clock.advance(59)
        result = tracker.scan(watch_root)

        assert result.ready == []
        assert _only_item(catalog).status == ItemStatus.WATCHING

    def test_ready_after_cooldown(self, tracker, catalog, clock, watch_root):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        clock.advance(10)
        tracker.scan(watch_root)  # clock starts

        clock.advance(60)
        result = tracker.scan(watch_root)

        item = _only_item(catalog)
        assert result.ready == [item.source_path]
        assert item.status == ItemStatus.READY_TO_SEND
        assert item.last_checksum_stable_since is not None
        assert clock.now - item.last_checksum_stable_since >= tracker.cooldown

    def test_zero_cooldown_needs_two_unchanged_observations(
        self, catalog, checksum_service, clock, watch_root
    ):
        tracker = StabilityTracker(
            catalog=catalog,
            item_service=ItemService(),
            checksum_service=checksum_service,
            cooldown_seconds=0,
            clock=clock,
        )
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        tracker.scan(watch_root)
        assert _only_item(catalog).status == ItemStatus.WATCHING

        tracker.scan(watch_root)
        assert _only_item(catalog).status == ItemStatus.READY_TO_SEND


class TestChangeResetsClock:

    def test_checksum_change_resets_clock(self, tracker, catalog, clock, watch_root):
        show = make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)

        # Three unchanged cycles
        for _ in range(3):
            clock.advance(10)
            tracker.scan(watch_root)
        assert _only_item(catalog).last_checksum_stable_since is not None

        # Same size, different content: only the checksum changes
        (show / "a.mkv").write_text("abd")
        clock.advance(10)
        tracker.scan(watch_root)
        assert _only_item(catalog).last_checksum_stable_since is None

        clock.advance(10)
        tracker.scan(watch_root)  # clock restarts here
        restarted = clock.now

        clock.advance(59)
        tracker.scan(watch_root)
        assert _only_item(catalog).status == ItemStatus.WATCHING

        clock.advance(1)
        tracker.scan(watch_root)
        item = _only_item(catalog)
        assert item.status == ItemStatus.READY_TO_SEND
        assert item.last_checksum_stable_since == restarted

    def test_new_file_resets_clock(self, tracker, catalog, clock, watch_root):
        show = make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        clock.advance(10)
        tracker.scan(watch_root)

        (show / "b.mkv").write_text("more")
        clock.advance(60)
        result = tracker.scan(watch_root)

        item = _only_item(catalog)
        assert result.ready == []
        assert item.status == ItemStatus.WATCHING
        assert item.last_checksum_stable_since is None
        assert item.file_count == 2


class _PendingChecksumService(InlineChecksumService):
    """Never completes asynchronous requests; counts synchronous ones."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.compute_calls = 0

    def request_checksum(self, item_id):
        return Future()

    def compute_checksum(self, item):
        self.compute_calls += 1
        return super().compute_checksum(item)


class TestPendingChecksum:

    def test_pending_item_is_skipped(self, catalog, clock, watch_root):
        service = _PendingChecksumService(catalog=catalog, clock=clock)
        tracker = StabilityTracker(
            catalog=catalog,
            item_service=ItemService(),
            checksum_service=service,
            cooldown_seconds=60,
            clock=clock,
        )
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        assert _only_item(catalog).checksum_pending is True

        clock.advance(120)
        result = tracker.scan(watch_root)

        item = _only_item(catalog)
        assert result.pending == [item.source_path]
        assert result.changed is False
        assert item.status == ItemStatus.WATCHING
        assert item.last_checksum_stable_since is None
        assert service.compute_calls == 0
        service.shutdown()


class _FailingItemService(ItemService):
    """Raises for any item whose name starts with 'locked'."""

    def update(self, item):
        if item.path.name.startswith("locked"):
            raise PermissionError(f"Permission denied: {item.source_path}")
        return super().update(item)


class TestFailureIsolation:

    def test_failing_child_does_not_block_siblings(
        self, catalog, checksum_service, clock, watch_root
    ):
        tracker = StabilityTracker(
            catalog=catalog,
            item_service=_FailingItemService(),
            checksum_service=checksum_service,
            cooldown_seconds=60,
            clock=clock,
        )
        make_tree(watch_root / "locked", {"a.mkv": "abc"})
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)

        clock.advance(10)
        result = tracker.scan(watch_root)

        assert len(result.errors) == 1
        assert "locked" in result.errors[0]

        by_name = {i.path.name: i for i in catalog.list_items()}
        assert by_name["locked"].last_checksum_stable_since is None
        assert by_name["show"].last_checksum_stable_since == clock.now


class TestCatalogWrites:

    def test_single_save_per_changed_cycle(self, tracker, catalog, watch_root, monkeypatch):
        make_tree(watch_root / "a", {"x.mkv": "1"})
        make_tree(watch_root / "b", {"x.mkv": "2"})
        calls = []
        original_save = catalog.save
        monkeypatch.setattr(catalog, "save", lambda: calls.append(1) or original_save())

        tracker.scan(watch_root)

        assert len(calls) == 1

    def test_no_save_when_nothing_changed(self, tracker, catalog, clock, watch_root, monkeypatch):
        make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        clock.advance(10)
        tracker.scan(watch_root)  # clock starts

        calls = []
        original_save = catalog.save
        monkeypatch.setattr(catalog, "save", lambda: calls.append(1) or original_save())
        clock.advance(10)
        result = tracker.scan(watch_root)

        assert result.changed is False
        assert calls == []

    def test_other_statuses_are_untouched(self, tracker, catalog, clock, watch_root):
        show = make_tree(watch_root / "show", {"a.mkv": "abc"})
        tracker.scan(watch_root)
        item = _only_item(catalog)
        item.status = ItemStatus.SENT
        catalog.update(item)
        catalog.save()

        (show / "a.mkv").write_text("changed content")
        clock.advance(10)
        result = tracker.scan(watch_root)

        stored = _only_item(catalog)
        assert result.changed is False
        assert stored.status == ItemStatus.SENT
        assert stored.files == {"a.mkv": 3}


class _FlakyChecksumService(InlineChecksumService):
    """Fails the first asynchronous request, then behaves normally."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.failures_left = 1

    def request_checksum(self, item_id):
        if self.failures_left:
            self.failures_left -= 1
            raise RuntimeError("cannot schedule new futures after shutdown")
        return super().request_checksum(item_id)


class TestChecksumRequestFailure:

    def test_failed_request_does_not_leave_item_pending(self, catalog, clock, watch_root):
        service = _FlakyChecksumService(catalog=catalog, clock=clock)
        tracker = StabilityTracker(
            catalog=catalog,
            item_service=ItemService(),
            checksum_service=service,
            cooldown_seconds=60,
            clock=clock,
        )
        make_tree(watch_root / "show", {"a.mkv": "abc"})

        result = tracker.scan(watch_root)

        item = _only_item(catalog)
        assert len(result.errors) == 1
        assert item.checksum_pending is False
        assert not catalog.has_unsaved_changes

        clock.advance(10)
        result = tracker.scan(watch_root)  # first checksum recorded
        assert result.pending == []
        assert _only_item(catalog).last_checksum is not None

        clock.advance(10)
        tracker.scan(watch_root)  # clock starts
        clock.advance(60)
        tracker.scan(watch_root)

        assert _only_item(catalog).status == ItemStatus.READY_TO_SEND
        service.shutdown()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
class TestSymlinkLoops:

    def test_looping_child_becomes_ready(self, tracker, catalog, clock, watch_root):
        show = make_tree(watch_root / "show", {"a.mkv": "abc"})
        os.symlink(show, show / "loop")

        result = tracker.scan(watch_root)
        assert result.errors == []
        assert _only_item(catalog).files == {"a.mkv": 3}

        clock.advance(10)
        tracker.scan(watch_root)  # clock starts
        clock.advance(60)
        result = tracker.scan(watch_root)

        assert result.errors == []
        assert result.ready == [str(show)]
        assert _only_item(catalog).status == ItemStatus.READY_TO_SEND
