"""Tests for the periodic backup scheduler."""

import itertools
import time
from datetime import datetime, timedelta, timezone

import pytest

from shopbook.audit import AuditLogger
from shopbook.backup import BackupScheduler, backup_file_name
from shopbook.models.audit import AuditEventType
from shopbook.services.storage import InMemoryAuditStorage


def ticking_clock(start=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
    """A clock that advances one second per reading."""
    counter = itertools.count()
    return lambda: start + timedelta(seconds=next(counter))


def wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "data" / "shop-data.json"
    path.parent.mkdir(parents=True)
    path.write_text('{"shop_products": "[]"}', encoding="utf-8")
    return path


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "backups"


class TestBackupFileName:
    """Tests for backup naming."""

    def test_format(self):
        """Test colons and the millisecond dot become dashes."""
        moment = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert backup_file_name(moment) == "backup-2024-05-01T12-00-00-123Z.json"

    def test_converted_to_utc(self):
        """Test local offsets are normalized."""
        istanbul = timezone(timedelta(hours=3))
        moment = datetime(2024, 5, 1, 15, 30, tzinfo=istanbul)
        assert backup_file_name(moment) == "backup-2024-05-01T12-30-00-000Z.json"

    def test_sequence_suffix(self):
        """Test a repeated name gets a suffix that sorts after the first."""
        moment = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        first = backup_file_name(moment)
        second = backup_file_name(moment, 1)
        assert second == "backup-2024-05-01T12-00-00-000Z_1.json"
        assert sorted([second, first]) == [first, second]

    def test_names_sort_chronologically(self):
        """Test lexical order of names follows time."""
        earlier = backup_file_name(datetime(2024, 1, 9, tzinfo=timezone.utc))
        later = backup_file_name(datetime(2024, 1, 10, tzinfo=timezone.utc))
        assert sorted([later, earlier]) == [earlier, later]


class TestRunBackup:
    """Tests for a single backup."""

    def test_copies_snapshot_verbatim(self, source, backup_dir):
        """Test the backup is a byte-for-byte copy."""
        scheduler = BackupScheduler(source, backup_dir, clock=ticking_clock())
        backup = scheduler.run_backup()
        assert backup == backup_dir / "backup-2024-05-01T12-00-00-000Z.json"
        assert backup.read_bytes() == source.read_bytes()

    def test_missing_snapshot_is_skipped(self, tmp_path, backup_dir):
        """Test nothing is written when there is no data yet."""
        audit_storage = InMemoryAuditStorage()
        scheduler = BackupScheduler(
            tmp_path / "nope.json",
            backup_dir,
            audit_logger=AuditLogger(audit_storage),
        )
        assert scheduler.run_backup() is None
        assert scheduler.list_backups() == []
        assert audit_storage.get_recent_events()[0].event_type == AuditEventType.BACKUP_SKIPPED

    def test_backups_accumulate(self, source, backup_dir):
        """Test old backups are never removed."""
        scheduler = BackupScheduler(source, backup_dir, clock=ticking_clock())
        first = scheduler.run_backup()
        second = scheduler.run_backup()
        assert scheduler.list_backups() == [first, second]

    def test_same_millisecond_does_not_overwrite(self, source, backup_dir):
        """Test two backups at the same instant both survive."""
        moment = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        scheduler = BackupScheduler(source, backup_dir, clock=lambda: moment)
        first = scheduler.run_backup()
        source.write_text('{"shop_products": "[1]"}', encoding="utf-8")
        second = scheduler.run_backup()

        assert first != second
        assert first.read_text(encoding="utf-8") == '{"shop_products": "[]"}'
        assert second.read_text(encoding="utf-8") == '{"shop_products": "[1]"}'
        assert scheduler.list_backups() == [first, second]

    def test_backup_is_audited(self, source, backup_dir):
        """Test a successful copy is recorded."""
        audit_storage = InMemoryAuditStorage()
        scheduler = BackupScheduler(
            source, backup_dir, audit_logger=AuditLogger(audit_storage),
        )
        backup = scheduler.run_backup()
        event = audit_storage.get_recent_events()[0]
        assert event.event_type == AuditEventType.BACKUP_CREATED
        assert event.details["destination"] == str(backup)

    def test_does_not_modify_source(self, source, backup_dir):
        """Test the snapshot is only read."""
        before = source.read_text(encoding="utf-8")
        BackupScheduler(source, backup_dir).run_backup()
        assert source.read_text(encoding="utf-8") == before


class TestScheduling:
    """Tests for the timer."""

    def test_interval_must_be_positive(self, source, backup_dir):
        """Test a zero interval is refused."""
        with pytest.raises(ValueError):
            BackupScheduler(source, backup_dir, interval=timedelta(0))

    def test_start_creates_directory_without_copying(self, source, backup_dir):
        """Test the first backup waits a full interval."""
        scheduler = BackupScheduler(source, backup_dir)
        scheduler.start()
        try:
            assert scheduler.is_running is True
            assert backup_dir.is_dir()
            assert scheduler.list_backups() == []
        finally:
            scheduler.stop()
        assert scheduler.is_running is False

    def test_fires_repeatedly(self, source, backup_dir):
        """Test a short interval produces several backups."""
        scheduler = BackupScheduler(
            source,
            backup_dir,
            interval=timedelta(milliseconds=50),
            clock=ticking_clock(),
        )
        scheduler.start()
        try:
            assert wait_for(lambda: len(scheduler.list_backups()) >= 2)
        finally:
            scheduler.stop()

    def test_stop_prevents_further_backups(self, source, backup_dir):
        """Test nothing fires after stop."""
        scheduler = BackupScheduler(
            source,
            backup_dir,
            interval=timedelta(milliseconds=100),
        )
        scheduler.start()
        scheduler.stop()
        time.sleep(0.3)
        assert scheduler.list_backups() == []

    def test_start_twice_keeps_one_timer(self, source, backup_dir):
        """Test start is idempotent."""
        scheduler = BackupScheduler(source, backup_dir)
        scheduler.start()
        timer = scheduler._timer
        scheduler.start()
        try:
            assert scheduler._timer is timer
        finally:
            scheduler.stop()
