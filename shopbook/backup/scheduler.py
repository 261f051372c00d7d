"""
Backup Scheduler

Copies the persisted data snapshot to a timestamped file on a fixed
interval (weekly by default).

Behaviour:
- The interval is measured from start(), not aligned to the calendar. A
  restart resets the clock, and missed backups are never caught up.
- If the snapshot file does not exist yet there is nothing to back up and
  the firing is skipped.
- Backups are never pruned.
- The next firing is armed before the copy runs, so a failed copy does not
  stop later ones. The failure itself is not handled here; it surfaces
  through the timer thread's default exception hook.

The scheduler only reads the snapshot file; it never touches the record
store.
"""

import shutil
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

from shopbook.audit import AuditLogger
from shopbook.models.audit import AuditEventBuilder


DEFAULT_INTERVAL = timedelta(days=7)


def backup_file_name(moment: datetime, sequence: int = 0) -> str:
    """
    Name for a backup taken at `moment`.

    The UTC ISO-8601 instant with millisecond precision, with ':' and '.'
    replaced by '-', e.g. backup-2024-05-01T12-00-00-000Z.json

    A non-zero sequence tells apart backups taken in the same millisecond
    (backup-...-000Z_1.json) and sorts after the unsuffixed name.
    """
    moment = moment.astimezone(timezone.utc)
    instant = moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    suffix = f"_{sequence}" if sequence else ""
    return f"backup-{instant.replace(':', '-').replace('.', '-')}{suffix}.json"


class BackupScheduler:
    """
    Periodic snapshot copier with two states: idle (waiting for the timer)
    and firing (copying).
    """

    def __init__(
        self,
        source_file: Path,
        backup_dir: Path,
        interval: timedelta = DEFAULT_INTERVAL,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if interval <= timedelta(0):
            raise ValueError("Backup interval must be positive")
        self._source_file = Path(source_file)
        self._backup_dir = Path(backup_dir)
        self._interval = interval
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Create the backup directory and arm the first firing."""
        self._backup_dir.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if self._timer is None:
                self._arm()

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def run_backup(self) -> Optional[Path]:
        """
        Copy the snapshot file now.

        Returns:
            Path of the new backup, or None if there was no snapshot to copy

        Raises:
            OSError: If the copy fails
        """
        if not self._source_file.exists():
            self._audit_logger.log(
                AuditEventBuilder.backup_skipped(str(self._source_file))
            )
            return None

        self._backup_dir.mkdir(parents=True, exist_ok=True)
        destination = self._copy_to_new_file(self._clock())

        self._audit_logger.log(
            AuditEventBuilder.backup_created(str(self._source_file), str(destination))
        )
        return destination

    def _copy_to_new_file(self, moment: datetime) -> Path:
        """Copy the snapshot into a file that did not exist before."""
        sequence = 0
        while True:
            destination = self._backup_dir / backup_file_name(moment, sequence)
            try:
                with open(self._source_file, "rb") as source, open(destination, "xb") as target:
                    shutil.copyfileobj(source, target)
                return destination
            except FileExistsError:
                sequence += 1

    def list_backups(self) -> list[Path]:
        """Existing backups, oldest first."""
        if not self._backup_dir.exists():
            return []
        return sorted(self._backup_dir.glob("backup-*.json"))

    def _arm(self) -> None:
        timer = threading.Timer(self._interval.total_seconds(), self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None:
                return
            self._arm()
        self.run_backup()
