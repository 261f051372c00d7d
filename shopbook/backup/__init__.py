"""Periodic backups of the data snapshot."""

from shopbook.backup.scheduler import (
    DEFAULT_INTERVAL,
    BackupScheduler,
    backup_file_name,
)

__all__ = ["DEFAULT_INTERVAL", "BackupScheduler", "backup_file_name"]
