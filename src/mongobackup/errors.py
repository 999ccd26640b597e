"""Domain errors for mongobackup."""


class BackupError(RuntimeError):
    """Raised when the backup cannot continue safely."""


class UploadDeadlineExceeded(BackupError):
    """Raised when an upload runs past its time budget."""
