"""Filesystem helpers for mongobackup."""

import logging
import os
from typing import Optional

from rich.console import Console


class FileSystemService:
    """Encapsulates best-effort file side effects on the staging directory."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def _warn(self, message: str):
        self.console.print(f"[yellow]{message}[/yellow]")
        self.logger.warning(message)

    def artifact_size(self, path: str) -> Optional[int]:
        try:
            size = os.stat(path).st_size
        except OSError as exc:
            self._warn(f"Warning: Could not get file size: {exc}")
            return None

        self.logger.info("Backup size: %d bytes (%.2f MB)", size, size / (1024 * 1024))
        return size

    def remove_file(self, path: str) -> bool:
        try:
            os.remove(path)
        except OSError as exc:
            self._warn(f"Warning: Could not remove local backup file: {exc}")
            return False

        self.logger.info("Local backup file removed")
        return True
