"""Subprocess execution service for mongobackup."""

import subprocess
from typing import Iterable, List

from mongobackup.errors import BackupError

REDACTED = "****"


class CommandRunner:
    """Runs external commands with consistent error handling.

    stderr is folded into stdout, and a non-zero exit raises ``BackupError``
    carrying the combined output.
    """

    def __init__(self, logger):
        self.logger = logger

    @staticmethod
    def redact(text: str, secrets: Iterable[str]) -> str:
        for secret in secrets:
            if secret:
                text = text.replace(secret, REDACTED)
        return text

    def run(self, cmd: List[str], secrets: Iterable[str] = ()) -> subprocess.CompletedProcess:
        secrets = [secret for secret in secrets if secret]
        cmd_str = self.redact(" ".join(cmd), secrets)
        self.logger.debug("Executing: %s", cmd_str)

        try:
            # tool output is not guaranteed to be valid UTF-8
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise BackupError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except OSError as exc:
            raise BackupError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if result.returncode == 0:
            return result

        details = self.redact((result.stdout or "").strip(), secrets)
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if details:
            message = f"{message}\n{details}"
        raise BackupError(message)
