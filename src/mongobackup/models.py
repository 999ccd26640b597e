"""Shared domain models for mongobackup."""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Dict, Protocol

from mongobackup.constants import (
    ARCHIVE_SUFFIX,
    ARTIFACT_PREFIX,
    AUTH_DATABASE,
    CONTENT_TYPE,
    DEFAULT_DATABASE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_STAGING_DIR,
    DEFAULT_UPLOAD_TIMEOUT_MINUTES,
    DEFAULT_USER,
    OBJECT_PREFIX,
    SOURCE_TAG,
    TIMESTAMP_FORMAT,
)
from mongobackup.errors import BackupError

_BACKUP_NAME_RE = re.compile(r"^(?P<prefix>.+)-(?P<stamp>\d{14})" + re.escape(ARCHIVE_SUFFIX) + r"$")


@dataclass(frozen=True)
class BackupParameters:
    """Connection, credential and destination settings for a single run."""

    password: str
    bucket: str
    user: str = DEFAULT_USER
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    database: str = DEFAULT_DATABASE
    staging_dir: str = DEFAULT_STAGING_DIR
    upload_timeout_minutes: int = DEFAULT_UPLOAD_TIMEOUT_MINUTES
    auth_database: str = AUTH_DATABASE

    @property
    def upload_timeout_seconds(self) -> float:
        return float(self.upload_timeout_minutes * 60)


@dataclass(frozen=True)
class BackupRun:
    """Names derived from the timestamp of one run."""

    timestamp: str
    artifact_path: str
    object_name: str

    @classmethod
    def at(cls, params: BackupParameters, now: datetime) -> "BackupRun":
        timestamp = now.strftime(TIMESTAMP_FORMAT)
        artifact_name = f"{ARTIFACT_PREFIX}-{timestamp}{ARCHIVE_SUFFIX}"
        return cls(
            timestamp=timestamp,
            artifact_path=os.path.join(params.staging_dir, artifact_name),
            object_name=f"{OBJECT_PREFIX}-{timestamp}{ARCHIVE_SUFFIX}",
        )


@dataclass(frozen=True)
class DumpResult:
    artifact_path: str
    output: str = ""


@dataclass(frozen=True)
class UploadMetadata:
    """Object metadata attached to every uploaded archive."""

    created: str
    source: str = SOURCE_TAG
    content_type: str = CONTENT_TYPE

    def as_dict(self) -> Dict[str, str]:
        return {"created": self.created, "source": self.source}


class DumpProducer(Protocol):
    def produce_dump(self, params: BackupParameters, artifact_path: str) -> DumpResult:
        ...


class Uploader(Protocol):
    def upload(
        self,
        bucket_name: str,
        object_name: str,
        reader: BinaryIO,
        metadata: UploadMetadata,
        timeout: float,
    ) -> int:
        ...


def parse_backup_timestamp(name: str) -> datetime:
    """Returns the time encoded in a ``<prefix>-<YYYYMMDDHHMMSS>.gz`` name."""
    match = _BACKUP_NAME_RE.match(os.path.basename(name))
    if not match:
        raise BackupError(f"Not a backup archive name: {name}")
    try:
        return datetime.strptime(match.group("stamp"), TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise BackupError(f"Invalid timestamp in backup archive name: {name}") from exc
