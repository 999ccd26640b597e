"""Defaults and fixed markers for mongobackup."""

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 27017
DEFAULT_DATABASE = "go-mongodb"
DEFAULT_USER = "admin"
DEFAULT_STAGING_DIR = "/tmp"
DEFAULT_UPLOAD_TIMEOUT_MINUTES = 10

AUTH_DATABASE = "admin"
DUMP_EXECUTABLE = "mongodump"

ARTIFACT_PREFIX = "mongodb-backup"
OBJECT_PREFIX = "backup"
ARCHIVE_SUFFIX = ".gz"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

CONTENT_TYPE = "application/gzip"
SOURCE_TAG = "mongodb-backup-script"

ENV_USER = "MONGO_USER"
ENV_PASSWORD = "MONGO_PASSWORD"
ENV_BUCKET = "BACKUP_BUCKET"
