import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from rich.console import Console

from .constants import ENV_BUCKET, ENV_PASSWORD
from .errors import BackupError
from .errors_catalog import actionable_error
from .models import BackupParameters, BackupRun, DumpProducer, DumpResult, Uploader, UploadMetadata
from .services.command_runner import CommandRunner
from .services.dump import MongoDumpService
from .services.filesystem import FileSystemService
from .services.upload import GCSUploader

console = Console()
logger = logging.getLogger("mongobackup")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


class BackupOrchestrator:
    """Runs one dump, upload and cleanup cycle and maps the outcome to an exit code."""

    def __init__(
        self,
        params: BackupParameters,
        dump_producer: Optional[DumpProducer] = None,
        uploader: Optional[Uploader] = None,
        filesystem_service: Optional[FileSystemService] = None,
        clock: Callable[[], datetime] = utc_now,
        dry_run: bool = False,
    ):
        self.params = params
        self.clock = clock
        self.dry_run = dry_run
        self.current_step_name: Optional[str] = None

        self.command_runner = CommandRunner(logger=logger)
        self.dump_producer = dump_producer or MongoDumpService(
            command_runner=self.command_runner,
            logger=logger,
        )
        self.uploader = uploader or GCSUploader(logger=logger)
        self.filesystem_service = filesystem_service or FileSystemService(
            logger=logger,
            console=console,
        )

    def validate_parameters(self):
        if not self.params.password:
            raise BackupError(actionable_error("missing_setting", name=ENV_PASSWORD))
        if not self.params.bucket:
            raise BackupError(actionable_error("missing_setting", name=ENV_BUCKET))
        if self.params.upload_timeout_minutes <= 0:
            raise BackupError("Upload timeout must be a positive number of minutes.")

    def plan(self) -> BackupRun:
        return BackupRun.at(self.params, self.clock())

    def _run_step(self, name: str, error_code: str, callback, *args):
        self.current_step_name = name
        logger.debug("Step started: %s", name)
        try:
            result = callback(*args)
        except BackupError as exc:
            raise BackupError(actionable_error(error_code, error=str(exc))) from exc
        logger.debug("Step finished: %s", name)
        self.current_step_name = None
        return result

    def produce_dump(self, backup_run: BackupRun) -> DumpResult:
        return self.dump_producer.produce_dump(self.params, backup_run.artifact_path)

    def upload_artifact(self, backup_run: BackupRun) -> int:
        try:
            reader = open(backup_run.artifact_path, "rb")
        except OSError as exc:
            raise BackupError(f"Failed to open file {backup_run.artifact_path}: {exc}") from exc

        metadata = UploadMetadata(created=rfc3339(self.clock()))
        with reader:
            return self.uploader.upload(
                self.params.bucket,
                backup_run.object_name,
                reader,
                metadata,
                self.params.upload_timeout_seconds,
            )

    def describe_plan(self, backup_run: BackupRun):
        console.print("[bold blue]Dry run: no dump or upload will be performed.[/bold blue]")
        logger.info("Archive would be written to %s", backup_run.artifact_path)
        logger.info("Archive would be uploaded to gs://%s/%s", self.params.bucket, backup_run.object_name)
        if isinstance(self.dump_producer, MongoDumpService):
            command = self.dump_producer.build_command(self.params, backup_run.artifact_path)
            logger.info(
                "Dump command: %s",
                CommandRunner.redact(" ".join(command), [self.params.password]),
            )

    def run(self) -> int:
        try:
            self.validate_parameters()
            backup_run = self.plan()

            if self.dry_run:
                self.describe_plan(backup_run)
                return 0

            logger.info(
                "Starting MongoDB backup of %s to %s",
                self.params.database,
                backup_run.artifact_path,
            )
            dump = self._run_step("produce_dump", "dump_failed", self.produce_dump, backup_run)
            if dump.output:
                logger.info("mongodump output: %s", dump.output)
            logger.info("Backup created successfully: %s", dump.artifact_path)

            self.filesystem_service.artifact_size(backup_run.artifact_path)

            logger.info("Uploading backup to GCS bucket: %s", self.params.bucket)
            self._run_step("upload_artifact", "upload_failed", self.upload_artifact, backup_run)
            logger.info(
                "Backup uploaded successfully to gs://%s/%s",
                self.params.bucket,
                backup_run.object_name,
            )

            self.filesystem_service.remove_file(backup_run.artifact_path)

            console.print("[bold green]Backup completed successfully![/bold green]")
            logger.info("Backup completed successfully!")
            return 0

        except BackupError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error during step %s", self.current_step_name or "run")
            return 1
