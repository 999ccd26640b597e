"""mongodump invocation for mongobackup."""

from typing import List

from mongobackup.constants import DUMP_EXECUTABLE
from mongobackup.errors import BackupError
from mongobackup.models import BackupParameters, DumpResult


class MongoDumpService:
    """Produces a gzip archive of a MongoDB deployment with mongodump."""

    def __init__(self, command_runner, logger, executable: str = DUMP_EXECUTABLE):
        self.command_runner = command_runner
        self.logger = logger
        self.executable = executable

    def build_command(self, params: BackupParameters, artifact_path: str) -> List[str]:
        return [
            self.executable,
            "--host",
            params.host,
            "--port",
            str(params.port),
            "--username",
            params.user,
            "--password",
            params.password,
            "--authenticationDatabase",
            params.auth_database,
            f"--archive={artifact_path}",
            "--gzip",
        ]

    def produce_dump(self, params: BackupParameters, artifact_path: str) -> DumpResult:
        self.logger.debug("Dumping %s:%s to %s", params.host, params.port, artifact_path)
        try:
            result = self.command_runner.run(
                self.build_command(params, artifact_path),
                secrets=[params.password],
            )
        except BackupError as exc:
            raise BackupError(f"mongodump error: {exc}") from exc

        output = self.command_runner.redact((result.stdout or "").strip(), [params.password])
        return DumpResult(artifact_path=artifact_path, output=output)
