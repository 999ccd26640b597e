import subprocess

import pytest

from mongobackup.errors import BackupError
from mongobackup.models import BackupParameters
from mongobackup.services.command_runner import CommandRunner
from mongobackup.services.dump import MongoDumpService


class DummyLogger:
    def __init__(self):
        self.infos = []

    def info(self, message, *args, **_kwargs):
        self.infos.append(message % args)

    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class FakeRunner:
    redact = staticmethod(CommandRunner.redact)

    def __init__(self, returncode=0, stdout="", error=None):
        self.returncode = returncode
        self.stdout = stdout
        self.error = error
        self.calls = []

    def run(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.error:
            raise self.error
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout)


def build_params(**overrides):
    values = {"password": "s3cret", "bucket": "nightly-dumps", "user": "backup"}
    values.update(overrides)
    return BackupParameters(**values)


def test_build_command_matches_mongodump_contract():
    service = MongoDumpService(command_runner=FakeRunner(), logger=DummyLogger())

    command = service.build_command(build_params(port=27018), "/tmp/mongodb-backup-1.gz")

    assert command == [
        "mongodump",
        "--host",
        "localhost",
        "--port",
        "27018",
        "--username",
        "backup",
        "--password",
        "s3cret",
        "--authenticationDatabase",
        "admin",
        "--archive=/tmp/mongodb-backup-1.gz",
        "--gzip",
    ]


def test_produce_dump_returns_redacted_output():
    runner = FakeRunner(stdout="writing admin.system.users with s3cret\ndone dumping\n")
    logger = DummyLogger()
    service = MongoDumpService(command_runner=runner, logger=logger)

    result = service.produce_dump(build_params(), "/tmp/archive.gz")

    cmd, kwargs = runner.calls[0]
    assert cmd[0] == "mongodump"
    assert kwargs == {"secrets": ["s3cret"]}
    assert result.artifact_path == "/tmp/archive.gz"
    assert "s3cret" not in result.output
    assert result.output.endswith("done dumping")


def test_produce_dump_wraps_runner_failure():
    runner = FakeRunner(error=BackupError("Command failed (1): mongodump\nauthentication failed"))
    service = MongoDumpService(command_runner=runner, logger=DummyLogger())

    with pytest.raises(BackupError, match="mongodump error: Command failed \\(1\\)"):
        service.produce_dump(build_params(), "/tmp/archive.gz")
