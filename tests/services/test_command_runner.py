import sys

import pytest

from mongobackup.errors import BackupError
from mongobackup.services.command_runner import CommandRunner


class DummyLogger:
    def __init__(self):
        self.messages = []

    def debug(self, message, *args, **_kwargs):
        self.messages.append(message % args)


def test_command_runner_raises_with_stderr():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(BackupError, match="boom"):
        runner.run([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(1)"])


def test_command_runner_combines_stdout_and_stderr():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [
            sys.executable,
            "-c",
            "import sys; sys.stdout.write('out;'); sys.stdout.flush(); sys.stderr.write('err')",
        ]
    )

    assert result.stdout == "out;err"


def test_command_runner_tolerates_undecodable_output():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'done dumping db\\xff\\n')"]
    )

    assert result.returncode == 0
    assert result.stdout == "done dumping db\ufffd\n"


def test_command_runner_redacts_secrets_in_logs_and_errors():
    logger = DummyLogger()
    runner = CommandRunner(logger=logger)

    with pytest.raises(BackupError) as excinfo:
        runner.run(
            [
                sys.executable,
                "-c",
                "import sys; print('bad password', sys.argv[1]); sys.exit(2)",
                "hunter2",
            ],
            secrets=["hunter2"],
        )

    assert "hunter2" not in str(excinfo.value)
    assert "Command failed (2)" in str(excinfo.value)
    assert "bad password ****" in str(excinfo.value)
    assert all("hunter2" not in message for message in logger.messages)


def test_command_runner_reports_missing_executable():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(BackupError, match="Required command not found: definitely-not-a-command"):
        runner.run(["definitely-not-a-command", "--version"])
