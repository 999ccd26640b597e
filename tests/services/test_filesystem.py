import logging

from rich.console import Console

from mongobackup.services.filesystem import FileSystemService


def build_service():
    return FileSystemService(logger=logging.getLogger("mongobackup.test"), console=Console(quiet=True))


def test_artifact_size_reports_bytes(tmp_path):
    artifact = tmp_path / "mongodb-backup-20260101000000.gz"
    artifact.write_bytes(b"x" * 2048)

    assert build_service().artifact_size(str(artifact)) == 2048


def test_artifact_size_warns_and_returns_none_for_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="mongobackup.test"):
        size = build_service().artifact_size(str(tmp_path / "missing.gz"))

    assert size is None
    assert "Could not get file size" in caplog.text


def test_remove_file_deletes_artifact(tmp_path):
    artifact = tmp_path / "archive.gz"
    artifact.write_bytes(b"data")

    assert build_service().remove_file(str(artifact)) is True
    assert not artifact.exists()


def test_remove_file_warns_when_delete_fails(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="mongobackup.test"):
        removed = build_service().remove_file(str(tmp_path / "missing.gz"))

    assert removed is False
    assert "Could not remove local backup file" in caplog.text
