import pytest


@pytest.fixture(autouse=True)
def _plain_session_endpoint(monkeypatch):
    # The fake transport is a plain requests.Session, which lacks the
    # ``is_mtls`` attribute google-cloud-core probes in "auto" mode.
    monkeypatch.setenv("GOOGLE_API_USE_MTLS_ENDPOINT", "never")
