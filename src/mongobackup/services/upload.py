"""Google Cloud Storage upload service for mongobackup."""

import time
from typing import BinaryIO, Callable

import requests
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from requests.adapters import BaseAdapter

from mongobackup.errors import BackupError, UploadDeadlineExceeded
from mongobackup.models import UploadMetadata

# Resumable upload chunks must be a multiple of 256 KiB.
DEFAULT_CHUNK_SIZE = 32 * 256 * 1024

UPLOAD_ERRORS = (GoogleAPIError, GoogleAuthError, requests.RequestException, OSError, ValueError)


class DeadlineAdapter(BaseAdapter):
    """Transport adapter that bounds every request by the time left in the upload budget."""

    def __init__(self, adapter: BaseAdapter, deadline: float, budget: float, clock: Callable[[], float]):
        super().__init__()
        self.adapter = adapter
        self.deadline = deadline
        self.budget = budget
        self.clock = clock

    def _expired(self) -> UploadDeadlineExceeded:
        return UploadDeadlineExceeded(
            f"Upload did not finish within {self.budget:g}s and was abandoned."
        )

    @staticmethod
    def _clamp(timeout, remaining: float):
        if timeout is None:
            return remaining
        if isinstance(timeout, tuple):
            return tuple(remaining if part is None else min(part, remaining) for part in timeout)
        return min(timeout, remaining)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        remaining = self.deadline - self.clock()
        if remaining <= 0:
            raise self._expired()

        response = self.adapter.send(
            request,
            stream=stream,
            timeout=self._clamp(timeout, remaining),
            verify=verify,
            cert=cert,
            proxies=proxies,
        )
        # a commit acknowledged after the deadline still fails the upload
        if self.clock() > self.deadline:
            response.close()
            raise self._expired()
        return response

    def close(self):
        self.adapter.close()


class GCSUploader:
    """Streams a local archive into a GCS object.

    Uploads go through a resumable session which is only finalized by the
    last chunk, so a failed or abandoned upload never leaves a partial object.
    Every HTTP request of the upload, the final commit included, shares one
    time budget.
    """

    def __init__(
        self,
        logger,
        storage_module=storage,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.logger = logger
        self.storage_module = storage_module
        self.chunk_size = chunk_size
        self.clock = clock

    def bound_session(self, session: requests.Session, deadline: float, budget: float):
        for prefix, adapter in list(session.adapters.items()):
            session.mount(prefix, DeadlineAdapter(adapter, deadline, budget, self.clock))

    def upload(
        self,
        bucket_name: str,
        object_name: str,
        reader: BinaryIO,
        metadata: UploadMetadata,
        timeout: float,
    ) -> int:
        deadline = self.clock() + timeout
        uri = f"gs://{bucket_name}/{object_name}"

        try:
            client = self.storage_module.Client()
        except (GoogleAuthError, GoogleAPIError, OSError) as exc:
            raise BackupError(f"Failed to create storage client: {exc}") from exc

        try:
            # the client and its uploads share this session
            self.bound_session(client._http, deadline, timeout)

            blob = client.bucket(bucket_name).blob(object_name, chunk_size=self.chunk_size)
            blob.content_type = metadata.content_type
            blob.metadata = metadata.as_dict()

            self.logger.debug("Opening resumable upload to %s", uri)
            blob.upload_from_file(
                reader,
                rewind=False,
                content_type=metadata.content_type,
                timeout=timeout,
                retry=None,
            )
            written = reader.tell()
        except UPLOAD_ERRORS as exc:
            raise BackupError(f"Failed to upload to {uri}: {exc}") from exc
        finally:
            client.close()

        self.logger.info("Uploaded %d bytes to GCS", written)
        return written
