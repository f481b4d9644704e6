# service/status_service.py
import httpx
import logging
import time
from dataclasses import dataclass
from typing import Callable
from core.status_decoder import decode
from model.process_status import JobHandle, ProcessStatus
from util.errors import TransportError
from util.timing import timed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry around a status fetch. `attempts` counts retries after
    the first try; 0 fails on the first transport error.
    """

    attempts: int = 0
    backoff_seconds: float = 1.0
    max_backoff_seconds: float = 30.0

    def delay(self, retry: int) -> float:
        return min(self.max_backoff_seconds, self.backoff_seconds * (2 ** retry))


class StatusService:
    def __init__(
        self,
        client: httpx.Client,
        retry: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._retry = retry or RetryPolicy()
        self._sleep = sleep

    def fetch(self, handle: JobHandle) -> ProcessStatus:
        """
        GET the status document behind `handle` and decode it.
        Raises TransportError (after retries, if any) or DecodeError.
        """
        retry = 0
        while True:
            try:
                body = self._get(handle.statusUrl)
            except TransportError as e:
                if retry >= self._retry.attempts:
                    raise
                wait = self._retry.delay(retry)
                retry += 1
                logger.warning(
                    "poll.retry attempt=%d/%d wait=%.1fs err=%s",
                    retry,
                    self._retry.attempts,
                    wait,
                    e.message,
                )
                self._sleep(wait)
                continue
            return decode(body)

    def _get(self, url: str) -> bytes:
        try:
            with timed(logger, "poll.fetch", level=logging.DEBUG, url=url):
                res = self._client.get(url)
        except httpx.RequestError as e:
            logger.error("poll.request_error err=%s", type(e).__name__)
            raise TransportError(f"Fetching status from {url} failed: {e}") from e

        if not res.is_success:
            logger.error("poll.bad_status %d", res.status_code)
            raise TransportError(
                f"Status endpoint answered HTTP {res.status_code}",
                status_code=res.status_code,
            )
        return res.content
