# service/job_launcher.py
import httpx
import logging
from urllib.parse import quote
from model.process_status import JobHandle
from util.constants import ExternalURIs, Headers
from util.errors import LaunchError, MissingStatusLocation
from util.functions import clip_words, join_url

logger = logging.getLogger(__name__)


class JobLauncher:
    """
    Starts a transfer process and hands back where to poll its status.
    """

    def __init__(self, client: httpx.Client, require_location: bool = False) -> None:
        self._client = client
        self._require_location = require_location

    def start(self, base_url: str, project: str) -> JobHandle:
        path = ExternalURIs.START_PROCESS.format(project=quote(project, safe=""))
        url = join_url(base_url, path)
        logger.info("launch.start url=%s project=%s", url, project)

        try:
            res = self._client.post(url)
        except httpx.RequestError as e:
            logger.error("launch.request_error err=%s", type(e).__name__)
            raise LaunchError(f"Could not start process at {url}: {e}") from e

        if not res.is_success:
            logger.error("launch.bad_status %d", res.status_code)
            body = clip_words(res.text) if res.text else ""
            raise LaunchError(
                f"Starting process failed with HTTP {res.status_code}"
                + (f": {body}" if body else "")
            )

        location = res.headers.get(Headers.CONTENT_LOCATION, "").strip()
        if not location:
            if self._require_location:
                raise MissingStatusLocation(
                    f"Start response from {url} has no {Headers.CONTENT_LOCATION} header"
                )
            logger.warning("launch.no_content_location url=%s", url)
            return JobHandle()

        # A relative location is relative to the start request
        status_url = str(res.request.url.join(location))
        logger.info("launch.started status_url=%s", status_url)
        return JobHandle(statusUrl=status_url)
