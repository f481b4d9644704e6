import argparse
import logging
import sys
from typing import Sequence, TextIO
import httpx
from config.settings import settings
from core.poll_loop import Fetcher, PollLoop
from core.progress_renderer import ProgressRenderer, RenderStyle, Screen
from model.process_status import JobHandle
from model.progress import KeyPress, LoopPhase, Resize
from service.job_launcher import JobLauncher
from service.status_service import RetryPolicy, StatusService
from util import terminal
from util.enums import ExitCode
from util.errors import AppError, ConfigError
from util.logger import init_logger

logger = logging.getLogger(settings.LOGGER_NAME)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ftsctl",
        description="Start an FTSnext transfer process and follow its progress.",
    )
    p.add_argument("-url", "--url", default=settings.FTS_URL, help="The url of FTSnext")
    p.add_argument(
        "-project", "--project", default=settings.PROJECT_NAME, help="Project to start"
    )
    p.add_argument(
        "-interval",
        "--interval",
        type=float,
        default=settings.POLL_INTERVAL_SECONDS,
        help="Seconds between status polls",
    )
    p.add_argument(
        "-retries",
        "--retries",
        type=int,
        default=settings.FETCH_RETRY_ATTEMPTS,
        help="Retries per failed status fetch (0 fails on the first error)",
    )
    p.add_argument("-log-level", "--log-level", default=None, help="Override LOG_LEVEL")
    return p.parse_args(argv)


def validate_url(raw: str) -> str:
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise ConfigError(f"Invalid url {raw!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigError(f"Invalid url {raw!r}: expected an absolute http(s) url")
    return str(url)


def monitor(
    handle: JobHandle,
    fetch: Fetcher,
    interval: float,
    stdout: TextIO | None = None,
    stdin: TextIO | None = None,
) -> LoopPhase:
    """
    Run the progress bar until the process completes or a key is pressed.
    """
    stdout = stdout or sys.stdout
    stdin = stdin or sys.stdin
    ansi = stdout.isatty()
    style = RenderStyle(
        padding=settings.RENDER_PADDING,
        max_width=settings.RENDER_MAX_WIDTH,
        color=ansi,
        frames=12 if ansi else 1,
    )
    renderer = ProgressRenderer(style)
    renderer.resize(terminal.terminal_size()[0])
    loop = PollLoop(
        handle,
        fetch,
        renderer,
        Screen(stdout, ansi=ansi),
        interval=interval,
        frame_interval=1 / settings.RENDER_FPS,
    )

    with terminal.cbreak(stdin) as interactive, terminal.on_resize(
        lambda w, h: loop.post(Resize(w, h))
    ):
        reader = None
        if interactive:
            reader = terminal.KeyReader(lambda key: loop.post(KeyPress(key)), stdin)
            reader.start()
        try:
            state = loop.run()
        finally:
            if reader is not None:
                reader.stop()
    return state.phase


def run(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    init_logger(args.log_level)

    try:
        base_url = validate_url(args.url)
        logger.info("url: %s", base_url)

        timeout = httpx.Timeout(settings.FETCH_TIMEOUT_SECONDS)
        retry = RetryPolicy(
            attempts=max(0, args.retries),
            backoff_seconds=settings.FETCH_RETRY_BACKOFF_SECONDS,
            max_backoff_seconds=settings.FETCH_RETRY_MAX_BACKOFF_SECONDS,
        )
        with httpx.Client(timeout=timeout) as client:
            launcher = JobLauncher(client, settings.REQUIRE_STATUS_LOCATION)
            handle = launcher.start(base_url, args.project)
            if not handle.available:
                logger.warning("Status unavailable, process started but cannot be followed")
                return ExitCode.OK

            phase = monitor(handle, StatusService(client, retry).fetch, args.interval)
    except AppError as e:
        logger.error("%s: %s", type(e).__name__, e.message)
        return int(e.exit_code)

    if phase == LoopPhase.COMPLETE:
        logger.info("Process completed")
    else:
        logger.info("Monitoring cancelled, process keeps running remotely")
    return ExitCode.OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
