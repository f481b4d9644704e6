# util/errors.py
from util.enums import ExitCode


class AppError(Exception):
    # Flow: raise AppError subclasses; main.run() maps them to an exit code.
    exit_code: ExitCode = ExitCode.FAILURE

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(AppError):
    exit_code = ExitCode.CONFIG


class LaunchError(AppError):
    exit_code = ExitCode.LAUNCH


class MissingStatusLocation(LaunchError):
    """Start response carried no Content-Location header."""


class DecodeError(AppError):
    exit_code = ExitCode.DECODE


class TransportError(AppError):
    exit_code = ExitCode.TRANSPORT

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
