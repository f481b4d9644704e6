# util/enums.py
from enum import Enum, IntEnum


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ExitCode(IntEnum):
    OK = 0
    FAILURE = 1
    CONFIG = 2
    LAUNCH = 3
    TRANSPORT = 4
    DECODE = 5
