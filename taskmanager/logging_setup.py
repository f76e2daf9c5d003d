"""Process-wide logging configuration."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ThirdPartyFilter(logging.Filter):
    """Pass everything from our package and uvicorn; other libraries only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(("taskmanager", "uvicorn")):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> None:
    """Configure the root logger with a stderr handler and an optional file handler.

    Call this once, before the first log line.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    console.addFilter(_ThirdPartyFilter())
    root.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
