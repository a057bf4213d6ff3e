import logging
import sys

FORMATS = {
    "development": "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
    "structured": '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
}

# third-party loggers held at WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3", "watchdog", "PIL")


def setup_logging(level: str = "INFO", environment: str = "development") -> None:
    """Send all records to stderr; plain lines in development, JSON-like lines elsewhere."""
    fmt = FORMATS["development"] if environment == "development" else FORMATS["structured"]
    logging.basicConfig(level=level.upper(), format=fmt, stream=sys.stderr, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
