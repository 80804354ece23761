import logging
import sys

# pandas and pyarrow pull these in; they log at INFO on import.
QUIET_LOGGERS = ("numexpr", "fsspec")

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(*, verbose: bool = False) -> None:
    """Send framing_model logs to stderr, at DEBUG when ``verbose``."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    quiet_level = logging.NOTSET if verbose else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
