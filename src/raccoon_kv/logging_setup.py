"""Logging setup for applications embedding raccoon-kv.

The library itself only emits records on its module loggers; call
``configure_logging`` from an entry point to see them.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str = logging.INFO, stream=None) -> None:
    """Send log records to ``stream`` (stderr by default) with the standard format.

    Args:
        level: Level for the ``raccoon_kv`` logger, as a number or name
        stream: Output stream
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logging.basicConfig(format=LOG_FORMAT, stream=stream or sys.stderr)
    logging.getLogger("raccoon_kv").setLevel(level)
