import logging
import sys

from dataclasses import dataclass, field
from typing import Optional

LOG_FORMAT = "[%(asctime)s %(levelname)s %(name)s] %(message)s"


@dataclass
class RunContext:
    """
    Settings of a single generation or decomposition run, handed explicitly to the engines.

    Attributes:
        debug: Whether the engines should emit debug diagnostics (per kind timings and counts).
        max_workers: Upper bound for the worker threads used per run, None lets the executor decide.
        logger: Logger the engines report to.
    """
    debug: bool = False
    max_workers: Optional[int] = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("ocdg"))

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    def debug_log(self, msg: str, *args) -> None:
        if self.debug:
            self.logger.debug(msg, *args)


def configure_logging(debug: bool = False) -> RunContext:
    """
    Configures the root logger once for a command line run and returns the matching RunContext.

    With debug enabled, debug messages are written to stdout, otherwise warnings and errors go to stderr.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stdout, format=LOG_FORMAT, force=True)
    else:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, force=True)
    return RunContext(debug=debug)
