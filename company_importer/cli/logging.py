"""
Logging setup for the importer CLI.
Everything goes to stderr so command output on stdout stays parseable.
"""

import logging
import sys

# Third-party loggers that are noisy below WARNING
QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool', 'openai', 'httpx', 'httpcore')

class DebugFormatter(logging.Formatter):
    """Timestamped `[created] logger: message` lines, cyan on a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{record.created:.3f}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if sys.stderr.isatty():
            return f"\033[0;36m{line}\033[0m"
        return line

class ConsoleFormatter(logging.Formatter):
    """Plain `LEVEL: message` lines for normal runs."""

    def __init__(self):
        super().__init__('%(levelname)s: %(message)s')

def setup_logging(debug: bool = False, level: str = 'INFO') -> None:
    """Configure the root logger for a CLI run.

    Args:
        debug: Log everything with the debug formatter; overrides level
        level: Level name from LOG_LEVEL, unknown names fall back to INFO
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    if debug:
        root_logger.setLevel(logging.DEBUG)
        handler.setFormatter(DebugFormatter())
    else:
        root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``company_importer`` namespace."""
    if not name.startswith('company_importer'):
        name = f"company_importer.{name}"
    return logging.getLogger(name)
