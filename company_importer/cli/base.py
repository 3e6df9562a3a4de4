"""
Command classes shared by the importer CLI.
Commands receive the loaded Config and read the debug flag from the click context.
"""

import click
import functools
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .config import Config

from ..db.store import CompanyStore, get_store
from ..processors.error_tracker import ErrorTracker

class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()

        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))

    @property
    def store(self) -> CompanyStore:
        """Shared store for the configured database, created on first use."""
        return get_store(self.config.database_url)

    @abstractmethod
    def execute(self) -> None:
        """Run the command."""

    def validate(self) -> bool:
        """Check preconditions before execute; False aborts the command."""
        return True

class FileInputCommand(BaseCommand):
    """Command reading one input file and optionally writing a report."""

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = input_file
        self.output_file = output_file

    def validate(self) -> bool:
        if not super().validate():
            return False

        if not self.input_file.is_file():
            self.logger.error(f"Input file not found: {self.input_file}")
            return False

        if self.output_file and not self.output_file.parent.exists():
            self.logger.error(f"Output directory does not exist: {self.output_file.parent}")
            return False

        return True

def command_error_handler(f):
    """Report any failure of a command as a one-line error and abort.

    The full summary and traceback are only logged in debug mode.
    """
    @functools.wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            result = f(self, *args, **kwargs)
        except click.Abort:
            raise
        except Exception as e:
            self.error_tracker.add_error(
                type(e).__name__,
                str(e) or repr(e),
                {'command': self.__class__.__name__}
            )
            click.secho(f"Error: {self.error_tracker.first_message()}", fg='red', err=True)
            if self.debug:
                self.error_tracker.log_summary(self.logger)
                self.logger.debug("Command failed", exc_info=True)
            raise click.Abort()

        if self.debug:
            self.logger.debug(f"{self.__class__.__name__} finished in {time.time() - start:.3f}s")
        return result
    return wrapper
