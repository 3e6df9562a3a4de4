"""
Utility commands for the importer CLI.
Provides helper commands for system operations and diagnostics.
"""

import click
from sqlalchemy import text

from ...cli.base import BaseCommand, command_error_handler
from ...cli.config import Config
from ...db.store import init_db

class TestConnectionCommand(BaseCommand):
    """Command to test database connectivity."""

    def __init__(self, config: Config):
        super().__init__(config)

    @command_error_handler
    def execute(self) -> None:
        """Execute the connection test."""
        self.logger.info("Testing database connection...")

        with self.store.engine.connect() as conn:
            conn.execute(text("SELECT 1")).scalar()

        click.secho(
            "Successfully connected to the database!",
            fg='green'
        )

class InitDatabaseCommand(BaseCommand):
    """Command to create the company table."""

    @command_error_handler
    def execute(self) -> None:
        """Create missing tables."""
        init_db(self.store.engine)
        click.secho("Database schema ensured.", fg='green')

__all__ = ['TestConnectionCommand', 'InitDatabaseCommand']
