"""
Company-related commands for the importer CLI.
Handles company uploads, listing and bulk clearing.
"""

import json
import click
from pathlib import Path
from typing import Optional

from ...cli.base import BaseCommand, FileInputCommand, command_error_handler
from ...cli.config import Config
from ...importer import CompanyImporter
from ...utils.normalization import EMPLOYEE_BUCKETS, country_names

class ImportCompaniesCommand(FileInputCommand):
    """Command to clean, enrich and deduplicate companies from a CSV file."""

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None, use_ai: bool = False):
        super().__init__(config, input_file, output_file)
        self.use_ai = use_ai

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        if self.use_ai and not self.config.enrichment_enabled:
            self.logger.warning("Enrichment requested but OPENAI_API_KEY is not set or OPENAI_ENABLED is off")

        importer = CompanyImporter.from_config(self.config, debug=self.debug)
        summary = importer.import_file(self.input_file, use_ai=self.use_ai)

        if self.config.output_format == 'json':
            click.echo(json.dumps(summary, indent=2, default=str))
        else:
            click.echo("\nCompany Import Summary:")
            click.echo(f"Rows Processed: {summary['rows_processed']}")
            click.echo(f"Promoted: {summary['companies_promoted']}")
            click.echo(f"Upserted: {summary['companies_upserted']}")
            click.echo(f"Updated: {summary['companies_updated']}")
            click.echo(f"Inserted: {summary['companies_inserted']}")

        if self.output_file:
            with open(self.output_file, 'w') as f:
                json.dump(summary, f, indent=2, default=str)
            click.echo(f"\nDetailed results saved to {self.output_file}")

class ListCompaniesCommand(BaseCommand):
    """Command to list the most recent companies in the database."""

    def __init__(
        self,
        config: Config,
        country: Optional[str] = None,
        employee_size: Optional[str] = None,
        domain: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ):
        super().__init__(config)
        self.country = country
        self.employee_size = employee_size
        self.domain = domain
        self.limit = limit
        self.offset = offset

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        companies, total_count = self.store.list_companies(
            country=self.country,
            employee_size=self.employee_size,
            domain=self.domain,
            limit=self.limit,
            offset=self.offset
        )

        if self.config.output_format == 'json':
            click.echo(json.dumps({'data': companies, 'total': total_count}, indent=2, default=str))
            return

        if not companies:
            click.echo("No companies found in database")
            return

        click.echo(f"\nShowing {len(companies)} of {total_count} companies:")
        for company in companies:
            details = ', '.join(
                value for value in (company['city'], company['country'], company['employee_size_bucket'])
                if value
            )
            click.echo(f"  - {company['name'] or '(no name)'} [{company['domain'] or 'no domain'}] {details}")

class ClearCompaniesCommand(BaseCommand):
    """Command to delete every company record."""

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        deleted = self.store.delete_all()
        click.secho(f"Deleted {deleted} companies", fg='green')

class ListCountriesCommand(BaseCommand):
    """Command to print the country names used for normalized records."""

    @command_error_handler
    def execute(self) -> None:
        for name in country_names():
            click.echo(name)

class ListEmployeeSizesCommand(BaseCommand):
    """Command to print the employee size buckets."""

    @command_error_handler
    def execute(self) -> None:
        for bucket in EMPLOYEE_BUCKETS:
            click.echo(bucket)

__all__ = [
    'ImportCompaniesCommand',
    'ListCompaniesCommand',
    'ClearCompaniesCommand',
    'ListCountriesCommand',
    'ListEmployeeSizesCommand'
]
