"""
Core CLI implementation for the importer package.
"""

import click
from pathlib import Path

from .config import Config
from .logging import setup_logging, get_logger
from ..commands.companies import (
    ClearCompaniesCommand,
    ImportCompaniesCommand,
    ListCompaniesCommand,
    ListCountriesCommand,
    ListEmployeeSizesCommand
)
from ..commands.utils import InitDatabaseCommand, TestConnectionCommand

@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Company importer CLI tool"""
    # Store debug flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    # Initialize config and store in context
    try:
        config = Config.from_env()
        config.validate()
        ctx.obj['config'] = config
    except Exception as e:
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)

    setup_logging(debug=debug, level=config.log_level)

    logger = get_logger('cli')
    if debug:
        logger.debug("Debug mode enabled")

@cli.command()
@click.pass_obj
def test_connection(obj):
    """Test database connectivity"""
    TestConnectionCommand(obj['config']).execute()

@cli.command('init-db')
@click.pass_obj
def init_db(obj):
    """Create the company table if it does not exist"""
    InitDatabaseCommand(obj['config']).execute()

@cli.command('import')
@click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option('--use-ai/--no-ai', default=False, help='Fill missing fields with the inference service')
@click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save import summary to file')
@click.pass_obj
def import_companies(obj, file: Path, use_ai: bool, output: Path | None):
    """Clean, enrich and deduplicate companies from a CSV file."""
    command = ImportCompaniesCommand(obj['config'], file, output, use_ai=use_ai)
    if not command.validate():
        raise click.Abort()
    command.execute()

# Company Commands Group
@cli.group()
def companies():
    """Company data management commands"""
    pass

@companies.command('list')
@click.option('--country', help='Only companies in this country')
@click.option('--employee-size', help='Only companies in this employee size bucket')
@click.option('--domain', help='Only companies whose domain contains this text')
@click.option('--limit', type=int, default=50, help='Number of companies to show (max 500)')
@click.option('--offset', type=int, default=0, help='Number of companies to skip')
@click.pass_obj
def list_companies(obj, country, employee_size, domain, limit: int, offset: int):
    """List companies, newest first."""
    ListCompaniesCommand(obj['config'], country, employee_size, domain, limit, offset).execute()

@companies.command('clear')
@click.confirmation_option(prompt='Delete every company record?')
@click.pass_obj
def clear_companies(obj):
    """Delete every company record."""
    ClearCompaniesCommand(obj['config']).execute()

@companies.command('countries')
@click.pass_obj
def list_countries(obj):
    """List known country names."""
    ListCountriesCommand(obj['config']).execute()

@companies.command('sizes')
@click.pass_obj
def list_sizes(obj):
    """List employee size buckets."""
    ListEmployeeSizesCommand(obj['config']).execute()
