"""
CLI module for the importer package.
Provides command-line interface functionality and utilities.

The click group lives in ``company_importer.cli.main``.
"""

from .base import BaseCommand
from .config import Config
from .logging import setup_logging, get_logger

__all__ = ['BaseCommand', 'Config', 'setup_logging', 'get_logger']
