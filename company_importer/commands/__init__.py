"""
Command implementations for the importer CLI.
Each submodule provides specific command functionality.
"""

from .companies import (
    ClearCompaniesCommand,
    ImportCompaniesCommand,
    ListCompaniesCommand,
    ListCountriesCommand,
    ListEmployeeSizesCommand
)
from .utils import InitDatabaseCommand, TestConnectionCommand

__all__ = [
    'ClearCompaniesCommand',
    'ImportCompaniesCommand',
    'ListCompaniesCommand',
    'ListCountriesCommand',
    'ListEmployeeSizesCommand',
    'InitDatabaseCommand',
    'TestConnectionCommand'
]
