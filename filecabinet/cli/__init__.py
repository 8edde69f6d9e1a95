"""
Console front end: command parsing, dispatch, table printing and the REPL.
"""

from .commands import CommandDispatcher, HELP_MESSAGES
from .console import CabinetConsole
from .printer import RecordTablePrinter

__all__ = ['CommandDispatcher', 'CabinetConsole', 'RecordTablePrinter', 'HELP_MESSAGES']
