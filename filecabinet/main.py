"""
Main application module.
"""
import logging
import sys
from typing import Optional, Sequence

from colorama import just_fix_windows_console
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .cli import CabinetConsole, CommandDispatcher
from .config import Settings, build_service, parse_args
from .core.exceptions import FileCabinetException
from .validation import create_validator

BANNER = "File Cabinet Application"


def setup_logging(level: str = "WARNING") -> None:
    """Send diagnostics of the filecabinet package through rich."""
    package_logger = logging.getLogger("filecabinet")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(rich_tracebacks=True, show_path=False))


def run(settings: Settings, console: Optional[Console] = None) -> int:
    """Build the service from settings and run the interactive session."""
    console = console or Console()
    try:
        validator = create_validator(settings.validation_rules, settings.rules_file)
        service = build_service(settings, validator)
    except FileCabinetException as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    try:
        dispatcher = CommandDispatcher(service, validator, console)
        CabinetConsole(dispatcher, console).run(f"{BANNER}\n{settings.describe()}")
    finally:
        service.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point of the application."""
    just_fix_windows_console()
    settings = parse_args(argv)
    setup_logging(settings.log_level)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
