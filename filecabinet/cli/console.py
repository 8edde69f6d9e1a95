import logging

from rich.console import Console
from rich.markup import escape

from ..core.exceptions import FileCabinetException
from .commands import HINT_MESSAGE, CommandDispatcher

logger = logging.getLogger(__name__)

PROMPT = "> "


class CabinetConsole:
    """
    Interactive read-eval-print loop over a CommandDispatcher.

    A failing command prints its error in red and the loop goes on;
    end of input or Ctrl+C ends the session like ``exit``.
    """

    def __init__(self, dispatcher: CommandDispatcher, console: Console = None):
        self.dispatcher = dispatcher
        self.console = console or dispatcher.console

    def run_command(self, line: str) -> bool:
        try:
            return self.dispatcher.execute(line)
        except FileCabinetException as e:
            logger.debug("Command %r failed: %s", line, e)
            self.console.print(f"[red]{escape(str(e))}[/red]")
            return True

    def run(self, banner: str = "") -> None:
        if banner:
            self.console.print(escape(banner))
        self.console.print(HINT_MESSAGE)
        self.console.print()

        running = True
        while running:
            try:
                line = self.dispatcher.prompt(PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            running = self.run_command(line)
