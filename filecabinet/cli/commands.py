import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console
from rich.text import Text

from ..core.exceptions import ParsingException, StorageError
from ..core.record import Record, parse_date, parse_salary
from ..core.snapshot import ServiceSnapshot
from ..storage import FileCabinetService
from ..validation import RecordValidator
from . import parser
from .printer import RecordTablePrinter

logger = logging.getLogger(__name__)

HINT_MESSAGE = "Enter your command, or enter 'help' to get help."

# verb -> (short description, explanation)
HELP_MESSAGES = {
    "create": ("creates a record and returns its id",
               "The 'create' command asks for every field and creates a record with the next free id."),
    "insert": ("inserts a record with the specified id",
               f"The 'insert' command inserts a record with the specified id. Example: {parser.INSERT_EXAMPLE}"),
    "update": ("edits records with the specified parameters",
               f"The 'update' command edits records with the specified parameters. Example: {parser.UPDATE_EXAMPLE}"),
    "delete": ("removes records with the specified parameters",
               f"The 'delete' command removes records with the specified parameters. Example: {parser.DELETE_EXAMPLE}"),
    "select": ("searches records by specified parameters",
               "The 'select' command prints records. Example: select id, firstname where lastname = 'Smith' or department = 'A'"),
    "stat": ("prints statistics on records",
             "The 'stat' command prints the number of stored and deleted records."),
    "import": ("imports records from file",
               "The 'import' command imports records from a csv or xml file. Example: import csv records.csv"),
    "export": ("exports records to a file",
               "The 'export' command exports records to a csv or xml file. Example: export xml records.xml"),
    "purge": ("defragments the data file",
              "The 'purge' command removes deleted records from the data file."),
    "help": ("prints the help screen",
             "The 'help' command prints the help screen. Example: help select"),
    "exit": ("exits the application",
             "The 'exit' command exits the application."),
}


def _reject_parameters(verb: str, parameters: str) -> None:
    if parameters.strip():
        raise ParsingException(f"The '{verb}' command takes no parameters.")


def _plural(ids: list[int], verb: str) -> str:
    joined = ", ".join(f"#{record_id}" for record_id in ids)
    if len(ids) == 1:
        return f"Record {joined} is {verb}."
    return f"Records {joined} are {verb}."


class CommandDispatcher:
    """
    Translates console lines into storage service calls.

    Verbs are looked up in an ordered table of handler methods. Each
    handler returns True to keep the session running; only ``exit``
    returns False. FileCabinetException subclasses raised by parsing or
    by the service propagate to the caller.
    """

    def __init__(self, service: FileCabinetService, validator: RecordValidator,
                 console: Optional[Console] = None,
                 prompt: Optional[Callable[[str], str]] = None):
        self.service = service
        self.validator = validator
        self.console = console or Console()
        self.prompt = prompt or self.console.input
        self.printer = RecordTablePrinter(self.console)

        self.handlers: dict[str, Callable[[str], bool]] = {
            "create": self.create,
            "insert": self.insert,
            "update": self.update,
            "delete": self.delete,
            "select": self.select,
            "stat": self.stat,
            "import": self.import_records,
            "export": self.export_records,
            "purge": self.purge,
            "help": self.help,
            "exit": self.exit,
        }

    def execute(self, line: str) -> bool:
        """
        Run one console line.

        Returns:
            False when the session should end, True otherwise
        """
        parts = (line or "").strip().split(maxsplit=1)
        if not parts:
            self.say(HINT_MESSAGE)
            return True

        verb = parts[0].lower()
        parameters = parts[1] if len(parts) > 1 else ""

        handler = self.handlers.get(verb)
        if handler is None:
            self.say(f"There is no '{parts[0]}' command.")
            self.say(HINT_MESSAGE)
            return True

        logger.debug("Dispatching %s(%r)", verb, parameters)
        return handler(parameters)

    def say(self, message: str) -> None:
        self.console.print(Text(message))

    def create(self, parameters: str) -> bool:
        record = Record(
            first_name=self._ask("First name: ", str, self.validator.validate_first_name),
            last_name=self._ask("Last name: ", str, self.validator.validate_last_name),
            date_of_birth=self._ask("Date of birth (month/day/year): ", parse_date,
                                    self.validator.validate_date_of_birth),
            workplace_number=self._ask("Workplace number: ", int,
                                       self.validator.validate_workplace_number),
            salary=self._ask("Salary: ", parse_salary, self.validator.validate_salary),
            department=self._ask("Department (uppercase letter): ", str,
                                 self.validator.validate_department),
        )
        record_id = self.service.create_record(record)
        self.say(f"Record #{record_id} is created.")
        return True

    def insert(self, parameters: str) -> bool:
        record = parser.parse_insert(parameters)
        record_id = self.service.create_record(record)
        self.say(f"Record with ID = '{record_id}' added.")
        return True

    def update(self, parameters: str) -> bool:
        changes, query = parser.parse_update(parameters)
        records = list(self.service.search(query))
        if not records:
            self.say("No records with such parameters.")
            return True

        for record in records:
            self.service.edit_record(replace(record, **changes))
        self.say(_plural([record.id for record in records], "updated"))
        return True

    def delete(self, parameters: str) -> bool:
        query = parser.parse_delete(parameters)
        ids = [record.id for record in self.service.search(query)]
        if not ids:
            self.say("No records with such parameters.")
            return True

        for record_id in ids:
            self.service.remove_record(record_id)
        self.say(_plural(ids, "deleted"))
        return True

    def select(self, parameters: str) -> bool:
        columns, query = parser.parse_select(parameters)
        records = self.service.get_records() if query is None else self.service.search(query)
        self.printer.print(records, columns)
        return True

    def stat(self, parameters: str) -> bool:
        _reject_parameters("stat", parameters)
        self.say(str(self.service.get_stat()))
        return True

    def import_records(self, parameters: str) -> bool:
        file_format, path = parser.parse_file_argument(parameters)
        if not Path(path).is_file():
            self.say(f"Import error: file {path} is not exist.")
            return True

        try:
            if file_format == "csv":
                with open(path, "r", encoding="utf-8", newline="") as reader:
                    snapshot = ServiceSnapshot.load_from_csv(reader)
            else:
                with open(path, "rb") as reader:
                    snapshot = ServiceSnapshot.load_from_xml(reader)
        except OSError as e:
            raise StorageError(f"Import error: can't read file {path}: {e}")

        count = self.service.restore(snapshot)
        self.say(f"{count} records are imported from file {path}.")
        return True

    def export_records(self, parameters: str) -> bool:
        file_format, path = parser.parse_file_argument(parameters)
        target = Path(path)
        if target.exists():
            answer = self.prompt(f"File is exist - rewrite {path}? [Y/n] ")
            if answer.strip().lower() not in ("y", "yes"):
                self.say("Operation canceled.")
                return True

        snapshot = self.service.make_snapshot()
        try:
            with open(target, "w", encoding="utf-8", newline="") as writer:
                if file_format == "csv":
                    snapshot.save_to_csv(writer)
                else:
                    snapshot.save_to_xml(writer)
        except OSError as e:
            raise StorageError(f"Export failed: can't open file {path}: {e}")

        self.say(f"All records are exported to file {path}.")
        return True

    def purge(self, parameters: str) -> bool:
        _reject_parameters("purge", parameters)
        purged = self.service.purge()
        total = purged + self.service.get_stat().active
        self.say(f"Data file processing is completed: {purged} of {total} records were purged.")
        return True

    def help(self, parameters: str) -> bool:
        topic = parameters.strip().lower()
        if topic:
            entry = HELP_MESSAGES.get(topic)
            if entry is None:
                self.say(f"There is no explanation for '{parameters.strip()}' command.")
            else:
                self.say(entry[1])
            return True

        self.say("Available commands:")
        for verb, (description, _) in HELP_MESSAGES.items():
            self.say(f"\t{verb}\t- {description}")
        return True

    def exit(self, parameters: str) -> bool:
        self.say("Exiting an application...")
        return False

    def _ask(self, label: str, converter: Callable[[str], Any],
             validate: Callable[[Any], tuple[bool, str]]) -> Any:
        """Prompt until the input converts and validates."""
        while True:
            text = self.prompt(label).strip()
            try:
                value = converter(text)
            except ValueError as e:
                self.say(f"Conversion failed: {e}. Please, correct your input.")
                continue

            is_valid, message = validate(value)
            if not is_valid:
                self.say(f"Validation failed: {message} Please, correct your input.")
                continue
            return value
