from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.record import RECORD_FIELDS, Record, format_salary

# attribute -> (header, justify)
COLUMNS = {
    "id": ("Id", "right"),
    "first_name": ("FirstName", "left"),
    "last_name": ("LastName", "left"),
    "date_of_birth": ("DateOfBirth", "right"),
    "workplace_number": ("Place №", "right"),
    "salary": ("Salary", "right"),
    "department": ("Department", "right"),
}


def format_cell(record: Record, attribute: str) -> str:
    value = getattr(record, attribute)
    if attribute == "date_of_birth":
        return value.strftime("%Y-%b-%d")
    if attribute == "salary":
        return format_salary(value)
    return str(value)


class RecordTablePrinter:
    """Prints records as a rich table, optionally limited to some columns."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def build_table(self, records: Iterable[Record],
                    columns: Optional[Sequence[str]] = None) -> Optional[Table]:
        """
        Build the table, or return None when there are no records.

        Args:
            records: Records to show, in order
            columns: Record attribute names to include (all when empty)
        """
        selected = [name for name in RECORD_FIELDS if not columns or name in columns]

        table = Table(show_lines=False)
        for attribute in selected:
            header, justify = COLUMNS[attribute]
            table.add_column(header, justify=justify)

        for record in records:
            table.add_row(*(Text(format_cell(record, attribute)) for attribute in selected))

        return table if table.row_count else None

    def print(self, records: Iterable[Record], columns: Optional[Sequence[str]] = None) -> None:
        table = self.build_table(records, columns)
        if table is None:
            self.console.print("No records found.")
            return
        self.console.print(table)
