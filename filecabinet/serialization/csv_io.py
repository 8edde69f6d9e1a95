import csv
from datetime import date
from decimal import Decimal
from typing import Iterable, TextIO

from ..core.exceptions import ImportFormatError
from ..core.record import Record, format_date, format_salary, parse_date, parse_salary

CSV_HEADER = "Id,First Name,Last Name,Date of Birth,Workplace Number,Salary,Department"
CSV_COLUMNS = 7


class RecordCsvWriter:
    """
    Writes records as comma separated lines under a fixed header.

    Fields are joined with a plain comma and never quoted, so a name that
    itself contains a comma will not read back correctly.
    """

    def __init__(self, writer: TextIO):
        if writer is None:
            raise TypeError("Writer cannot be None")
        self._writer = writer

    def write(self, records: Iterable[Record]) -> int:
        """
        Write the header followed by one line per record.

        Returns:
            Number of records written
        """
        if records is None:
            raise TypeError("Records cannot be None")

        self._writer.write(CSV_HEADER + "\n")
        count = 0
        for record in records:
            self._writer.write(self.format_line(record) + "\n")
            count += 1
        return count

    @staticmethod
    def format_line(record: Record) -> str:
        return ",".join((
            str(record.id),
            record.first_name,
            record.last_name,
            format_date(record.date_of_birth),
            str(record.workplace_number),
            format_salary(record.salary),
            record.department,
        ))


class RecordCsvReader:
    """Reads records written by RecordCsvWriter. The first line is skipped as a header."""

    def __init__(self, reader: TextIO):
        if reader is None:
            raise TypeError("Reader cannot be None")
        self._reader = reader

    def read_all(self) -> list[Record]:
        """
        Parse every data line.

        Raises:
            ImportFormatError: If a line has the wrong number of fields or
                               a field cannot be converted
        """
        records = []
        rows = csv.reader(self._reader)
        next(rows, None)

        for row in rows:
            if not row or all(not cell.strip() for cell in row):
                continue
            records.append(self._parse_row(row, rows.line_num))

        return records

    @staticmethod
    def _parse_row(row: list[str], line_number: int) -> Record:
        if len(row) != CSV_COLUMNS:
            raise ImportFormatError(
                f"Line {line_number}: expected {CSV_COLUMNS} fields, got {len(row)}")

        try:
            record_id = int(row[0])
            date_of_birth: date = parse_date(row[3])
            workplace_number = int(row[4])
            salary: Decimal = parse_salary(row[5])
        except ValueError as e:
            raise ImportFormatError(f"Line {line_number}: {e}")

        department = row[6].strip()
        if len(department) != 1:
            raise ImportFormatError(
                f"Line {line_number}: department must be a single character, got {row[6]!r}")

        return Record(
            id=record_id,
            first_name=row[1],
            last_name=row[2],
            date_of_birth=date_of_birth,
            workplace_number=workplace_number,
            salary=salary,
            department=department,
        )
