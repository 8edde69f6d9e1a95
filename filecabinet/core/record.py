from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

DATE_FORMAT = "%m/%d/%Y"

# Salaries are stored as a 96-bit coefficient with up to 28 fractional digits
SALARY_MAX_SCALE = 28
SALARY_MAX_COEFFICIENT = 2**96 - 1

RECORD_FIELDS = (
    "id",
    "first_name",
    "last_name",
    "date_of_birth",
    "workplace_number",
    "salary",
    "department",
)

# Console/file property names mapped to record attributes
PROPERTY_NAMES = {
    "id": "id",
    "firstname": "first_name",
    "lastname": "last_name",
    "dateofbirth": "date_of_birth",
    "workplacenumber": "workplace_number",
    "salary": "salary",
    "department": "department",
}


def format_date(value: date) -> str:
    """Format a birth date as MM/DD/YYYY."""
    return value.strftime(DATE_FORMAT)


def parse_date(text: str) -> date:
    """
    Parse a MM/DD/YYYY (or M/D/YYYY) date.

    Raises:
        ValueError: If the text is not a valid date
    """
    return datetime.strptime(text.strip(), DATE_FORMAT).date()


def format_salary(value: Decimal) -> str:
    """Format a salary with exactly two decimal places."""
    return f"{value:.2f}"


def parse_salary(text: str) -> Decimal:
    """
    Parse a salary into a Decimal.

    Raises:
        ValueError: If the text is not a decimal number
    """
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"Invalid salary: {text!r}")

    if not value.is_finite():
        raise ValueError(f"Invalid salary: {text!r}")
    return value


def salary_parts(value: Decimal) -> tuple[int, int, int]:
    """
    Split a finite Decimal into (sign, coefficient, scale) with scale >= 0.

    Raises:
        ValueError: If the value is not finite
    """
    if not value.is_finite():
        raise ValueError(f"Salary {value} is not a finite number")

    sign, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)) or "0")
    if exponent > 0:
        return sign, coefficient * 10 ** exponent, 0
    return sign, coefficient, -exponent


def salary_fits(value: Decimal) -> bool:
    """Return True if the salary can be written to a record slot."""
    # 2**96 has 29 digits, so anything larger is rejected before scaling
    if not value.is_finite() or value.adjusted() > 28:
        return False
    _, coefficient, scale = salary_parts(value)
    return scale <= SALARY_MAX_SCALE and coefficient <= SALARY_MAX_COEFFICIENT


@dataclass(frozen=True)
class Record:
    """
    A single personnel record.

    Records are immutable; an id of 0 means the storage engine has not
    assigned one yet. Use ``with_id`` / ``dataclasses.replace`` to derive
    modified copies.
    """
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date = field(default_factory=lambda: date(1970, 1, 1))
    workplace_number: int = 0
    salary: Decimal = Decimal("0")
    department: str = ""

    def with_id(self, record_id: int) -> 'Record':
        """Return a copy of this record carrying ``record_id``."""
        return replace(self, id=record_id)

    def describe(self, separator: str = ", ", with_id: bool = True) -> str:
        """Render the record as ``Name = 'value'`` pairs."""
        parts = [
            f"FirstName = '{self.first_name}'",
            f"LastName = '{self.last_name}'",
            f"DateOfBirth = '{format_date(self.date_of_birth)}'",
            f"WorkPlaceNumber = '{self.workplace_number}'",
            f"Salary = '{format_salary(self.salary)}'",
            f"Department = '{self.department}'",
        ]
        if with_id:
            parts.insert(0, f"Id = '{self.id}'")
        return separator.join(parts)

    def __str__(self) -> str:
        return (f"#{self.id}, {self.first_name}, {self.last_name}, "
                f"{self.date_of_birth.strftime('%Y-%b-%d')}, "
                f"{self.workplace_number}, {format_salary(self.salary)}, "
                f"{self.department}")


@dataclass(frozen=True)
class ServiceStat:
    """Active and deleted record counts of a storage engine."""
    active: int = 0
    deleted: int = 0

    def __str__(self) -> str:
        return f"{self.active} record(s). {self.deleted} of them are deleted."
