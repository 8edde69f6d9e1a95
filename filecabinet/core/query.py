import hashlib
import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .record import Record, format_date, format_salary


def _exact_decimal(value: Decimal) -> str:
    """Plain-notation text equal for numerically equal Decimals, without rounding."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


@dataclass(frozen=True)
class RecordQuery:
    """
    Set of optional equality constraints over record fields.

    A constraint left as ``None`` is "unset". The two combination modes
    treat unset constraints differently:

    - AND mode: an unset constraint is vacuously true, so a query with no
      constraints matches every record.
    - OR mode: an unset constraint is vacuously false, so a query with no
      constraints matches nothing.

    First and last names compare case-insensitively.
    """
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    workplace_number: Optional[int] = None
    salary: Optional[Decimal] = None
    department: Optional[str] = None
    and_mode: bool = True

    def has_constraints(self) -> bool:
        """Return True if at least one constraint is set."""
        return any(value is not None for _, value in self._constraints())

    def matches(self, record: Record) -> bool:
        checks = [self._check(name, value, record)
                  for name, value in self._constraints() if value is not None]
        if self.and_mode:
            return all(checks)
        return any(checks)

    def cache_key(self) -> str:
        """Stable SHA-256 key of the constraint set (mode included)."""
        payload = {
            "and_mode": self.and_mode,
            "id": self.id,
            "first_name": self.first_name.casefold() if self.first_name is not None else None,
            "last_name": self.last_name.casefold() if self.last_name is not None else None,
            "date_of_birth": format_date(self.date_of_birth) if self.date_of_birth else None,
            "workplace_number": self.workplace_number,
            "salary": _exact_decimal(self.salary) if self.salary is not None else None,
            "department": self.department,
        }
        encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    def describe(self, separator: str = ", ") -> str:
        parts = [f"Search Mode = '{'AND' if self.and_mode else 'OR'}'"]
        if self.id is not None:
            parts.append(f"Id = '{self.id}'")
        if self.first_name is not None:
            parts.append(f"FirstName = '{self.first_name}'")
        if self.last_name is not None:
            parts.append(f"LastName = '{self.last_name}'")
        if self.date_of_birth is not None:
            parts.append(f"DateOfBirth = '{format_date(self.date_of_birth)}'")
        if self.workplace_number is not None:
            parts.append(f"WorkPlaceNumber = '{self.workplace_number}'")
        if self.salary is not None:
            parts.append(f"Salary = '{format_salary(self.salary)}'")
        if self.department is not None:
            parts.append(f"Department = '{self.department}'")
        return separator.join(parts)

    def _constraints(self):
        return (
            ("id", self.id),
            ("first_name", self.first_name),
            ("last_name", self.last_name),
            ("date_of_birth", self.date_of_birth),
            ("workplace_number", self.workplace_number),
            ("salary", self.salary),
            ("department", self.department),
        )

    @staticmethod
    def _check(name: str, expected, record: Record) -> bool:
        actual = getattr(record, name)
        if name in ("first_name", "last_name"):
            return actual.casefold() == expected.casefold()
        return actual == expected
