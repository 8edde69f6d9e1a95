from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.exceptions import RecordValidationError
from ..core.record import Record, salary_fits

ValidationResult = tuple[bool, str]

SHORT_MAX = 2**15 - 1


class NameValidator:
    """Checks that a name is non-blank and within [min_length, max_length]."""

    def __init__(self, parameter_name: str, min_length: int, max_length: int):
        if min_length < 1 or max_length < min_length:
            raise ValueError(
                f"Invalid name length bounds: [{min_length}, {max_length}]")

        self.parameter_name = parameter_name
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, value: Optional[str]) -> ValidationResult:
        if value is None or not value.strip():
            return False, f"{self.parameter_name} cannot be empty or whitespace only."

        if not (self.min_length <= len(value) <= self.max_length):
            return False, (f"{self.parameter_name} length is less than {self.min_length} "
                           f"or more than {self.max_length}.")

        return True, ""


class DateOfBirthValidator:
    """Checks that a birth date lies between min_date and max_date (default: today)."""

    def __init__(self, min_date: date, max_date: Optional[date] = None):
        self.min_date = min_date
        self.max_date = max_date

    def validate(self, value: date) -> ValidationResult:
        upper = self.max_date or date.today()
        if not (self.min_date <= value <= upper):
            return False, (f"DateOfBirth is less than {self.min_date.strftime('%d-%b-%Y')} "
                           f"or more than {upper.strftime('%d-%b-%Y')}.")
        return True, ""


class WorkPlaceNumberValidator:
    """Checks that a workplace number is within [min_value, max_value]."""

    def __init__(self, min_value: int = 1, max_value: int = SHORT_MAX):
        if max_value > SHORT_MAX:
            raise ValueError(f"Workplace number cannot exceed {SHORT_MAX}")

        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: int) -> ValidationResult:
        if not (self.min_value <= value <= self.max_value):
            return False, (f"WorkPlaceNumber is less than {self.min_value} "
                           f"or more than {self.max_value}.")
        return True, ""


class SalaryValidator:
    """Checks that a salary is at least min_value (and at most max_value if set)."""

    def __init__(self, min_value: Decimal = Decimal(0), max_value: Optional[Decimal] = None):
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Decimal) -> ValidationResult:
        if not salary_fits(value):
            return False, "Salary is out of the storable range."

        if value < self.min_value:
            return False, f"Salary cannot be less than {self.min_value}."

        if self.max_value is not None and value > self.max_value:
            return False, f"Salary cannot be more than {self.max_value}."

        return True, ""


class DepartmentValidator:
    """Checks that a department is a single uppercase letter."""

    def validate(self, value: Optional[str]) -> ValidationResult:
        if value is None or len(value) != 1 or not (value.isalpha() and value.isupper()):
            return False, "Department can only be uppercase letter."
        return True, ""


class RecordValidator:
    """
    Composite validator applying one property validator per record field.

    ``validate_record`` reports the first failing field; the per-field
    methods are used by the console parser to decide whether a search
    value is usable.
    """

    def __init__(self,
                 first_name: NameValidator,
                 last_name: NameValidator,
                 date_of_birth: DateOfBirthValidator,
                 workplace_number: WorkPlaceNumberValidator,
                 salary: SalaryValidator,
                 department: Optional[DepartmentValidator] = None):
        self.first_name = first_name
        self.last_name = last_name
        self.date_of_birth = date_of_birth
        self.workplace_number = workplace_number
        self.salary = salary
        self.department = department or DepartmentValidator()

    def validate_first_name(self, value: str) -> ValidationResult:
        return self.first_name.validate(value)

    def validate_last_name(self, value: str) -> ValidationResult:
        return self.last_name.validate(value)

    def validate_date_of_birth(self, value: date) -> ValidationResult:
        return self.date_of_birth.validate(value)

    def validate_workplace_number(self, value: int) -> ValidationResult:
        return self.workplace_number.validate(value)

    def validate_salary(self, value: Decimal) -> ValidationResult:
        return self.salary.validate(value)

    def validate_department(self, value: str) -> ValidationResult:
        return self.department.validate(value)

    def validate_record(self, record: Record) -> ValidationResult:
        """
        Validate every field of a record.

        Returns:
            (True, "") if valid, else (False, message naming the record and field)
        """
        if record is None:
            raise TypeError("Record cannot be None")

        results = (
            self.validate_first_name(record.first_name),
            self.validate_last_name(record.last_name),
            self.validate_date_of_birth(record.date_of_birth),
            self.validate_workplace_number(record.workplace_number),
            self.validate_salary(record.salary),
            self.validate_department(record.department),
        )

        for is_valid, message in results:
            if not is_valid:
                return False, f"Record #{record.id} is invalid. {message}"

        return True, ""

    def ensure_valid(self, record: Record) -> None:
        """
        Raise if the record fails validation.

        Raises:
            RecordValidationError: With the first failing field's message
        """
        is_valid, message = self.validate_record(record)
        if not is_valid:
            raise RecordValidationError(message)


class ValidatorBuilder:
    """Fluent builder for RecordValidator."""

    def __init__(self):
        self._first_name: Optional[NameValidator] = None
        self._last_name: Optional[NameValidator] = None
        self._date_of_birth: Optional[DateOfBirthValidator] = None
        self._workplace_number: Optional[WorkPlaceNumberValidator] = None
        self._salary: Optional[SalaryValidator] = None

    def first_name(self, min_length: int, max_length: int) -> 'ValidatorBuilder':
        self._first_name = NameValidator("FirstName", min_length, max_length)
        return self

    def last_name(self, min_length: int, max_length: int) -> 'ValidatorBuilder':
        self._last_name = NameValidator("LastName", min_length, max_length)
        return self

    def date_of_birth(self, min_date: date, max_date: Optional[date] = None) -> 'ValidatorBuilder':
        self._date_of_birth = DateOfBirthValidator(min_date, max_date)
        return self

    def workplace_number(self, min_value: int, max_value: int = SHORT_MAX) -> 'ValidatorBuilder':
        self._workplace_number = WorkPlaceNumberValidator(min_value, max_value)
        return self

    def salary(self, min_value: Decimal, max_value: Optional[Decimal] = None) -> 'ValidatorBuilder':
        self._salary = SalaryValidator(min_value, max_value)
        return self

    def create(self) -> RecordValidator:
        """
        Build the validator.

        Raises:
            ValueError: If any field validator was not configured
        """
        missing = [name for name, value in (
            ("first_name", self._first_name),
            ("last_name", self._last_name),
            ("date_of_birth", self._date_of_birth),
            ("workplace_number", self._workplace_number),
            ("salary", self._salary),
        ) if value is None]
        if missing:
            raise ValueError(f"Validator not configured for: {', '.join(missing)}")

        return RecordValidator(
            self._first_name,
            self._last_name,
            self._date_of_birth,
            self._workplace_number,
            self._salary,
        )
