"""
Validation rule loading.
Rule sets live in a JSON document keyed by set name ("default", "custom").
"""
import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from importlib import resources
from pathlib import Path
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..core.record import parse_date
from .validators import RecordValidator, ValidatorBuilder, SHORT_MAX

RULES_RESOURCE = "validation-rules.json"
DEFAULT_RULE_SET = "default"


@dataclass(frozen=True)
class ValidationRules:
    """Bounds for every validated record field."""
    first_name_min: int
    first_name_max: int
    last_name_min: int
    last_name_max: int
    date_of_birth_from: date
    date_of_birth_to: Optional[date]
    workplace_number_min: int
    workplace_number_max: int
    salary_min: Decimal
    salary_max: Optional[Decimal]

    @classmethod
    def from_dict(cls, data: dict) -> 'ValidationRules':
        """
        Build rules from one rule-set section of the JSON document.

        Raises:
            ConfigurationError: If a required key is missing or malformed
        """
        try:
            dob = data["dateOfBirth"]
            salary = data["salary"]
            return cls(
                first_name_min=int(data["firstName"]["min"]),
                first_name_max=int(data["firstName"]["max"]),
                last_name_min=int(data["lastName"]["min"]),
                last_name_max=int(data["lastName"]["max"]),
                date_of_birth_from=parse_date(dob["from"]),
                date_of_birth_to=parse_date(dob["to"]) if dob.get("to") else None,
                workplace_number_min=int(data["workPlaceNumber"]["min"]),
                workplace_number_max=int(data["workPlaceNumber"].get("max", SHORT_MAX)),
                salary_min=Decimal(str(salary["min"])),
                salary_max=Decimal(str(salary["max"])) if salary.get("max") is not None else None,
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise ConfigurationError(f"Malformed validation rules: {e!r}")

    def build_validator(self) -> RecordValidator:
        """Create a RecordValidator enforcing these rules."""
        try:
            return (ValidatorBuilder()
                    .first_name(self.first_name_min, self.first_name_max)
                    .last_name(self.last_name_min, self.last_name_max)
                    .date_of_birth(self.date_of_birth_from, self.date_of_birth_to)
                    .workplace_number(self.workplace_number_min, self.workplace_number_max)
                    .salary(self.salary_min, self.salary_max)
                    .create())
        except ValueError as e:
            raise ConfigurationError(f"Invalid validation rules: {e}")


def load_rules_document(rules_file: Optional[str] = None) -> dict:
    """
    Read the rules JSON document.

    Args:
        rules_file: Optional path overriding the packaged rules

    Raises:
        ConfigurationError: If the file is missing or not valid JSON
    """
    try:
        if rules_file is not None:
            path = Path(rules_file)
            if not path.exists():
                raise ConfigurationError(f"Validation rules file not found: {rules_file}")
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)

        text = resources.files(__package__).joinpath(RULES_RESOURCE).read_text(encoding='utf-8')
        return json.loads(text)

    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Validation rules are not valid JSON: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read validation rules: {e}")


def load_validation_rules(rule_set: str = DEFAULT_RULE_SET,
                          rules_file: Optional[str] = None) -> ValidationRules:
    """Load a named rule set ("default" or "custom")."""
    document = load_rules_document(rules_file)
    if rule_set not in document:
        raise ConfigurationError(f"Unknown validation rule set: {rule_set}")
    return ValidationRules.from_dict(document[rule_set])


def create_validator(rule_set: str = DEFAULT_RULE_SET,
                     rules_file: Optional[str] = None) -> RecordValidator:
    """Shortcut: load a rule set and build its validator."""
    return load_validation_rules(rule_set, rules_file).build_validator()
