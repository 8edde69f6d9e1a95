from .validators import (
    RecordValidator,
    ValidatorBuilder,
    NameValidator,
    DateOfBirthValidator,
    WorkPlaceNumberValidator,
    SalaryValidator,
    DepartmentValidator,
)
from .rules import ValidationRules, load_validation_rules, create_validator

__all__ = [
    "RecordValidator",
    "ValidatorBuilder",
    "NameValidator",
    "DateOfBirthValidator",
    "WorkPlaceNumberValidator",
    "SalaryValidator",
    "DepartmentValidator",
    "ValidationRules",
    "load_validation_rules",
    "create_validator",
]
