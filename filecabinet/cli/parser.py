"""
Parsing of console command parameters.

Values are always single-quoted (``firstname = 'John'``) and may contain
spaces; property names are matched case-insensitively against
PROPERTY_NAMES. Every malformed input raises ParsingException.
"""
import re
from typing import Any, Optional

from ..core.exceptions import ParsingException
from ..core.query import RecordQuery
from ..core.record import PROPERTY_NAMES, Record, parse_date, parse_salary

TOKEN_PATTERN = re.compile(r"'[^']*'|[=,()]|[^\s=,()']+")
INSERT_PATTERN = re.compile(r"^\s*\((?P<columns>.*?)\)\s*values\s*\((?P<values>.*)\)\s*$",
                            re.IGNORECASE | re.DOTALL)

FILE_FORMATS = ("csv", "xml")

INSERT_EXAMPLE = "insert (id, firstname, ...) values ('1', 'John', ...)"
UPDATE_EXAMPLE = "update set DateOfBirth = '5/18/1986' where FirstName = 'Stan' and LastName = 'Smith'"
DELETE_EXAMPLE = "delete where id = '1'"


def tokenize(text: str) -> list[str]:
    """Split parameters into names, quoted values and the = , ( ) separators."""
    tokens = TOKEN_PATTERN.findall(text or "")
    rest = TOKEN_PATTERN.sub("", text or "")
    if "'" in rest:
        raise ParsingException("Unterminated quoted value.")
    return tokens


def unquote(token: str) -> str:
    if len(token) < 2 or token[0] != "'" or token[-1] != "'":
        raise ParsingException(f"Value {token} must be in single quotes.")
    return token[1:-1]


def resolve_property(name: str) -> str:
    """Map a console property name to a Record attribute name."""
    attribute = PROPERTY_NAMES.get(name.lower())
    if attribute is None:
        available = ", ".join(f"'{key}'" for key in PROPERTY_NAMES)
        raise ParsingException(f"Unknown property '{name}'. Available properties: {available}.")
    return attribute


def convert_value(attribute: str, text: str) -> Any:
    """Convert a raw string into the type of the given Record attribute."""
    try:
        if attribute in ("id", "workplace_number"):
            return int(text)
        if attribute == "date_of_birth":
            return parse_date(text)
        if attribute == "salary":
            return parse_salary(text)
    except ValueError:
        raise ParsingException(f"Invalid {attribute.replace('_', ' ')} value '{text}'.")

    if attribute == "department" and len(text) != 1:
        raise ParsingException(f"Invalid department value '{text}'.")
    return text


def _read_pairs(tokens: list[str], separators: tuple[str, ...]) -> tuple[list[tuple[str, Any]], list[str]]:
    """
    Read ``name = 'value'`` pairs joined by separator tokens.

    Returns:
        The converted (attribute, value) pairs and the separators seen
    """
    pairs = []
    seen_separators = []
    position = 0
    while position < len(tokens):
        if position + 2 >= len(tokens) or tokens[position + 1] != "=":
            raise ParsingException(f"Expected <property> = '<value>' near '{tokens[position]}'.")

        attribute = resolve_property(tokens[position])
        value = convert_value(attribute, unquote(tokens[position + 2]))
        pairs.append((attribute, value))
        position += 3

        if position < len(tokens):
            separator = tokens[position].lower()
            if separator not in separators:
                raise ParsingException(f"Unexpected '{tokens[position]}'.")
            seen_separators.append(separator)
            position += 1
            if position == len(tokens):
                raise ParsingException(f"Dangling '{separator}'.")

    return pairs, seen_separators


def parse_where(text: str) -> RecordQuery:
    """
    Parse the body of a where clause into a RecordQuery.

    Conditions are joined with ``and`` / ``or``. The query uses OR mode
    when ``or`` appears before any ``and``, AND mode otherwise.
    """
    tokens = tokenize(text)
    if not tokens:
        raise ParsingException("Search parameters are missing.")

    pairs, separators = _read_pairs(tokens, ("and", "or"))

    constraints: dict[str, Any] = {}
    for attribute, value in pairs:
        if attribute in constraints:
            raise ParsingException(f"Property '{attribute}' is specified more than once.")
        constraints[attribute] = value

    and_mode = "or" not in separators or (
        "and" in separators and separators.index("and") < separators.index("or"))
    return RecordQuery(and_mode=and_mode, **constraints)


def split_where(text: str) -> tuple[str, Optional[str]]:
    """Split ``<head> where <conditions>`` at the first unquoted ``where``."""
    for match in TOKEN_PATTERN.finditer(text):
        if match.group().lower() == "where":
            return text[:match.start()].strip(), text[match.end():].strip()
    return text.strip(), None


def parse_select(text: str) -> tuple[list[str], Optional[RecordQuery]]:
    """
    Parse ``[col, col, ...] [where ...]``.

    Returns:
        Selected attribute names (empty for all columns) and the query,
        or None when there is no where clause
    """
    head, conditions = split_where(text or "")
    columns = []
    for token in tokenize(head):
        if token == ",":
            continue
        attribute = resolve_property(token)
        if attribute not in columns:
            columns.append(attribute)

    query = parse_where(conditions) if conditions is not None else None
    return columns, query


def parse_insert(text: str) -> Record:
    """Parse ``(col, ...) values ('v', ...)``; every property must be given exactly once."""
    match = INSERT_PATTERN.match(text or "")
    if match is None:
        raise ParsingException(f"Invalid input. Example: {INSERT_EXAMPLE}")

    columns = [token for token in tokenize(match.group("columns")) if token != ","]
    values = [token for token in tokenize(match.group("values")) if token != ","]
    if len(columns) != len(values):
        raise ParsingException("Number of properties and values does not match.")

    fields: dict[str, Any] = {}
    for column, value in zip(columns, values):
        attribute = resolve_property(column)
        if attribute in fields:
            raise ParsingException(f"Property '{column}' is specified more than once.")
        fields[attribute] = convert_value(attribute, unquote(value))

    missing = [name for name, attribute in PROPERTY_NAMES.items() if attribute not in fields]
    if missing:
        raise ParsingException(f"This property is not set: {', '.join(missing)}.")

    if fields["id"] <= 0:
        raise ParsingException("Invalid Id.")
    return Record(**fields)


def parse_update(text: str) -> tuple[dict[str, Any], RecordQuery]:
    """Parse ``set name = 'v', ... where ...`` into changes and a query."""
    head, conditions = split_where(text or "")
    tokens = tokenize(head)
    if not tokens or tokens[0].lower() != "set" or conditions is None:
        raise ParsingException(f"Invalid input. Example: {UPDATE_EXAMPLE}")

    pairs, _ = _read_pairs(tokens[1:], (",",))
    if not pairs:
        raise ParsingException(f"Nothing to update. Example: {UPDATE_EXAMPLE}")

    changes = dict(pairs)
    if "id" in changes:
        raise ParsingException("Id cannot be updated.")

    query = parse_where(conditions)
    if not query.has_constraints():
        raise ParsingException("Search parameters are missing or incorrect.")
    return changes, query


def parse_delete(text: str) -> RecordQuery:
    """Parse ``where name = 'v' [and|or ...]``."""
    head, conditions = split_where(text or "")
    if head or conditions is None:
        raise ParsingException(f"Invalid input. Example: {DELETE_EXAMPLE}")
    return parse_where(conditions)


def parse_file_argument(text: str) -> tuple[str, str]:
    """
    Parse ``csv|xml <path>``; the path may be quoted.

    Returns:
        (format, path)
    """
    parts = (text or "").strip().split(maxsplit=1)
    if len(parts) != 2:
        raise ParsingException("Invalid input. Example: export csv records.csv")

    file_format, path = parts[0].lower(), parts[1].strip()
    if file_format not in FILE_FORMATS:
        raise ParsingException(f"Unknown file format '{parts[0]}'. Use csv or xml.")

    if len(path) >= 2 and path[0] == path[-1] and path[0] in "'\"":
        path = path[1:-1]
    return file_format, path
