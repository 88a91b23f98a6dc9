"""
Row validation and error aggregation for contact CSV uploads.

Each field has a pure validator returning a list of messages. A row is valid
when every validator returns an empty list; otherwise all messages for the
row are reported together.
"""
import re
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field

PHONE_PATTERN = re.compile(r'^[0-9]+$')

# The header occupies logical row 1
HEADER_ROW_OFFSET = 1

# Column widths of contact_records
MAX_LENGTHS = {"correo": 255, "nombre": 255, "telefono": 20, "ciudad": 100}


class ContactData(BaseModel):
    """A normalized, validated contact row."""
    correo: str
    nombre: str
    telefono: str
    ciudad: str
    notas: Optional[str] = None


class RowError(BaseModel):
    """Violations of one field in one CSV row."""
    row_number: int
    field: str
    value: Optional[str] = None
    messages: List[str]


class ParseOutcome(BaseModel):
    """Result of validating every row of a file."""
    records: List[ContactData] = Field(default_factory=list)
    errors: List[RowError] = Field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _too_long(field: str, value: str) -> List[str]:
    limit = MAX_LENGTHS[field]
    if len(value) > limit:
        return [f"{field} must be at most {limit} characters"]
    return []


def validate_correo(value: str) -> List[str]:
    if not value:
        return ["correo is required"]
    if len(value) > MAX_LENGTHS["correo"]:
        return _too_long("correo", value)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return ["correo must be a valid email address"]
    return []


def validate_nombre(value: str) -> List[str]:
    if not value:
        return ["nombre is required"]
    return _too_long("nombre", value)


def validate_telefono(value: str) -> List[str]:
    messages = []
    if not value:
        messages.append("telefono is required")
    if not PHONE_PATTERN.match(value):
        messages.append("telefono must contain only digits")
    return messages + _too_long("telefono", value)


def validate_ciudad(value: str) -> List[str]:
    if not value:
        return ["ciudad is required"]
    return _too_long("ciudad", value)


def validate_notas(value: Optional[str]) -> List[str]:
    if value is not None and not isinstance(value, str):
        return ["notas must be text"]
    return []


FIELD_VALIDATORS: Tuple[Tuple[str, Callable[..., List[str]]], ...] = (
    ("correo", validate_correo),
    ("nombre", validate_nombre),
    ("telefono", validate_telefono),
    ("ciudad", validate_ciudad),
    ("notas", validate_notas),
)


def validate_row(
    row: Mapping[str, Optional[str]],
    row_number: int,
) -> Tuple[Optional[ContactData], List[RowError]]:
    """
    Validate one CSV row.

    Values are trimmed; an empty notas becomes None. Every field is checked
    even after an earlier one fails.

    Returns:
        (record, []) when the row is valid, (None, errors) otherwise
    """
    cleaned: Dict[str, Optional[str]] = {
        name: _clean(row.get(name)) for name, _ in FIELD_VALIDATORS
    }
    cleaned["notas"] = cleaned["notas"] or None

    errors: List[RowError] = []
    for name, validator in FIELD_VALIDATORS:
        messages = validator(cleaned[name])
        if messages:
            errors.append(RowError(
                row_number=row_number,
                field=name,
                value=row.get(name),
                messages=messages,
            ))

    if errors:
        return None, errors
    return ContactData(**cleaned), []


def validate_rows(rows: Iterable[Mapping[str, Optional[str]]]) -> ParseOutcome:
    """
    Validate every data row, collecting all errors instead of stopping.

    Row numbers are 1-based data positions plus the header offset, so the
    first data row is reported as row 2.
    """
    outcome = ParseOutcome()
    for position, row in enumerate(rows, start=1):
        outcome.total_rows += 1
        record, errors = validate_row(row, position + HEADER_ROW_OFFSET)
        if errors:
            outcome.errors.extend(errors)
        else:
            outcome.records.append(record)
    return outcome
