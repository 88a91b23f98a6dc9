"""
Unit tests for contact row validation and error aggregation.
"""
import pytest

from contactbook.services.validation import (
    ContactData,
    validate_ciudad,
    validate_correo,
    validate_nombre,
    validate_row,
    validate_rows,
    validate_telefono,
)


def _row(**overrides):
    row = {
        "correo": "ana@correo.com",
        "nombre": "Ana",
        "telefono": "123456",
        "ciudad": "Lima",
        "notas": None,
    }
    row.update(overrides)
    return row


class TestFieldValidators:
    """Test each field rule in isolation."""

    @pytest.mark.parametrize("value", ["a@b.com", "ana.perez@correo.com.pe", "x+tag@gmail.com"])
    def test_valid_correo(self, value):
        assert validate_correo(value) == []

    @pytest.mark.parametrize("value", ["bad", "a@", "@b.com", "a b@c.com", "a@b"])
    def test_invalid_correo_shape(self, value):
        assert validate_correo(value) == ["correo must be a valid email address"]

    def test_correo_required(self):
        assert validate_correo("") == ["correo is required"]

    def test_nombre_required(self):
        assert validate_nombre("") == ["nombre is required"]
        assert validate_nombre("Ana") == []

    def test_ciudad_required(self):
        assert validate_ciudad("") == ["ciudad is required"]
        assert validate_ciudad("Lima") == []

    def test_telefono_digits_only(self):
        """Telefono must be one or more ASCII digits."""
        assert validate_telefono("0123456789") == []
        assert validate_telefono("45a") == ["telefono must contain only digits"]
        assert validate_telefono("+51 999") == ["telefono must contain only digits"]

    def test_values_must_fit_their_columns(self):
        """Overlong values are rejected instead of failing at insert time."""
        assert validate_telefono("1" * 20) == []
        assert validate_telefono("1" * 21) == ["telefono must be at most 20 characters"]
        assert validate_ciudad("x" * 101) == ["ciudad must be at most 100 characters"]
        assert validate_nombre("x" * 256) == ["nombre must be at most 255 characters"]

    def test_empty_telefono_reports_both_rules(self):
        """An empty telefono violates both the required and the digits rule."""
        assert validate_telefono("") == [
            "telefono is required",
            "telefono must contain only digits",
        ]


class TestValidateRow:
    """Test whole-row validation and normalization."""

    def test_valid_row_returns_record(self):
        record, errors = validate_row(_row(notas="VIP"), row_number=2)
        assert errors == []
        assert record == ContactData(
            correo="ana@correo.com",
            nombre="Ana",
            telefono="123456",
            ciudad="Lima",
            notas="VIP",
        )

    def test_values_are_trimmed(self):
        """Surrounding whitespace is removed before validation and storage."""
        record, errors = validate_row(
            _row(correo="  ana@correo.com ", nombre=" Ana ", telefono=" 123 ", ciudad="Lima  "),
            row_number=2,
        )
        assert errors == []
        assert record.correo == "ana@correo.com"
        assert record.nombre == "Ana"
        assert record.telefono == "123"
        assert record.ciudad == "Lima"

    @pytest.mark.parametrize("notas", [None, "", "   "])
    def test_empty_notas_is_none(self, notas):
        record, errors = validate_row(_row(notas=notas), row_number=2)
        assert errors == []
        assert record.notas is None

    def test_missing_notas_column(self):
        """A row without a notas key is valid."""
        row = _row()
        del row["notas"]
        record, errors = validate_row(row, row_number=2)
        assert errors == []
        assert record.notas is None

    def test_whitespace_only_required_field_fails(self):
        """Trimming happens before the required check."""
        record, errors = validate_row(_row(nombre="   "), row_number=2)
        assert record is None
        assert [(e.field, e.messages) for e in errors] == [("nombre", ["nombre is required"])]

    def test_all_violations_reported_together(self):
        """Every field is checked even after an earlier one fails."""
        record, errors = validate_row(
            {"correo": "bad", "nombre": "", "telefono": "", "ciudad": ""},
            row_number=7,
        )
        assert record is None
        assert [e.field for e in errors] == ["correo", "nombre", "telefono", "ciudad"]
        assert all(e.row_number == 7 for e in errors)
        telefono = errors[2]
        assert telefono.messages == [
            "telefono is required",
            "telefono must contain only digits",
        ]

    def test_error_keeps_raw_value(self):
        """The offending value is reported as it appeared in the file."""
        _, errors = validate_row(_row(telefono=" 45a "), row_number=2)
        assert errors[0].value == " 45a "

    def test_absent_field_value_is_none(self):
        _, errors = validate_row({"correo": "a@b.com", "nombre": "Ana", "telefono": "1"}, 2)
        assert len(errors) == 1
        assert errors[0].field == "ciudad"
        assert errors[0].value is None


class TestValidateRows:
    """Test aggregation across every row of a file."""

    def test_all_valid(self):
        outcome = validate_rows([_row(), _row(correo="bob@correo.com", nombre="Bob")])
        assert outcome.is_valid
        assert outcome.total_rows == 2
        assert [r.nombre for r in outcome.records] == ["Ana", "Bob"]

    def test_row_numbers_account_for_header(self):
        """The second data row is reported as row 3; both of its violations are listed."""
        outcome = validate_rows([
            {"correo": "a@b.com", "nombre": "Ana", "telefono": "123", "ciudad": "Lima"},
            {"correo": "bad", "nombre": "Bob", "telefono": "45a", "ciudad": "Lima"},
        ])
        assert not outcome.is_valid
        assert len(outcome.errors) == 2
        assert [(e.row_number, e.field) for e in outcome.errors] == [
            (3, "correo"),
            (3, "telefono"),
        ]

    def test_errors_from_every_row(self):
        """Validation continues past invalid rows."""
        outcome = validate_rows([
            _row(correo="bad"),
            _row(),
            _row(telefono="12-34"),
        ])
        assert [e.row_number for e in outcome.errors] == [2, 4]
        assert outcome.total_rows == 3
        assert len(outcome.records) == 1

    def test_no_rows(self):
        outcome = validate_rows([])
        assert outcome.is_valid
        assert outcome.total_rows == 0

    def test_consumes_a_generator(self):
        """Rows can be streamed from any iterable."""
        outcome = validate_rows(_row(nombre=f"N{i}") for i in range(5))
        assert len(outcome.records) == 5
