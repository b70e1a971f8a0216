"""Tests for field validators."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_records.errors import ValidationError
from payroll_records.validation import (
    is_valid_department_code,
    is_valid_email,
    is_valid_employee_code,
    is_valid_name,
    is_valid_password,
    is_valid_phone,
    is_valid_salary,
    parse_decimal,
    sanitize_input,
    validate_department_fields,
    validate_employee_fields,
    validate_pay_period,
    validate_payroll_inputs,
)


class TestPredicates:
    def test_email(self):
        assert is_valid_email("john.smith@example.com")
        assert not is_valid_email("john.smith@example")
        assert not is_valid_email("")
        assert not is_valid_email(None)

    def test_phone_is_optional_and_ignores_separators(self):
        assert is_valid_phone(None)
        assert is_valid_phone("+1 (555) 123-4567")
        assert not is_valid_phone("12ab")

    def test_name(self):
        assert is_valid_name("Mary Ann")
        assert not is_valid_name("J")
        assert not is_valid_name("R2D2")
        assert not is_valid_name("x" * 51)

    def test_codes(self):
        assert is_valid_employee_code("EMP001")
        assert not is_valid_employee_code("emp001")
        assert not is_valid_employee_code("E1")
        assert is_valid_department_code("IT")
        assert not is_valid_department_code("I")
        assert not is_valid_department_code("TOOLONGCODE")

    def test_password(self):
        assert is_valid_password("secret")
        assert not is_valid_password("short")

    def test_salary(self):
        assert is_valid_salary("0")
        assert is_valid_salary(Decimal("999999.99"))
        assert not is_valid_salary(Decimal("1000000"))
        assert not is_valid_salary("-1")
        assert not is_valid_salary("abc")

    def test_parse_decimal(self):
        assert parse_decimal(" 12.50 ") == Decimal("12.50")
        assert parse_decimal(3) == Decimal("3")
        assert parse_decimal("NaN") is None
        assert parse_decimal(1.5) is None
        assert parse_decimal(None) is None

    def test_sanitize_input(self):
        assert sanitize_input("  IT ") == "IT"
        assert sanitize_input(None) == ""


class TestEmployeeFields:
    def valid(self, **overrides):
        values = {
            "employee_code": "EMP001",
            "first_name": "John",
            "last_name": "Smith",
            "email": "john.smith@example.com",
            "base_salary": Decimal("3200"),
            "hire_date": date(2023, 6, 1),
        }
        values.update(overrides)
        return values

    def test_valid_fields_pass(self):
        validate_employee_fields(**self.valid())

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("employee_code", "x"),
            ("first_name", ""),
            ("last_name", "Sm1th"),
            ("email", "nope"),
            ("phone", "abc"),
            ("hire_date", None),
            ("base_salary", Decimal("-1")),
        ],
    )
    def test_invalid_field_named(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_employee_fields(**self.valid(**{field: value}))

        assert exc_info.value.field == field


class TestDepartmentFields:
    def test_budget_optional(self):
        validate_department_fields("IT", "Information Technology")
        validate_department_fields("IT", "Information Technology", Decimal("0"))

    def test_negative_budget(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_department_fields("IT", "Information Technology", Decimal("-5"))
        assert exc_info.value.field == "budget"

    def test_name_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_department_fields("IT", "  ")
        assert exc_info.value.field == "department_name"


class TestPayrollInputs:
    def test_start_after_end(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_pay_period(date(2024, 2, 1), date(2024, 1, 31))
        assert exc_info.value.field == "pay_period_start"

    def test_single_day_period_is_valid(self):
        validate_pay_period(date(2024, 2, 1), date(2024, 2, 1))

    def test_amounts_parsed(self):
        parsed = validate_payroll_inputs(
            date(2024, 1, 1),
            date(2024, 1, 31),
            {"base_salary": "3200.00", "bonus": 0, "allowances": None},
        )
        assert parsed == {"base_salary": Decimal("3200.00"), "bonus": Decimal("0")}

    def test_non_numeric_amount(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payroll_inputs(date(2024, 1, 1), date(2024, 1, 31), {"bonus": "lots"})
        assert exc_info.value.field == "bonus"
