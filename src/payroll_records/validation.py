"""Field-level format and business validators.

Predicates (``is_valid_*``) return booleans for callers that render their
own messages; ``validate_*`` functions raise ValidationError on the first
offending field.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_records.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 50
MAX_EMAIL_LENGTH = 100
MAX_SALARY = Decimal("999999.99")

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})$")
PHONE_PATTERN = re.compile(r"^[+]?[1-9]?[0-9]{7,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
CODE_PATTERN = re.compile(r"^[A-Z0-9]+$")


def is_null_or_empty(value: str | None) -> bool:
    return value is None or not value.strip()


def sanitize_input(value: str | None) -> str:
    """Trim surrounding whitespace; None becomes an empty string."""
    return "" if value is None else value.strip()


def is_valid_email(email: str | None) -> bool:
    if is_null_or_empty(email):
        return False
    return bool(EMAIL_PATTERN.match(email.strip())) and len(email) <= MAX_EMAIL_LENGTH


def is_valid_phone(phone: str | None) -> bool:
    """Phone is optional; separators are ignored."""
    if is_null_or_empty(phone):
        return True
    return bool(PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", phone)))


def is_valid_name(name: str | None) -> bool:
    if is_null_or_empty(name):
        return False
    trimmed = name.strip()
    return 2 <= len(trimmed) <= MAX_NAME_LENGTH and bool(NAME_PATTERN.match(trimmed))


def is_valid_password(password: str | None) -> bool:
    return password is not None and len(password) >= MIN_PASSWORD_LENGTH


def is_valid_salary(salary: Any) -> bool:
    amount = parse_decimal(salary)
    return amount is not None and Decimal("0") <= amount <= MAX_SALARY


def is_valid_employee_code(code: str | None) -> bool:
    if is_null_or_empty(code):
        return False
    trimmed = code.strip()
    return 3 <= len(trimmed) <= 20 and bool(CODE_PATTERN.match(trimmed))


def is_valid_department_code(code: str | None) -> bool:
    if is_null_or_empty(code):
        return False
    trimmed = code.strip()
    return 2 <= len(trimmed) <= 10 and bool(CODE_PATTERN.match(trimmed))


def parse_decimal(value: Any) -> Decimal | None:
    """Parse user input into a finite Decimal, or None when it is not numeric."""
    if value is None or isinstance(value, (bool, float)):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def require_non_negative(field: str, value: Any) -> Decimal:
    """Parse a required non-negative amount or raise ValidationError."""
    amount = parse_decimal(value)
    if amount is None:
        raise ValidationError(field, "must be a valid number")
    if amount < 0:
        raise ValidationError(field, "must not be negative")
    return amount


def validate_employee_fields(
    employee_code: str,
    first_name: str,
    last_name: str,
    email: str,
    base_salary: Any,
    phone: str | None = None,
    hire_date: date | None = None,
) -> None:
    """Validate the fields an employee form submits.

    Raises:
        ValidationError: On the first invalid field
    """
    if not is_valid_employee_code(employee_code):
        raise ValidationError(
            "employee_code", "must be 3-20 characters of uppercase letters and digits"
        )
    if not is_valid_name(first_name):
        raise ValidationError("first_name", "must be 2-50 letters")
    if not is_valid_name(last_name):
        raise ValidationError("last_name", "must be 2-50 letters")
    if not is_valid_email(email):
        raise ValidationError("email", "is not a valid email address")
    if not is_valid_phone(phone):
        raise ValidationError("phone", "is not a valid phone number")
    if hire_date is None:
        raise ValidationError("hire_date", "is required")
    if not is_valid_salary(base_salary):
        raise ValidationError("base_salary", f"must be between 0 and {MAX_SALARY}")


def validate_department_fields(
    department_code: str,
    department_name: str,
    budget: Any = None,
) -> None:
    """Validate the fields a department form submits.

    Raises:
        ValidationError: On the first invalid field
    """
    if not is_valid_department_code(department_code):
        raise ValidationError(
            "department_code", "must be 2-10 characters of uppercase letters and digits"
        )
    if is_null_or_empty(department_name):
        raise ValidationError("department_name", "is required")
    if budget is not None:
        require_non_negative("budget", budget)


def validate_pay_period(pay_period_start: date | None, pay_period_end: date | None) -> None:
    """Pay periods are closed ranges with start on or before end.

    Raises:
        ValidationError: If a date is missing or start is after end
    """
    if pay_period_start is None:
        raise ValidationError("pay_period_start", "is required")
    if pay_period_end is None:
        raise ValidationError("pay_period_end", "is required")
    if pay_period_start > pay_period_end:
        raise ValidationError("pay_period_start", "must not be after pay_period_end")


def validate_payroll_amounts(amounts: dict[str, Any]) -> dict[str, Decimal]:
    """Parse payroll amounts; None values are dropped.

    Raises:
        ValidationError: If an amount is not a non-negative number
    """
    return {
        field: require_non_negative(field, value)
        for field, value in amounts.items()
        if value is not None
    }


def validate_payroll_inputs(
    pay_period_start: date | None,
    pay_period_end: date | None,
    amounts: dict[str, Any],
) -> dict[str, Decimal]:
    """Validate a payroll period and its raw amounts, returning parsed amounts."""
    validate_pay_period(pay_period_start, pay_period_end)
    return validate_payroll_amounts(amounts)
