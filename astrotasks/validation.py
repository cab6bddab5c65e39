"""Field validators applied before anything touches storage.

The ``is_*`` predicates are pure. The ``require_*`` helpers raise the
matching :mod:`astrotasks.errors` exception with a client-facing message.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping

from astrotasks.errors import InvalidFormatError, MissingFieldError

# Employee lookup accepts any three of A/T/S, but never the 0000 block.
LOOKUP_EMPLOYEE_ID_RE = re.compile(r"^[ATS]{3}0(?!000)[0-9]{3}$")
# Task creation and filtering only accept the literal ATS0 prefix.
TASK_EMPLOYEE_ID_RE = re.compile(r"^ATS0\d{3}$")
COMPANY_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?@astrolitetech\.com$"
)

INVALID_EMPLOYEE_ID = "Invalid employee ID format"
INVALID_EMAIL = "Invalid email format. Must be name@astrolitetech.com"


def is_valid_employee_id(emp_id: Any) -> bool:
    return isinstance(emp_id, str) and LOOKUP_EMPLOYEE_ID_RE.fullmatch(emp_id) is not None


def is_valid_task_employee_id(emp_id: Any) -> bool:
    return isinstance(emp_id, str) and TASK_EMPLOYEE_ID_RE.fullmatch(emp_id) is not None


def is_valid_company_email(email: Any) -> bool:
    return isinstance(email, str) and COMPANY_EMAIL_RE.fullmatch(email) is not None


def require_all_fields(fields: Mapping[str, Any]) -> None:
    """Raise ``MissingFieldError`` naming the first field that is None or empty."""
    for name, value in fields.items():
        if value is None or value == "":
            raise MissingFieldError(field=name)


def require_lookup_employee_id(emp_id: Any) -> str:
    if not is_valid_employee_id(emp_id):
        raise InvalidFormatError(INVALID_EMPLOYEE_ID)
    return emp_id


def require_task_employee_id(emp_id: Any) -> str:
    if not is_valid_task_employee_id(emp_id):
        raise InvalidFormatError(INVALID_EMPLOYEE_ID)
    return emp_id


def require_company_email(email: Any) -> str:
    if not is_valid_company_email(email):
        raise InvalidFormatError(INVALID_EMAIL)
    return email


def require_iso_date(value: Any, field: str) -> str:
    """Return ``value`` normalised to ``YYYY-MM-DD``."""
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError:
        raise InvalidFormatError(f"Invalid date format for {field}. Use YYYY-MM-DD") from None
