"""
Common validation utilities for SimpleStore request payloads.

Validators collect every problem into a ``ValidationResult`` so a single
response can report all invalid fields; ``raise_if_invalid`` converts the
result into a ``ValidationError`` that the API layer maps to HTTP 400.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.warning(f"Validation error: {error_msg}")

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise ValidationError("; ".join(self.errors))


def _in_range(value, field_name: str, result: ValidationResult, low, high) -> bool:
    if low is not None and value < low:
        result.add_error(f"must be at least {low}", field_name)
        return False
    if high is not None and value > high:
        result.add_error(f"must be at most {high}", field_name)
        return False
    return True


class BaseValidator:
    """Base validator with common validation methods."""

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error("is required", field_name)
            return False
        return True

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        required: bool = False,
        max_length: Optional[int] = None,
    ) -> Optional[str]:
        """Validate an optional or required string and strip it."""
        if value is None or (isinstance(value, str) and value.strip() == ""):
            if required:
                result.add_error("is required", field_name)
            return None
        if not isinstance(value, str):
            result.add_error("must be a string", field_name)
            return None
        value = value.strip()
        if max_length is not None and len(value) > max_length:
            result.add_error(f"must be at most {max_length} characters", field_name)
            return None
        return value

    @staticmethod
    def validate_date(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[date]:
        """Validate and convert date field (YYYY-MM-DD or ISO timestamp)."""
        if value is None or value == "":
            return None

        if isinstance(value, datetime):
            return value.date()

        if isinstance(value, date):
            return value

        if isinstance(value, str):
            try:
                return datetime.strptime(value[:10], "%Y-%m-%d").date()
            except ValueError:
                result.add_error("invalid date, use YYYY-MM-DD", field_name)
                return None

        result.add_error("invalid date format", field_name)
        return None

    @staticmethod
    def validate_decimal(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[Decimal] = None,
        max_value: Optional[Decimal] = None,
    ) -> Optional[Decimal]:
        """Validate and convert decimal field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool):
            result.add_error("must be a number", field_name)
            return None

        if isinstance(value, Decimal):
            decimal_value = value
        else:
            try:
                if isinstance(value, str):
                    value = value.strip().replace(" ", "")
                decimal_value = Decimal(str(value))
            except (InvalidOperation, TypeError, ValueError):
                result.add_error("must be a number", field_name)
                return None

        if not decimal_value.is_finite():
            result.add_error("must be a number", field_name)
            return None

        if not _in_range(decimal_value, field_name, result, min_value, max_value):
            return None
        return decimal_value.quantize(Decimal("0.01"))

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool):
            result.add_error("must be an integer", field_name)
            return None

        if isinstance(value, float):
            if not value.is_integer():
                result.add_error("must be an integer", field_name)
                return None
            int_value = int(value)
        else:
            try:
                int_value = int(value)
            except (TypeError, ValueError):
                result.add_error("must be an integer", field_name)
                return None

        if not _in_range(int_value, field_name, result, min_value, max_value):
            return None
        return int_value

    @staticmethod
    def validate_choice(
        value: Any,
        field_name: str,
        result: ValidationResult,
        choices: Iterable[str],
    ) -> Optional[str]:
        """Validate that value is one of the allowed choices."""
        allowed = list(choices)
        if value not in allowed:
            result.add_error(f"must be one of {', '.join(allowed)}", field_name)
            return None
        return value

    @staticmethod
    def validate_bool(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[bool]:
        if value is None:
            return None
        if not isinstance(value, bool):
            result.add_error("must be true or false", field_name)
            return None
        return value

    @staticmethod
    def validate_email(
        value: Any, field_name: str, result: ValidationResult, required: bool = False
    ) -> Optional[str]:
        email = BaseValidator.validate_string(
            value, field_name, result, required=required, max_length=120
        )
        if email is None:
            return None
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            result.add_error("invalid email format", field_name)
            return None
        return email
