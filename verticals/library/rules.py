"""Library request rules: pure functions.

Shape checks the request handler runs before it touches the store. Each
rule returns a RuleResult; coerced values travel in ``details``.
"""

import re
from typing import Any

from patterns.rules_engine import RuleResult, RuleSetResult, evaluate_rules

REQUIRED_FIELDS = ("title", "author", "year")
TEXT_FIELDS = ("title", "author")

_INTEGER_RE = re.compile(r"[+-]?\d+")

# Signed 64-bit, the range of an SQLite INTEGER column.
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1


def parse_integer(value: Any) -> int | None:
    """Strictly coerce ``value`` to int, or return None.

    Accepts ints, integral floats and decimal strings; rejects booleans
    and anything outside the signed 64-bit range the store can hold.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        return None
    if not INTEGER_MIN <= number <= INTEGER_MAX:
        return None
    return number


def check_identifier(token: str | None) -> RuleResult:
    """An identifier token, when present, must parse as an integer.

    An absent or empty token passes with ``book_id`` of None.
    """
    if token is None or token == "":
        return RuleResult(
            passed=True,
            rule_name="identifier_format",
            message="No identifier",
            details={"book_id": None},
        )
    book_id = parse_integer(token)
    return RuleResult(
        passed=book_id is not None,
        rule_name="identifier_format",
        message="Valid identifier" if book_id is not None else "Invalid ID format",
        details={"book_id": book_id, "token": token},
    )


def check_identifier_present(book_id: int | None) -> RuleResult:
    passed = book_id is not None
    return RuleResult(
        passed=passed,
        rule_name="identifier_present",
        message="Identifier present" if passed else "Missing book ID",
        details={"book_id": book_id},
    )


def check_required_fields(body: Any) -> RuleResult:
    """Every required field must be present and truthy.

    A falsy ``year`` (0) counts as missing.
    """
    if not isinstance(body, dict):
        return RuleResult(
            passed=False,
            rule_name="required_fields",
            message="Missing required fields",
            details={"missing": list(REQUIRED_FIELDS)},
        )
    missing = [name for name in REQUIRED_FIELDS if not body.get(name)]
    return RuleResult(
        passed=not missing,
        rule_name="required_fields",
        message="All fields present" if not missing else "Missing required fields",
        details={"missing": missing},
    )


def check_text_fields(body: dict) -> RuleResult:
    invalid = [name for name in TEXT_FIELDS if not isinstance(body.get(name), str)]
    return RuleResult(
        passed=not invalid,
        rule_name="text_fields",
        message="Text fields valid" if not invalid else "Invalid field value",
        details={"invalid": invalid},
    )


def check_year(value: Any) -> RuleResult:
    year = parse_integer(value)
    return RuleResult(
        passed=year is not None,
        rule_name="year_integer",
        message="Valid year" if year is not None else "Invalid year",
        details={"year": year},
    )


def validate_update_body(body: Any) -> RuleSetResult:
    """Run the PUT body rules in order, stopping at missing fields."""
    required = check_required_fields(body)
    if not required.passed:
        return evaluate_rules(required)
    return evaluate_rules(
        required,
        check_text_fields(body),
        check_year(body["year"]),
    )
