import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"\d{10}", re.ASCII)

USER_ROLES = ("Admin", "User", "Guest")
CONTACT_SUBJECTS = ("General", "Support", "Feedback", "Other")

PASSWORD_MESSAGE = "Password must be at least 8 characters"


def _always(record: Dict[str, Any], is_update: bool) -> bool:
    return True


@dataclass(frozen=True)
class FieldRule:
    """One check on one field of an incoming record.

    ``check`` receives the raw field value (``None`` when missing) and returns
    True when the value is acceptable. ``applies`` decides whether the rule runs
    at all for a given record / update flag.
    """

    field: str
    check: Callable[[Any], bool]
    message: str
    applies: Callable[[Dict[str, Any], bool], bool] = _always


class RecordValidator:
    """Runs a list of FieldRules and collects every failing message."""

    def __init__(self, rules: List[FieldRule]) -> None:
        self.rules = list(rules)

    def validate(self, record: Any, is_update: bool = False) -> List[str]:
        if not isinstance(record, dict):
            record = {}
        errors: List[str] = []
        for rule in self.rules:
            if not rule.applies(record, is_update):
                continue
            try:
                ok = rule.check(record.get(rule.field))
            except (TypeError, ValueError):
                ok = False
            if not ok:
                errors.append(rule.message)
        return errors


# ------------------------- Predicates ------------------------- #
# Length checks refuse NUL: SQLite length() stops counting at the first one,
# so the schema CHECKs would disagree with len().
def trimmed_length(low: int, high: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and "\x00" not in value and low <= len(value.strip()) <= high
    return check


def matches(pattern: "re.Pattern[str]") -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and pattern.fullmatch(value) is not None
    return check


def one_of(choices) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and value in choices
    return check


def min_length(low: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and "\x00" not in value and len(value) >= low
    return check


def password_supplied(record: Dict[str, Any], is_update: bool) -> bool:
    """On create the password is always checked; on update only when given."""
    if not is_update:
        return True
    return record.get("password") not in (None, "")


# ------------------------- Rule sets ------------------------- #
USER_RULES = [
    FieldRule("full_name", trimmed_length(2, 50), "Full Name must be between 2 and 50 characters"),
    FieldRule("email", matches(EMAIL_PATTERN), "A valid email is required"),
    FieldRule("phone", matches(PHONE_PATTERN), "Phone must be exactly 10 digits"),
    FieldRule("role", one_of(USER_ROLES), "Role must be Admin, User, or Guest"),
    FieldRule("password", min_length(8), PASSWORD_MESSAGE, applies=password_supplied),
]

CONTACT_MESSAGE_RULES = [
    FieldRule("name", trimmed_length(2, 50), "Name must be between 2 and 50 characters"),
    FieldRule("email", matches(EMAIL_PATTERN), "A valid email is required"),
    FieldRule("subject", one_of(CONTACT_SUBJECTS), "Subject must be General, Support, Feedback, or Other"),
    FieldRule("message", trimmed_length(10, 1000), "Message must be between 10 and 1000 characters"),
]

user_validator = RecordValidator(USER_RULES)
contact_message_validator = RecordValidator(CONTACT_MESSAGE_RULES)


def validate_user(record: Any, is_update: bool = False) -> List[str]:
    """Return every rule the user record breaks; empty when it is valid."""
    return user_validator.validate(record, is_update)


def validate_contact_message(record: Any) -> List[str]:
    return contact_message_validator.validate(record)
