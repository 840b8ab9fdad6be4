"""Input parsing for action payloads.

Each field is described by a ``Field``; ``parse_input`` checks a decoded JSON
object against a dict of fields and returns only the keys that were present.
Missing optional keys are left out entirely so callers can tell "not given"
apart from an explicit value.
"""
from datetime import datetime, timezone

from .errors import ActionError

_MISSING = object()

# Integer columns are 32-bit signed
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


class Field:
    def __init__(self, kind, required=False, min_length=None, positive=False,
                 nonnegative=False, choices=None, message=None, strip=False):
        self.kind = kind  # 'string', 'int', 'bool', 'enum', 'date', 'any'
        self.required = required
        self.min_length = min_length
        self.positive = positive
        self.nonnegative = nonnegative
        self.choices = choices
        self.message = message
        self.strip = strip  # trim surrounding whitespace before the length check

    def parse(self, name, value):
        if self.kind == 'any':
            return value
        if value is None:
            raise _invalid(name, 'must not be null')
        if self.kind == 'string':
            if not isinstance(value, str):
                raise _invalid(name, 'must be a string')
            if self.strip:
                value = value.strip()
            if self.min_length is not None and len(value) < self.min_length:
                raise ActionError('BAD_REQUEST', self.message or f"'{name}' must not be empty.")
            return value
        if self.kind == 'int':
            # bool is a subclass of int; JSON has no int/float split, so 2.0 is an integer
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise _invalid(name, 'must be an integer')
            if not INT_MIN <= value <= INT_MAX:
                raise _invalid(name, 'is out of range')
            if self.positive and value <= 0:
                raise _invalid(name, 'must be positive')
            if self.nonnegative and value < 0:
                raise _invalid(name, 'must not be negative')
            return value
        if self.kind == 'bool':
            if not isinstance(value, bool):
                raise _invalid(name, 'must be a boolean')
            return value
        if self.kind == 'enum':
            if value not in self.choices:
                raise _invalid(name, f"must be one of {', '.join(self.choices)}")
            return value
        if self.kind == 'date':
            return coerce_date(name, value)
        raise ValueError(f"Unknown field kind: {self.kind}")


def _invalid(name, reason):
    return ActionError('BAD_REQUEST', f"'{name}' {reason}.")


def coerce_date(name, value):
    """Accept ISO-8601 strings or epoch milliseconds; return naive UTC."""
    if isinstance(value, bool):
        raise _invalid(name, 'must be a date')
    if isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise _invalid(name, 'must be a date')
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise _invalid(name, 'must be a date')
    else:
        raise _invalid(name, 'must be a date')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_input(data, fields):
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ActionError('BAD_REQUEST', 'Request body must be a JSON object.')
    parsed = {}
    for name, field in fields.items():
        value = data.get(name, _MISSING)
        if value is _MISSING:
            if field.required:
                raise ActionError('BAD_REQUEST', field.message or f"'{name}' is required.")
            continue
        parsed[name] = field.parse(name, value)
    return parsed
