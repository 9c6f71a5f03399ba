import math
import re
from collections.abc import Mapping
from typing import Any

INDEX_KEY = re.compile(r"^-?\d+$")
_NUMBER_LITERAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_LITERAL = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_RADIX = {"x": 16, "o": 8, "b": 2}


class _Undefined:
    """Stand-in for the JavaScript `undefined` value (distinct from None/null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNDEFINED"


UNDEFINED = _Undefined()


def is_number(value: Any) -> bool:
    "`typeof value === 'number'`: ints and floats, but never bools"
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    "JavaScript truthiness: empty containers are truthy"
    if value is None or value is UNDEFINED or value is False:
        return False
    if is_number(value):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return len(value) > 0
    return True


def _number_string(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def js_string(value: Any) -> str:
    "Coerce `value` the way JavaScript's `String(value)` does"
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return _number_string(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None or v is UNDEFINED else js_string(v) for v in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def to_number(text: Any) -> float:
    "JavaScript `Number(text)` for condition strings; NaN when not numeric"
    if is_number(text):
        return float(text)
    s = js_string(text).strip()
    if not s:
        return 0.0
    if _NUMBER_LITERAL.match(s):
        return float(s)
    unsigned = s.lstrip("+-")
    if unsigned == "Infinity":
        return -math.inf if s.startswith("-") else math.inf
    radix = _RADIX_LITERAL.match(s)
    if radix:
        try:
            return float(int(radix.group(2), _RADIX[radix.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def is_numeric(text: Any) -> bool:
    "`!isNaN(text)`"
    return not math.isnan(to_number(text))


def is_index_key(key: Any) -> bool:
    "Integer keys, or strings like `'0'` and `'-1'`, address one element by position"
    if isinstance(key, int) and not isinstance(key, bool):
        return True
    return isinstance(key, str) and INDEX_KEY.match(key) is not None
