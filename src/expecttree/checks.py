"""Check predicates applied to Expect nodes during the run pass.

Every check has the signature `(expected, actual) -> (ok, message)`. The
message is only populated on failure and describes the mismatch in the
vocabulary of the registration function that installed the check.

Type-name checks come in two flavours:
    - `type_check` compares the value kind tag (`ValueKind`), a closed set of
      names that does not depend on Python class names.
    - `typeof_check` compares the concrete class name of the value.
"""

from collections.abc import Callable, Mapping, Set
from enum import Enum
from numbers import Real
from typing import Any

from expecttree.core.types import Check, CheckResult

DEFAULT_EPSILON = 1e-5


class ValueKind(Enum):
    """Kind tag of a tested value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    CONTAINER = "container"
    CALLABLE = "callable"
    OBJECT = "object"


VALUE_KIND_NAMES = frozenset(kind.value for kind in ValueKind)


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its kind tag.

    Booleans are not numbers, and containers take precedence over callables
    so that callable mappings still compare structurally.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, Real):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (Mapping, Set, list, tuple)):
        return ValueKind.CONTAINER
    if callable(value):
        return ValueKind.CALLABLE
    return ValueKind.OBJECT


def is_number(value: Any) -> bool:
    return kind_of(value) is ValueKind.NUMBER


def deep_equal(expected: Any, actual: Any) -> bool:
    """Structural equality.

    Two mappings are equal when they have the same number of keys and every
    key of `actual` maps to an equal value in `expected`, recursing into
    nested containers. Lists and tuples compare element-wise with the same
    rule. Everything else uses `==` once both values have the same kind, so
    booleans never equal numbers.
    """
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping) or len(expected) != len(actual):
            return False
        for key, value in actual.items():
            if key not in expected or not deep_equal(expected[key], value):
                return False
        return True

    if isinstance(expected, (list, tuple)):
        if not isinstance(actual, (list, tuple)) or len(expected) != len(actual):
            return False
        return all(deep_equal(e, a) for e, a in zip(expected, actual))

    if kind_of(expected) is not kind_of(actual):
        return False
    return bool(expected == actual)


def _describe(value: Any) -> str:
    return f"{value!r} ({kind_of(value).value})"


def equal_check(expected: Any, value: Any) -> CheckResult:
    if deep_equal(expected, value):
        return True, None
    return False, f"to_equal: expected {_describe(value)} to equal {_describe(expected)}"


def not_equal_check(expected: Any, value: Any) -> CheckResult:
    if not deep_equal(expected, value):
        return True, None
    return False, f"to_not_equal: expected {_describe(value)} to not equal {_describe(expected)}"


def type_check(expected: str, value: Any) -> CheckResult:
    value_kind = kind_of(value).value
    if value_kind == expected:
        return True, None
    return False, f"to_be_type: expected type({value!r}) to equal {expected}, got {value_kind} instead"


def not_type_check(expected: str, value: Any) -> CheckResult:
    if kind_of(value).value != expected:
        return True, None
    return False, f"to_not_be_type: expected type({value!r}) to not equal {expected}"


def typeof_check(expected: str, value: Any) -> CheckResult:
    class_name = type(value).__name__
    if class_name == expected:
        return True, None
    return False, f"to_be_typeof: expected typeof({value!r}) to equal {expected}, got {class_name} instead"


def not_typeof_check(expected: str, value: Any) -> CheckResult:
    if type(value).__name__ != expected:
        return True, None
    return False, f"to_not_be_typeof: expected typeof({value!r}) to not equal {expected}"


def make_fuzzy_check(epsilon: float = DEFAULT_EPSILON) -> Check:
    """Build a check passing when the value is within `epsilon` of the expected number."""

    def fuzzy_check(expected: float, value: Any) -> CheckResult:
        if not is_number(value):
            return False, f"to_fuzzy_equal: number value expected, got {kind_of(value).value} instead"
        if abs(expected - value) <= epsilon:
            return True, None
        return (
            False,
            f"to_fuzzy_equal: expected {value} to be in the range "
            f"[{expected - epsilon}, {expected + epsilon}]",
        )

    return fuzzy_check


def make_not_fuzzy_check(epsilon: float = DEFAULT_EPSILON) -> Check:
    """Build a check passing when the value is farther than `epsilon` from the expected number."""

    def not_fuzzy_check(expected: float, value: Any) -> CheckResult:
        if not is_number(value):
            return False, f"to_not_fuzzy_equal: number value expected, got {kind_of(value).value} instead"
        if abs(expected - value) > epsilon:
            return True, None
        return (
            False,
            f"to_not_fuzzy_equal: expected {value} to not be in the range "
            f"[{expected - epsilon}, {expected + epsilon}]",
        )

    return not_fuzzy_check


def _make_ordering_check(name: str, symbol: str, compare: Callable[[Any, Any], bool]) -> Check:
    def ordering_check(expected: float, value: Any) -> CheckResult:
        if not is_number(value):
            return False, f"{name}: number value expected, got {kind_of(value).value} instead"
        if compare(value, expected):
            return True, None
        return False, f"{name}: {value} {symbol} {expected} expected"

    ordering_check.__name__ = f"{name}_check"
    return ordering_check


greater_check = _make_ordering_check("to_be_greater", ">", lambda a, b: a > b)
greater_or_equal_check = _make_ordering_check("to_be_greater_or_equal", ">=", lambda a, b: a >= b)
less_check = _make_ordering_check("to_be_less", "<", lambda a, b: a < b)
less_or_equal_check = _make_ordering_check("to_be_less_or_equal", "<=", lambda a, b: a <= b)


def _invoke(value: Callable[[], Any]) -> str | None:
    """Call `value`, returning the error text if it raised."""
    try:
        value()
    except Exception as e:
        return str(e)
    return None


def throw_check(expected: str | None, value: Any) -> CheckResult:
    if not callable(value):
        return False, f"to_throw: function value expected, got {kind_of(value).value} instead"

    error = _invoke(value)
    if error is None:
        if expected is None:
            return False, "to_throw: expected function to throw, it succeeded instead"
        return (
            False,
            f"to_throw: expected function to throw a message containing {expected}, it succeeded instead",
        )

    if expected is None or expected in error:
        return True, None
    return (
        False,
        f"to_throw: expected function to throw a message containing {expected}, it threw: {error}",
    )


def not_throw_check(expected: str | None, value: Any) -> CheckResult:
    if not callable(value):
        return False, f"to_not_throw: function value expected, got {kind_of(value).value} instead"

    error = _invoke(value)
    if error is None:
        if expected is None:
            return True, None
        return (
            False,
            "to_not_throw: expected function to throw a message which does not contain "
            f"{expected}, it succeeded instead",
        )

    if expected is None:
        return False, f"to_not_throw: expected function to succeed, it threw: {error}"
    if expected not in error:
        return True, None
    return (
        False,
        "to_not_throw: expected function to throw a message which does not contain "
        f"{expected}, it threw: {error}",
    )


def always_fail_check(expected: str | None, value: Any) -> CheckResult:
    return False, "fail:" if expected is None else f"fail: {expected}"
