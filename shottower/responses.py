"""Service results and helpers for required-field validation."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class ImplResponse:
    """An HTTP status code together with the body to encode."""

    code: int
    body: Any = None


def response(code: int, body: Any) -> ImplResponse:
    """Build an ImplResponse."""
    return ImplResponse(code=code, body=body)


_SIMPLE_TYPES = (str, bytes, int, float, complex, list, tuple, dict, set, frozenset)


def is_zero_value(value: Any) -> bool:
    """Tell whether a value is unset: None, empty, zero, or a dataclass of such."""
    if value is None:
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(
            is_zero_value(getattr(value, field.name))
            for field in dataclasses.fields(value)
        )
    if isinstance(value, _SIMPLE_TYPES):
        return not value
    try:
        zero = type(value)()
    except TypeError:
        return False
    return value == zero


def assert_recurse_required(obj: Any, callback: Callable[[Any], None]) -> None:
    """Run ``callback`` on every dataclass instance found in nested sequences.

    Sequences are walked in pre-order; the first error the callback raises
    propagates. Values that are neither sequences nor dataclasses are skipped.
    """
    if isinstance(obj, (list, tuple)):
        for item in obj:
            assert_recurse_required(item, callback)
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        callback(obj)