"""Error types raised while handling requests and how they map to responses."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from shottower.responses import ImplResponse


class TypeAssertionError(TypeError):
    """A value did not have the type that was expected."""

    def __init__(self, message: str = "unable to assert type") -> None:
        super().__init__(message)


class ParsingError(Exception):
    """A request body or parameter could not be parsed."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error


class RequiredError(Exception):
    """A required field holds its zero value."""

    def __init__(self, schema: str, field: str) -> None:
        self.schema = schema
        self.field = field
        super().__init__(f"required field [{schema}].'{field}' is zero value.")


class EnumError(Exception):
    """An enumerated field holds a value outside its allowed set."""

    def __init__(self, schema: str, field: str, value: Any) -> None:
        self.schema = schema
        self.field = field
        self.value = value
        super().__init__(
            f"enum field [{schema}].'{field}' has not authorized value "
            f"'{_to_string(value)}'."
        )


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def default_error_handler(error: BaseException, result: ImplResponse | None) -> ImplResponse:
    """Turn an error into the response to send.

    Parsing errors give 400, required and enum errors give 422; any other
    error keeps the status code of the service result (500 if there is none).
    """
    if isinstance(error, ParsingError):
        code = int(HTTPStatus.BAD_REQUEST)
    elif isinstance(error, (RequiredError, EnumError)):
        code = int(HTTPStatus.UNPROCESSABLE_ENTITY)
    elif result is not None:
        code = result.code
    else:
        code = int(HTTPStatus.INTERNAL_SERVER_ERROR)
    return ImplResponse(code=code, body=str(error))