from typing import Any

from pydantic import ValidationError

from gregeoip.errors import (
    InvalidFormatError,
    InvalidLanguageError,
    InvalidModeError,
    InvalidParameterError,
    MissingParameterError,
    OptionValidationError,
)

# Error types raised by the validators in gregeoip.models.request_models.
ERROR_TYPES_MAP: dict[str, type[OptionValidationError]] = {
    "unknown_module": InvalidParameterError,
    "invalid_format": InvalidFormatError,
    "invalid_language": InvalidLanguageError,
    "invalid_mode": InvalidModeError,
    "missing_ip": MissingParameterError,
    "invalid_ip": InvalidParameterError,
    "invalid_country_code": InvalidParameterError,
}


def _describe_location(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "options"


def option_error_from_validation_error(exc: ValidationError) -> OptionValidationError:
    """Translate a pydantic ValidationError into the matching SDK exception.

    Only the first error is surfaced. The operation identifier is checked by a
    model-level validator ahead of the fields, which pydantic then reports in
    order: `params`, `format`, `lang`, `mode`. Errors produced by pydantic
    itself (e.g. a number passed where a list of module names is expected)
    become InvalidParameterError.
    """
    errors = exc.errors(include_url=False, include_input=False)
    if not errors:
        return InvalidParameterError("Invalid request options.")

    error = errors[0]
    error_cls = ERROR_TYPES_MAP.get(error.get("type", ""))
    if error_cls is not None:
        return error_cls(error["msg"])

    location = _describe_location(tuple(error.get("loc", ())))
    return InvalidParameterError(f"Invalid value for `{location}`: {error['msg']}")
