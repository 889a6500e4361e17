class GreGeoIPError(Exception):
    """Base error for the GRE GeoIP SDK."""


class ConfigurationError(GreGeoIPError):
    """Raised when the client is constructed without a usable API key."""


class OptionValidationError(GreGeoIPError):
    """Base error for request options rejected before any network call."""


class InvalidParameterError(OptionValidationError):
    """Raised for an unknown feature module or a malformed identifier."""


class InvalidFormatError(OptionValidationError):
    """Raised when the `format` option is not one of the supported formats."""


class InvalidLanguageError(OptionValidationError):
    """Raised when the `lang` option is not one of the supported languages."""


class InvalidModeError(OptionValidationError):
    """Raised when the `mode` option is neither `live` nor `test`."""


class MissingParameterError(OptionValidationError):
    """Raised when a required identifier (e.g. `ip`) is missing."""


REQUEST_FAILED_MESSAGE = "An unknown error occurred while sending the request to GRE GeoIP API."


class RequestFailedError(GreGeoIPError):
    """Raised when the API call fails at the transport level or returns a non-200 status."""

    def __init__(self, message: str = REQUEST_FAILED_MESSAGE) -> None:
        super().__init__(message)
