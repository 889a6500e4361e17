from collections.abc import Iterable
from enum import Enum
from ipaddress import ip_address
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from gregeoip.config import DEFAULT_DOCS_URL

ISO_3166_DOCS_URL = "https://en.wikipedia.org/wiki/ISO_3166-1_alpha-2"


class Format(str, Enum):
    """Response formats supported by the API."""

    JSON = "JSON"
    XML = "XML"
    CSV = "CSV"
    NEWLINE = "Newline"


class Language(str, Enum):
    """Languages the API can localize names into."""

    EN = "EN"
    AR = "AR"
    DE = "DE"
    FR = "FR"
    ES = "ES"
    JA = "JA"
    ZH = "ZH"
    RU = "RU"


class Mode(str, Enum):
    """Execution mode: production data or the sandboxed test response."""

    live = "live"
    test = "test"


class GeoIPModule(str, Enum):
    """Feature modules available to the GeoIP and IPLookup endpoints."""

    location = "location"
    security = "security"
    timezone = "timezone"
    currency = "currency"
    device = "device"


class CountryModule(str, Enum):
    """Feature modules available to the Country endpoint."""

    language = "language"
    flag = "flag"
    currency = "currency"
    timezone = "timezone"


def _describe_choices(values: Iterable[str], last_joiner: str) -> str:
    """Render choices as "`a`, `b` or `c`" for error messages."""
    quoted = [f"`{value}`" for value in values]
    if len(quoted) == 1:
        return quoted[0]
    return f"{', '.join(quoted[:-1])} {last_joiner} {quoted[-1]}"


def _docs_link(info: ValidationInfo, page: str) -> str:
    context = info.context or {}
    docs_url = str(context.get("docs_url") or DEFAULT_DOCS_URL).rstrip("/")
    return f"{docs_url}/{page}#options"


def _ensure_choice(
    value: Any,
    choices: type[Enum],
    default: Enum,
    option: str,
    error_type: str,
    docs: str,
) -> Any:
    """Shared check for the closed `format` / `lang` / `mode` enumerations.

    Falsy values fall back to the default. Anything else must match one of the
    enum values exactly, otherwise a PydanticCustomError carrying `error_type`
    is raised so the caller can map it to the matching SDK exception.
    """
    if not value:
        return default
    if isinstance(value, choices):
        return value

    allowed = [member.value for member in choices]
    if not isinstance(value, str) or value not in allowed:
        raise PydanticCustomError(
            error_type,
            "The `{option}` option value \"{value}\" you specified is unknown.\n"
            "You can use: {allowed}.\nRead more at: {docs}",
            {"option": option, "value": str(value), "allowed": _describe_choices(allowed, "or"), "docs": docs},
        )
    return value


class RequestOptions(BaseModel):
    """Options shared by every API operation.

    Subclasses pin the endpoint, the allowed feature modules and the
    documentation page referenced in validation messages. Validators raise
    PydanticCustomError with a stable `type`; see `gregeoip.exception_handlers`
    for how those are turned into SDK exceptions.

    The operation identifier (`ip`, `countryCode`) is checked by a model-level
    "before" validator, so it fails ahead of `params`, `format`, `lang` and
    `mode`, which are then checked in that order.
    """

    ENDPOINT: ClassVar[str]
    DOCS_PAGE: ClassVar[str]
    AVAILABLE_MODULES: ClassVar[tuple[str, ...]]

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    params: list[str] = Field(
        default_factory=list,
        description="Feature modules to include in the response.",
        examples=[["location", "security"]],
    )
    format: Format = Field(default=Format.JSON, description="Response format.")
    lang: Language = Field(default=Language.EN, description="Response language (case-insensitive).")
    mode: Mode = Field(default=Mode.live, description="`live` for real data, `test` for the sandbox.")

    @field_validator("params", mode="before")
    @classmethod
    def _coerce_params(cls, value: Any) -> Any:
        """Accept None and comma-separated strings in addition to sequences."""
        if not value:
            return []
        if isinstance(value, str):
            return value.split(",")
        return value

    @field_validator("params")
    @classmethod
    def _validate_params(cls, value: list[str], info: ValidationInfo) -> list[str]:
        # Empty entries are skipped here but still sent, so ["location", ""] goes out as "location,".
        for module in value:
            if module and module not in cls.AVAILABLE_MODULES:
                raise PydanticCustomError(
                    "unknown_module",
                    "The \"{module}\" module you used is unknown.\nYou can use: {allowed}.\nRead more at: {docs}",
                    {
                        "module": module,
                        "allowed": _describe_choices(cls.AVAILABLE_MODULES, "and/or"),
                        "docs": _docs_link(info, cls.DOCS_PAGE),
                    },
                )
        return value

    @field_validator("format", mode="before")
    @classmethod
    def _validate_format(cls, value: Any, info: ValidationInfo) -> Any:
        return _ensure_choice(value, Format, Format.JSON, "format", "invalid_format", _docs_link(info, cls.DOCS_PAGE))

    @field_validator("lang", mode="before")
    @classmethod
    def _validate_lang(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str) and not isinstance(value, Language):
            value = value.upper()
        return _ensure_choice(
            value, Language, Language.EN, "lang", "invalid_language", _docs_link(info, cls.DOCS_PAGE)
        )

    @field_validator("mode", mode="before")
    @classmethod
    def _validate_mode(cls, value: Any, info: ValidationInfo) -> Any:
        return _ensure_choice(value, Mode, Mode.live, "mode", "invalid_mode", _docs_link(info, cls.DOCS_PAGE))

    def _identifier_query(self) -> dict[str, str]:
        """Operation-specific identifier parameters, if any."""
        return {}

    def to_query(self, api_key: str, source: str) -> dict[str, str]:
        """Build the outbound query map for this request."""
        query = {
            "key": api_key,
            "params": ",".join(self.params),
            "format": self.format.value,
            "lang": self.lang.value,
            "mode": self.mode.value,
        }
        query.update(self._identifier_query())
        query["source"] = source
        return query


class GeoIPOptions(RequestOptions):
    """Options for the GeoIP endpoint (geolocation of the caller's own IP)."""

    ENDPOINT: ClassVar[str] = "GeoIP"
    DOCS_PAGE: ClassVar[str] = "geoip-method"
    AVAILABLE_MODULES: ClassVar[tuple[str, ...]] = tuple(module.value for module in GeoIPModule)


class LookupOptions(RequestOptions):
    """Options for the IPLookup endpoint.

    `ip` only goes through a loose length check (at least 7 characters) unless
    the validation context sets `strict_ip_validation`, in which case it must
    also parse as an IPv4 or IPv6 address.
    """

    ENDPOINT: ClassVar[str] = "IPLookup"
    DOCS_PAGE: ClassVar[str] = "lookup-method"
    AVAILABLE_MODULES: ClassVar[tuple[str, ...]] = tuple(module.value for module in GeoIPModule)

    ip: str = Field(
        default="",
        description="IPv4 or IPv6 address to look up.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )

    @model_validator(mode="before")
    @classmethod
    def _validate_ip(cls, data: Any, info: ValidationInfo) -> Any:
        """Check `ip` before any shared option so a bad address is the error reported."""
        if not isinstance(data, dict):
            return data

        value = data.get("ip")
        value_str = value if isinstance(value, str) else ""
        if len(value_str) < 7:
            raise PydanticCustomError("missing_ip", "You should pass the `ip` parameter.")

        context = info.context or {}
        if context.get("strict_ip_validation"):
            try:
                ip_address(value_str)
            except ValueError as exc:
                raise PydanticCustomError(
                    "invalid_ip",
                    "The `ip` parameter \"{ip}\" is not a valid IPv4 or IPv6 address.",
                    {"ip": value_str},
                ) from exc

        return {**data, "ip": value_str}

    def _identifier_query(self) -> dict[str, str]:
        return {"ip": self.ip}


class CountryOptions(RequestOptions):
    """Options for the Country endpoint."""

    ENDPOINT: ClassVar[str] = "Country"
    DOCS_PAGE: ClassVar[str] = "country-method"
    AVAILABLE_MODULES: ClassVar[tuple[str, ...]] = tuple(module.value for module in CountryModule)

    country_code: str = Field(
        default="",
        alias="countryCode",
        description="ISO 3166-1 alpha-2 country code (case-insensitive).",
        examples=["US", "de"],
    )

    @model_validator(mode="before")
    @classmethod
    def _validate_country_code(cls, data: Any) -> Any:
        """Check `countryCode` before any shared option so it is the error reported."""
        if not isinstance(data, dict):
            return data

        value = data.get("countryCode", data.get("country_code"))
        value_str = value.upper() if isinstance(value, str) else ""
        # Shape check only; membership in the real ISO list is left to the API.
        if len(value_str) != 2:
            raise PydanticCustomError(
                "invalid_country_code",
                "You should pass the `countryCode` parameter. "
                "Also, it should be a `ISO 3166-1 alpha-2` format.\nRead more at: {docs}",
                {"docs": ISO_3166_DOCS_URL},
            )

        options = {key: item for key, item in data.items() if key not in ("countryCode", "country_code")}
        options["countryCode"] = value_str
        return options

    def _identifier_query(self) -> dict[str, str]:
        return {"CountryCode": self.country_code}
