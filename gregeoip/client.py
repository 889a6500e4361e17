from http import HTTPStatus
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from gregeoip.config import ClientConfig, Settings
from gregeoip.diagnostics import BaseDiagnosticsSink, LoggerDiagnosticsSink
from gregeoip.errors import ConfigurationError, RequestFailedError
from gregeoip.exception_handlers import option_error_from_validation_error
from gregeoip.logger import logger
from gregeoip.models.request_models import (
    CountryOptions,
    Format,
    GeoIPOptions,
    LookupOptions,
    RequestOptions,
)

# JSON responses are decoded into dicts/lists; other formats are returned as text.
GeoIPResponse = Any


class GreGeoIP:
    """Async client for the https://gregeoip.com/ API.

    Every call validates its options locally, sends a single GET request and
    returns the response body. Nothing is retried or cached, and no state is
    shared between calls, so one instance can serve concurrent coroutines.
    """

    def __init__(
        self,
        api_key: str | None = None,
        settings: Settings | None = None,
        diagnostics: BaseDiagnosticsSink | None = None,
    ) -> None:
        settings = settings or Settings()
        if api_key is None and settings.api_key is not None:
            api_key = settings.api_key.get_secret_value()

        if not isinstance(api_key, str) or not api_key:
            raise ConfigurationError("You should pass the API Key.")

        self._config = ClientConfig.from_settings(api_key, settings)
        self._diagnostics = diagnostics or LoggerDiagnosticsSink()

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def geoip(
        self,
        params: list[str] | str | None = None,
        format: str | None = None,
        lang: str | None = None,
        mode: str | None = None,
    ) -> GeoIPResponse:
        """Geolocate the IP address the request is sent from."""
        options = self._validate(GeoIPOptions, params=params, format=format, lang=lang, mode=mode)
        return await self._request(options)

    async def lookup(
        self,
        ip: str | None = None,
        params: list[str] | str | None = None,
        format: str | None = None,
        lang: str | None = None,
        mode: str | None = None,
    ) -> GeoIPResponse:
        """Geolocate an explicit IP address."""
        options = self._validate(LookupOptions, ip=ip, params=params, format=format, lang=lang, mode=mode)
        return await self._request(options)

    async def country(
        self,
        country_code: str | None = None,
        params: list[str] | str | None = None,
        format: str | None = None,
        lang: str | None = None,
        mode: str | None = None,
    ) -> GeoIPResponse:
        """Fetch country information for an ISO 3166-1 alpha-2 code."""
        options = self._validate(
            CountryOptions, country_code=country_code, params=params, format=format, lang=lang, mode=mode
        )
        return await self._request(options)

    def _validate(self, options_cls: type[RequestOptions], **values: Any) -> RequestOptions:
        """Build the options model, raising the first validation failure as an SDK error."""
        context = {
            "docs_url": self._config.docs_url,
            "strict_ip_validation": self._config.strict_ip_validation,
        }
        try:
            return options_cls.model_validate(values, context=context)
        except ValidationError as exc:
            error = option_error_from_validation_error(exc)
            logger.info(f"Rejected request options endpoint={options_cls.ENDPOINT} error={type(error).__name__}")
            raise error from None

    def build_url(self, options: RequestOptions) -> str:
        """Serialize the options into the full request URL, API key included."""
        query = options.to_query(self._config.api_key.get_secret_value(), self._config.source)
        return f"{self._config.base_url}/{options.ENDPOINT}?{urlencode(query, quote_via=quote)}"

    async def _request(self, options: RequestOptions) -> GeoIPResponse:
        """Perform the HTTP request and decode the response body."""
        endpoint = options.ENDPOINT
        url = self.build_url(options)
        logger.info(
            "Sending GRE GeoIP request "
            f"endpoint={endpoint} format={options.format.value} lang={options.lang.value} mode={options.mode.value}"
        )

        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                response = await client.get(url)
        except httpx.RequestError as exc:
            self._diagnostics.record(
                f"Request to GRE GeoIP API failed endpoint={endpoint} error={self._redact(repr(exc))}", exc
            )
            raise RequestFailedError() from exc

        if response.status_code != HTTPStatus.OK:
            self._diagnostics.record(
                f"GRE GeoIP API returned HTTP {response.status_code} endpoint={endpoint} "
                f"body={self._redact(response.text)}"
            )
            raise RequestFailedError()

        return self._decode(response, options.format, endpoint)

    def _decode(self, response: httpx.Response, fmt: Format, endpoint: str) -> GeoIPResponse:
        if fmt is not Format.JSON:
            return response.text

        try:
            return response.json()
        except ValueError as exc:
            self._diagnostics.record(
                f"Failed to decode GRE GeoIP API response as JSON endpoint={endpoint} error={exc}", exc
            )
            raise RequestFailedError() from exc

    def _redact(self, text: str) -> str:
        """Strip the API key (raw and URL-encoded) out of diagnostic text."""
        key = self._config.api_key.get_secret_value()
        return text.replace(key, "***").replace(quote(key, safe=""), "***")
