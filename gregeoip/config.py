from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://gregeoip.com"
DEFAULT_DOCS_URL = "https://geoip-docs.gredev.io/sdks/js"
DEFAULT_SOURCE = "Python-Package"


class Settings(BaseSettings):
    """SDK settings loaded from `GREGEOIP_*` environment variables or a `.env` file.

    Explicit constructor arguments on the client always win over these values.
    """

    model_config = SettingsConfigDict(env_prefix="GREGEOIP_", env_file=".env", extra="ignore")

    api_key: SecretStr | None = Field(default=None, description="GRE GeoIP API key.")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the GRE GeoIP API.")
    timeout_seconds: float = Field(default=5.0, gt=0, description="HTTP timeout for a single request.")
    source: str = Field(default=DEFAULT_SOURCE, description="Client identifier sent as the `source` parameter.")
    docs_url: str = Field(default=DEFAULT_DOCS_URL, description="Documentation root used in validation messages.")
    strict_ip_validation: bool = Field(
        default=False,
        description="Require `ip` to be a valid IPv4/IPv6 literal instead of the loose length check.",
    )


class ClientConfig(BaseModel):
    """Immutable per-client configuration shared by every call made through the client."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 5.0
    source: str = DEFAULT_SOURCE
    docs_url: str = DEFAULT_DOCS_URL
    strict_ip_validation: bool = False

    @classmethod
    def from_settings(cls, api_key: str, settings: Settings) -> "ClientConfig":
        return cls(
            api_key=SecretStr(api_key),
            base_url=settings.base_url.rstrip("/"),
            timeout_seconds=settings.timeout_seconds,
            source=settings.source,
            docs_url=settings.docs_url.rstrip("/"),
            strict_ip_validation=settings.strict_ip_validation,
        )
