"""Configuration: auth modes, host routing, environment and retry policy loading."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypedDict, Union

import yaml
from alpaca.data.enums import DataFeed
from dotenv import load_dotenv

from alpaca_rest.errors import ConfigurationError
from alpaca_rest.rest.retry import DEFAULT_RETRY_STATUSES, RetryPolicy

ALPACA_DOMAIN = "alpaca.markets"
VERSION_2_PATH_SEGMENT = "v2"
DATA_HOST_SUBDOMAIN = "data"

KEY_ID_HEADER = "APCA-API-KEY-ID"
SECRET_KEY_HEADER = "APCA-API-SECRET-KEY"
AUTHORIZATION_HEADER = "Authorization"

# Market data feed selection ("iex", "sip", ...)
DataAPIType = DataFeed


class EndpointAPIType(str, Enum):
    """Deployment target of the broker API."""

    LIVE = "live"
    PAPER = "paper"


BROKER_HOST_SUBDOMAINS: dict[EndpointAPIType, str] = {
    EndpointAPIType.LIVE: "live",
    EndpointAPIType.PAPER: "paper-api",
}

_unmapped = set(EndpointAPIType) - set(BROKER_HOST_SUBDOMAINS)
if _unmapped:
    raise RuntimeError(f"No broker host mapped for endpoint types: {sorted(_unmapped)}")


@dataclass(frozen=True)
class KeyPairAuth:
    """API key ID + secret key, sent as two headers."""

    key_id: str
    secret_key: str

    def headers(self) -> dict[str, str]:
        return {KEY_ID_HEADER: self.key_id, SECRET_KEY_HEADER: self.secret_key}

    def __repr__(self) -> str:
        return f"KeyPairAuth(key_id={self.key_id!r}, secret_key='***')"


@dataclass(frozen=True)
class OAuthAuth:
    """OAuth bearer token. The data API does not accept these."""

    token: str

    def headers(self) -> dict[str, str]:
        return {AUTHORIZATION_HEADER: f"Bearer {self.token}"}

    def __repr__(self) -> str:
        return "OAuthAuth(token='***')"


AuthMode = Union[KeyPairAuth, OAuthAuth]


@dataclass(frozen=True)
class ClientConfig:
    """Immutable per-client configuration: who we are and where we talk to."""

    auth: AuthMode
    host_subdomain: str
    version_segment: str = VERSION_2_PATH_SEGMENT

    @property
    def base_url(self) -> str:
        return f"https://{self.host_subdomain}.{ALPACA_DOMAIN}/{self.version_segment}"

    @property
    def is_oauth(self) -> bool:
        return isinstance(self.auth, OAuthAuth)


def broker_host_subdomain(endpoint_api_type: EndpointAPIType) -> str:
    """Map an endpoint type to its broker host subdomain."""
    try:
        return BROKER_HOST_SUBDOMAINS[endpoint_api_type]
    except KeyError as e:
        raise ConfigurationError(f"Unsupported endpoint API type: {endpoint_api_type!r}") from e


def resolve_auth(
    key_id: Optional[str],
    secret_key: Optional[str],
    oauth_token: Optional[str],
) -> AuthMode:
    """Pick exactly one auth mode from the supplied credentials.

    Raises:
        ConfigurationError: If no mode, both modes, or half a key pair is given
    """
    has_key_id = bool(key_id)
    has_secret = bool(secret_key)
    has_token = bool(oauth_token)

    if has_key_id != has_secret:
        raise ConfigurationError("Key ID and secret key must be provided together")
    if has_key_id and has_token:
        raise ConfigurationError("Key pair and OAuth token are mutually exclusive")
    if has_token:
        return OAuthAuth(token=str(oauth_token))
    if has_key_id:
        return KeyPairAuth(key_id=str(key_id), secret_key=str(secret_key))
    raise ConfigurationError("Either a key ID/secret key pair or an OAuth token is required")


def resolve_client_configs(
    key_id: Optional[str],
    secret_key: Optional[str],
    oauth_token: Optional[str],
    endpoint_api_type: Optional[EndpointAPIType],
    data_api_type: Optional[DataFeed],
) -> tuple[ClientConfig, Optional[ClientConfig]]:
    """Build the broker config and, unless OAuth is used, the data config.

    Returns:
        (broker_config, data_config); data_config is None under OAuth
    """
    if endpoint_api_type is None:
        raise ConfigurationError("endpoint_api_type not set")
    if data_api_type is None:
        raise ConfigurationError("data_api_type not set")
    if not isinstance(endpoint_api_type, EndpointAPIType):
        endpoint_api_type = parse_endpoint_api_type(str(endpoint_api_type))
    # Validated here; the feed itself is applied by MarketDataEndpoint
    coerce_data_api_type(data_api_type)

    auth = resolve_auth(key_id, secret_key, oauth_token)
    broker_config = ClientConfig(auth=auth, host_subdomain=broker_host_subdomain(endpoint_api_type))
    if isinstance(auth, OAuthAuth):
        return broker_config, None
    return broker_config, ClientConfig(auth=auth, host_subdomain=DATA_HOST_SUBDOMAIN)


def parse_endpoint_api_type(value: str) -> EndpointAPIType:
    try:
        return EndpointAPIType(value.strip().lower())
    except ValueError as e:
        raise ConfigurationError(f"Invalid endpoint API type: {value!r}") from e


def parse_data_api_type(value: str) -> DataFeed:
    try:
        return DataFeed(value.strip().lower())
    except ValueError as e:
        raise ConfigurationError(f"Invalid data API type: {value!r}") from e


def coerce_data_api_type(value: Union[DataFeed, str]) -> DataFeed:
    """Return `value` as a DataFeed, parsing strings such as "iex" or "SIP"."""
    if isinstance(value, DataFeed):
        return value
    return parse_data_api_type(str(value))


class EnvConfig(TypedDict, total=False):
    """Environment configuration with type safety."""

    ALPACA_API_KEY: str
    ALPACA_SECRET_KEY: str
    ALPACA_OAUTH_TOKEN: str
    ALPACA_ENDPOINT_API_TYPE: str
    ALPACA_DATA_API_TYPE: str
    LOG_LEVEL: str
    RETRY_CONFIG_PATH: str


def load_env() -> EnvConfig:
    """Load environment variables from .env file and environment.

    Returns:
        EnvConfig with all environment settings
    """
    load_dotenv()
    return EnvConfig(
        ALPACA_API_KEY=os.getenv("ALPACA_API_KEY", ""),
        ALPACA_SECRET_KEY=os.getenv("ALPACA_SECRET_KEY", ""),
        ALPACA_OAUTH_TOKEN=os.getenv("ALPACA_OAUTH_TOKEN", ""),
        ALPACA_ENDPOINT_API_TYPE=os.getenv("ALPACA_ENDPOINT_API_TYPE", "paper"),
        ALPACA_DATA_API_TYPE=os.getenv("ALPACA_DATA_API_TYPE", "iex"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        RETRY_CONFIG_PATH=os.getenv("RETRY_CONFIG_PATH", ""),
    )


def validate_retry_policy(retry_config: dict[str, Any]) -> RetryPolicy:
    """Validate a `retry:` mapping and build a RetryPolicy from it.

    Raises:
        ConfigurationError: If any retry value is invalid
    """
    if not isinstance(retry_config, dict):
        raise ConfigurationError(
            f"retry must be a mapping/dict, got {type(retry_config).__name__}"
        )

    defaults = RetryPolicy()
    try:
        max_attempts = int(retry_config.get("max_attempts", defaults.max_attempts))
        base_delay = float(retry_config.get("base_delay", defaults.base_delay))
        max_delay = float(retry_config.get("max_delay", defaults.max_delay))
        max_elapsed = float(retry_config.get("max_elapsed", defaults.max_elapsed))
        request_timeout = float(retry_config.get("request_timeout", defaults.request_timeout))
        jitter = float(retry_config.get("jitter", defaults.jitter))
        retry_statuses = tuple(
            int(s) for s in retry_config.get("retry_statuses", DEFAULT_RETRY_STATUSES)
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Retry config fields must be numbers: {e}") from e

    if max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be at least 1, got {max_attempts}")
    if base_delay < 0 or max_delay < base_delay:
        raise ConfigurationError(
            f"Require 0 <= base_delay <= max_delay, got base_delay={base_delay} max_delay={max_delay}"
        )
    if max_elapsed <= 0 or request_timeout <= 0:
        raise ConfigurationError("max_elapsed and request_timeout must be positive")
    if not 0 <= jitter <= 1:
        raise ConfigurationError(f"jitter must be between 0 and 1, got {jitter}")
    for status in retry_statuses:
        if status != 429 and not 500 <= status <= 599:
            raise ConfigurationError(f"Only 429 and 5xx statuses can be retried, got {status}")

    return RetryPolicy(
        max_attempts=max_attempts,
        base_delay=base_delay,
        max_delay=max_delay,
        max_elapsed=max_elapsed,
        request_timeout=request_timeout,
        jitter=jitter,
        retry_statuses=retry_statuses,
    )


def load_retry_policy(path: str) -> RetryPolicy:
    """Load the retry policy from a YAML file's `retry:` section."""
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    with open(config_path) as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    return validate_retry_policy(config.get("retry", {}))
