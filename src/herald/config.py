from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from .errors import ConfigurationError
from .utils import is_blank, load_yaml_file, normalize_name, parse_bool

if TYPE_CHECKING:
    from .registry import ProviderRegistry

DEFAULT_POOL_SIZE = 10
DEFAULT_TIMEOUT_MS = 30000

_CREDENTIAL_KEYS = ("api_key", "api_secret", "account_id", "auth_token", "base_url")
_SETTINGS_KEYS = frozenset({"type", "name", "default", "timeout_ms", "properties", *_CREDENTIAL_KEYS})


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and vendor-specific options handed to a provider constructor.

    ``timeout_ms`` is the request budget a network client would apply; the bundled
    stub providers never block, so it has no effect on them.
    """

    api_key: str | None = None
    api_secret: str | None = None
    account_id: str | None = None
    auth_token: str | None = None
    base_url: str | None = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties or {})))

    def get_property(self, key: str, default: Any = None) -> Any:
        value = self.properties.get(key)
        return default if value is None else value

    def has(self, *keys: str) -> bool:
        """True when every named credential or property is present and non-blank."""
        for key in keys:
            value = getattr(self, key) if key in _CREDENTIAL_KEYS else self.properties.get(key)
            if is_blank(value):
                return False
        return True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ProviderConfig:
        """Build a config from a loose mapping; unrecognised keys land in ``properties``."""
        data = dict(data or {})
        properties_raw = data.get("properties") or {}
        if not isinstance(properties_raw, Mapping):
            raise ValueError("'properties' must be provided as a mapping when specified")
        properties = {str(key): value for key, value in properties_raw.items()}
        for key, value in data.items():
            if key not in _SETTINGS_KEYS:
                properties.setdefault(str(key), value)

        try:
            timeout_ms = int(data.get("timeout_ms", DEFAULT_TIMEOUT_MS))
        except (TypeError, ValueError) as exc:
            raise ValueError("'timeout_ms' must be an integer") from exc
        if timeout_ms <= 0:
            raise ValueError("'timeout_ms' must be greater than 0")

        credentials = {
            key: (str(data[key]).strip() if data.get(key) is not None else None) for key in _CREDENTIAL_KEYS
        }
        return cls(timeout_ms=timeout_ms, properties=properties, **credentials)


@dataclass(frozen=True)
class ProviderSettings:
    type: str
    name: str
    default: bool = False
    config: ProviderConfig = field(default_factory=ProviderConfig)


@dataclass(frozen=True)
class DispatcherSettings:
    pool_size: int = DEFAULT_POOL_SIZE
    providers: tuple[ProviderSettings, ...] = ()


def _build_provider_settings(data: Any, index: int) -> ProviderSettings:
    if not isinstance(data, Mapping):
        raise ValueError(f"'providers[{index}]' must be provided as a mapping")
    provider_type = normalize_name(data.get("type") or "")
    if not provider_type:
        raise ValueError(f"'providers[{index}].type' is required")
    name = normalize_name(data.get("name") or provider_type)
    try:
        config = ProviderConfig.from_mapping(data)
    except ValueError as exc:
        raise ValueError(f"'providers[{index}]': {exc}") from exc
    return ProviderSettings(
        type=provider_type,
        name=name,
        default=parse_bool(data.get("default"), default=False),
        config=config,
    )


def _build_dispatcher_settings(data: Mapping[str, Any]) -> DispatcherSettings:
    dispatcher_raw = data.get("dispatcher") or {}
    if not isinstance(dispatcher_raw, Mapping):
        raise ValueError("'dispatcher' must be provided as a mapping when specified")
    try:
        pool_size = int(dispatcher_raw.get("pool_size", DEFAULT_POOL_SIZE))
    except (TypeError, ValueError) as exc:
        raise ValueError("'dispatcher.pool_size' must be an integer") from exc
    if pool_size < 1:
        raise ValueError("'dispatcher.pool_size' must be greater than or equal to 1")

    providers_raw = data.get("providers") or []
    if not isinstance(providers_raw, list):
        raise ValueError("'providers' must be provided as a list")
    providers = tuple(_build_provider_settings(entry, index) for index, entry in enumerate(providers_raw))
    return DispatcherSettings(pool_size=pool_size, providers=providers)


def parse_config(data: Mapping[str, Any]) -> DispatcherSettings:
    """Validate raw configuration data and turn it into settings."""
    from .validation import validate_config_data

    report = validate_config_data(dict(data))
    if not report.is_valid:
        details = "; ".join(f"{issue.path}: {issue.message}" for issue in report.errors)
        raise ConfigurationError(f"Invalid configuration: {details}")
    try:
        return _build_dispatcher_settings(data)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def load_config(path: Path) -> DispatcherSettings:
    try:
        data = load_yaml_file(path)
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Configuration file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping at the top level")
    return parse_config(data)


def build_registry(settings: DispatcherSettings) -> ProviderRegistry:
    """Instantiate every configured provider and register it in file order."""
    from .providers import create_provider
    from .registry import ProviderRegistry

    registry = ProviderRegistry()
    defaults = []
    for entry in settings.providers:
        provider = create_provider(entry.type, entry.config, name=entry.name)
        registry.register(provider)
        if entry.default:
            defaults.append(provider)
    for provider in defaults:
        registry.set_default(provider.channel, provider.name)
    return registry
