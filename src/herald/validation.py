from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

from .utils import normalize_name, parse_bool


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single configuration problem."""

    severity: str
    path: str
    message: str
    code: str


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, path: str, message: str, code: str) -> None:
        self.errors.append(ValidationIssue(severity="error", path=path, message=message, code=code))

    def warning(self, path: str, message: str, code: str) -> None:
        self.warnings.append(ValidationIssue(severity="warning", path=path, message=message, code=code))


_NULLABLE_STRING = {"type": ["string", "null"]}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "dispatcher": {
            "type": "object",
            "properties": {
                "pool_size": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
        "providers": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"type": "string", "minLength": 1},
                    "name": {"type": "string", "minLength": 1},
                    "default": {"type": "boolean"},
                    "api_key": _NULLABLE_STRING,
                    "api_secret": _NULLABLE_STRING,
                    "account_id": _NULLABLE_STRING,
                    "auth_token": _NULLABLE_STRING,
                    "base_url": _NULLABLE_STRING,
                    "timeout_ms": {"type": "integer", "minimum": 1},
                    "properties": {"type": "object"},
                },
                "additionalProperties": True,
            },
        },
    },
    "additionalProperties": True,
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    tokens: List[str] = []
    for part in path:
        if isinstance(part, int):
            if tokens:
                tokens[-1] = f"{tokens[-1]}[{part}]"
            else:
                tokens.append(f"[{part}]")
        else:
            tokens.append(str(part))
    return ".".join(tokens) if tokens else "<root>"


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate configuration data against the schema and semantic rules."""
    report = ValidationReport()
    validator = Draft7Validator(CONFIG_SCHEMA)

    for error in sorted(validator.iter_errors(data), key=lambda exc: list(exc.absolute_path)):
        report.error(_format_jsonschema_path(error.absolute_path), error.message, "schema")

    if report.is_valid:
        _validate_semantics(data, report)
    return report


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    from .config import ProviderConfig
    from .providers import PROVIDER_TYPES

    providers = data.get("providers") or []
    if not providers:
        report.warning("providers", "No providers are configured; every send will fail", "no-providers")

    seen: Dict[tuple[str, str], str] = {}
    defaults: Dict[str, str] = {}
    for index, entry in enumerate(providers):
        path = f"providers[{index}]"
        provider_type = normalize_name(entry.get("type", ""))
        provider_cls = PROVIDER_TYPES.get(provider_type)
        if provider_cls is None:
            known = ", ".join(sorted(PROVIDER_TYPES))
            report.error(f"{path}.type", f"Unknown provider type '{entry.get('type')}' (expected one of: {known})", "provider-type")
            continue

        channel = provider_cls.channel.value
        name = normalize_name(entry.get("name") or provider_type)
        key = (channel, name)
        if key in seen:
            report.error(
                f"{path}.name",
                f"Provider '{name}' is already defined for channel {channel} at {seen[key]}",
                "duplicate-provider",
            )
        else:
            seen[key] = path

        if parse_bool(entry.get("default")):
            if channel in defaults:
                report.error(
                    f"{path}.default",
                    f"Channel {channel} already has a default provider at {defaults[channel]}",
                    "duplicate-default",
                )
            else:
                defaults[channel] = path

        try:
            config = ProviderConfig.from_mapping(entry)
        except ValueError as exc:
            report.error(path, str(exc), "provider-config")
            continue
        if not provider_cls(config).is_configured():
            report.warning(
                path,
                f"Provider '{name}' is missing credentials and will refuse to send",
                "missing-credentials",
            )


def group_validation_issues(issues: List[ValidationIssue]) -> Dict[str, List[ValidationIssue]]:
    """Group issues by their top-level entry (``dispatcher``, ``providers[0]``, ...)."""
    grouped: Dict[str, List[ValidationIssue]] = {}
    for issue in issues:
        section = issue.path.split(".", 1)[0] or "<root>"
        grouped.setdefault(section, []).append(issue)
    return grouped


def describe_section(section: str, data: Optional[Mapping[str, Any]] = None) -> str:
    """Human readable label for a grouped section, e.g. ``providers[1] (twilio)``."""
    if data is None or not section.startswith("providers["):
        return section
    try:
        index = int(section[len("providers[") : -1])
        entry = data["providers"][index]
    except (KeyError, IndexError, TypeError, ValueError):
        return section
    if isinstance(entry, Mapping):
        label = entry.get("name") or entry.get("type")
        if label:
            return f"{section} ({label})"
    return section
