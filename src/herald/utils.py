from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return expand_env(data)


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret YAML/env style booleans ("yes", "off", 1, ...)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return default


def normalize_name(value: str) -> str:
    """Canonical form of a provider name used for registry lookups."""
    return str(value).strip().lower()


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def mask_recipient(recipient: str) -> str:
    """Hide most of an address, phone number or device token for log output."""
    text = recipient.strip()
    if not text:
        return text
    if "@" in text:
        local, _, domain = text.partition("@")
        return f"{local[:1]}***@{domain}"
    if len(text) <= 4:
        return "*" * len(text)
    if len(text) <= 16:
        return f"{text[:3]}***{text[-2:]}"
    return f"{text[:8]}...({len(text)} chars)"
