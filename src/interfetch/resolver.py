"""Configuration resolution and query serialization."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .types import FetchConfig, RequestInfo

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge two configuration mappings.

    Args:
        base: Default values
        override: Values that win at every nested key

    Returns:
        New merged dictionary; lists from ``override`` replace those in ``base``
    """
    result = dict(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def is_absolute_url(url: str | None) -> bool:
    return bool(url) and _ABSOLUTE_URL.match(url) is not None


def join_url(base: str | None, url: str | None) -> str:
    """Join a base URL and a path with exactly one slash between them."""
    if not base or is_absolute_url(url):
        return url or ""
    if not url or url == "/":
        return base
    return f"{base.rstrip('/')}/{url.lstrip('/')}"


def as_dict(config: FetchConfig | Mapping[str, Any] | None) -> dict[str, Any]:
    if config is None:
        return {}
    if isinstance(config, FetchConfig):
        return config.to_dict()
    return dict(config)


def resolve_config(
    request: RequestInfo,
    config: FetchConfig | Mapping[str, Any] | None,
    defaults: FetchConfig,
) -> FetchConfig:
    """Build the configuration for one call.

    Args:
        request: URL string, or a full configuration for the call
        config: Call-site options, used when ``request`` is a URL
        defaults: Client defaults

    Returns:
        Fresh ``FetchConfig``; neither input is modified
    """
    if isinstance(request, str):
        call = as_dict(config)
        call["url"] = request
    else:
        call = as_dict(request)

    resolved = FetchConfig.model_validate(merge_configs(defaults.model_dump(), call))
    resolved.method = (resolved.method or "GET").upper()

    if is_absolute_url(resolved.url):
        resolved.base_url = None

    return resolved


def _unique(values: list[Any] | tuple[Any, ...]) -> list[Any]:
    unique: list[Any] = []
    for value in values:
        if value not in unique:
            unique.append(value)
    return unique


def clean_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Drop empty parameters and de-duplicate list values.

    Keys whose value is None, an empty string, or an empty list are
    removed. List values keep their first-seen order.
    """
    cleaned = {}
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            cleaned[key] = _unique(value)
        elif value is None or (isinstance(value, str) and not value):
            continue
        else:
            cleaned[key] = value
    return cleaned


def serialize_query(params: Mapping[str, Any]) -> dict[str, Any]:
    """Clean ``params`` and use the ``key[]`` form for list values."""
    return {
        f"{key}[]" if isinstance(value, list) else key: value
        for key, value in clean_params(params).items()
    }
