"""Process-level client defaults loaded from environment variables.

Example:
    With ``INTERFETCH_BASE_URL=https://api.example.com`` and
    ``INTERFETCH_TIMEOUT=10`` in the environment::

        from interfetch import create_instance
        from interfetch.settings import FetchSettings

        client = create_instance(FetchSettings.from_env().to_config())
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from .types import FetchConfig

DEFAULT_PREFIX = "INTERFETCH_"


class FetchSettings(BaseModel):
    """Client defaults that can be set from the environment.

    Attributes:
        base_url: Default base URL
        timeout: Default timeout in seconds
        credentials: Default credentials mode
        xsrf_cookie_name: Cookie holding the XSRF token
        xsrf_header_name: Header the XSRF token is copied to
        headers: Default headers (``INTERFETCH_HEADERS_<NAME>``)
    """

    model_config = ConfigDict(extra="ignore")

    base_url: str | None = None
    timeout: float | None = None
    credentials: str | None = None
    xsrf_cookie_name: str = "XSRF-TOKEN"
    xsrf_header_name: str = "X-XSRF-TOKEN"
    headers: dict[str, str] = {}

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_PREFIX, environ: Mapping[str, str] | None = None
    ) -> FetchSettings:
        """Load settings from variables starting with ``prefix``.

        ``<PREFIX>HEADERS_<NAME>`` entries become default headers, with
        underscores in ``NAME`` turned into dashes.
        """
        environ = os.environ if environ is None else environ
        prefix = prefix.upper()
        values: dict[str, Any] = {}
        headers: dict[str, str] = {}

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            key = key[len(prefix):]
            if not key:
                continue

            if key.startswith("HEADERS_"):
                name = key[len("HEADERS_"):].replace("_", "-").title()
                headers[name] = value
            else:
                # pydantic converts the strings to the field types
                values[key.lower()] = value or None

        if headers:
            values["headers"] = headers
        return cls.model_validate(values)

    def to_config(self) -> FetchConfig:
        """Return the settings as ``FetchConfig`` defaults."""
        return FetchConfig.model_validate(self.model_dump(exclude_none=True))

