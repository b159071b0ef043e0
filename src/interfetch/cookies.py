"""Cookie lookups against an httpx cookie jar.

The jar normally belongs to the transport's ``httpx.AsyncClient``, so cookies
set by earlier responses (an XSRF token, for example) are visible here.
Without a jar there are no cookies.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import unquote

import httpx


def _domain_matches(cookie_domain: str, host: str) -> bool:
    cookie_domain = cookie_domain.lstrip(".").lower()
    if not cookie_domain:
        return True
    host = host.lower()
    return host == cookie_domain or host.endswith("." + cookie_domain)


def get_cookies(jar: httpx.Cookies | None = None, domain: str | None = None) -> dict[str, str]:
    """Return a mapping of cookie name to raw value.

    When ``domain`` is given, only cookies visible to that host are returned:
    cookies without a domain, or whose domain is the host or a parent of it.
    """
    if jar is None:
        return {}
    cookies: dict[str, str] = {}
    for cookie in jar.jar:
        if cookie.value is None:
            continue
        if domain is not None and not _domain_matches(cookie.domain, domain):
            continue
        cookies[cookie.name] = cookie.value
    return cookies


def parse_cookie_value(value: str) -> Any:
    """Best-effort conversion of a cookie string to a Python value.

    JSON literals (numbers, booleans, null, objects, arrays) are decoded;
    anything else is returned unchanged.
    """
    try:
        return json.loads(value)
    except ValueError:
        return value


def get_cookie(name: str, jar: httpx.Cookies | None = None, domain: str | None = None) -> Any:
    """Return the URL-decoded, parsed value of cookie ``name`` or None."""
    value = get_cookies(jar, domain).get(name)
    if not value:
        return None
    return parse_cookie_value(unquote(value))
