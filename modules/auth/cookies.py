"""
Supabase session cookie parsing.

The Supabase SSR helpers store the session as JSON under
``sb-<project-ref>-auth-token``. Large values are split into numbered chunks
(``name.0``, ``name.1``, ...) and newer versions prefix the value with
``base64-`` followed by unpadded base64url. The legacy auth-helpers format is
a JSON array ``[access_token, refresh_token, ...]``.
"""

import base64
import binascii
import json
from typing import Mapping, Optional
from urllib.parse import unquote

from .models import SessionTokens

BASE64_PREFIX = "base64-"


def has_auth_cookie(cookies: Mapping[str, str], cookie_name: str) -> bool:
    """True if the request carries the session cookie or any chunk of it."""
    return any(key == cookie_name or key.startswith(f"{cookie_name}.") for key in cookies)


def read_cookie_value(cookies: Mapping[str, str], cookie_name: str) -> Optional[str]:
    """Return the full cookie value, joining chunks when the cookie was split."""
    if cookie_name in cookies:
        return cookies[cookie_name]

    chunks: list[str] = []
    index = 0
    while f"{cookie_name}.{index}" in cookies:
        chunks.append(cookies[f"{cookie_name}.{index}"])
        index += 1

    return "".join(chunks) if chunks else None


def decode_session_cookie(raw: str) -> Optional[SessionTokens]:
    """
    Decode a session cookie value into its tokens.

    Returns None for anything that does not look like a Supabase session.
    """
    value = unquote(raw)

    if value.startswith(BASE64_PREFIX):
        encoded = value[len(BASE64_PREFIX):]
        encoded += "=" * (-len(encoded) % 4)
        try:
            value = base64.urlsafe_b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return None

    if isinstance(data, dict):
        access_token = data.get("access_token")
        refresh_token = data.get("refresh_token")
    elif isinstance(data, list) and data:
        access_token = data[0]
        refresh_token = data[1] if len(data) > 1 else None
    else:
        return None

    if not isinstance(access_token, str) or not access_token:
        return None

    return SessionTokens(
        access_token=access_token,
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
    )


def extract_session(cookies: Mapping[str, str], cookie_name: str) -> Optional[SessionTokens]:
    """Read and decode the session cookie in one step."""
    raw = read_cookie_value(cookies, cookie_name)
    if raw is None:
        return None
    return decode_session_cookie(raw)
