"""Base64 helpers working on text.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import base64
import binascii
import re

_BASE64 = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")


def encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode(text: str) -> str:
    return base64.b64decode(text).decode("utf-8")


def encode_base64_url(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def decode_base64_url(text: str) -> str:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8")


def is_base64_encoded(text: str) -> bool:
    """Check whether ``text`` is a well-formed, non-empty base64 string."""
    stripped = re.sub(r"\s", "", text or "")
    if not stripped or not _BASE64.match(stripped):
        return False
    try:
        base64.b64decode(stripped, validate=True)
    except binascii.Error:
        return False
    return True


def safe_decode(text: str) -> str:
    """Decode base64 text, returning an empty string when it is not decodable."""
    try:
        return decode(text)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return ""
