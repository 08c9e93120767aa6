"""
Utility functions for request signing

This module provides the small, pure helpers shared by the credential, the
canonicalizer and the signing policy: the default clock, RFC 1123 timestamp
formatting, body length measurement, query component decoding and the base64
byte-array codec.
"""

import base64
import binascii
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional
from urllib.parse import unquote_plus

from ..exceptions import ValidationError
from .types import RequestBody


def utc_now() -> datetime:
    """
    Default clock for the signing policy.

    Returns:
        datetime: Current time as a timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


def fixed_clock(instant: datetime):
    """
    Build a clock that always returns the same instant.

    Args:
        instant: The instant to return; naive values are taken as UTC

    Returns:
        Callable[[], datetime]: Clock suitable for SharedKeyCredentialPolicy
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return lambda: instant


def format_rfc1123_date(moment: Optional[datetime] = None) -> str:
    """
    Format a datetime the way the x-ms-date header expects it.

    Output is always in GMT and uses English day and month names regardless
    of the process locale, e.g. ``Mon, 15 Jan 2024 10:30:00 GMT``.

    Args:
        moment: Instant to format (uses current time if None); naive values
            are taken as UTC

    Returns:
        str: RFC 1123 formatted timestamp
    """
    if moment is None:
        moment = utc_now()

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return format_datetime(moment.astimezone(timezone.utc).replace(microsecond=0), usegmt=True)


def parse_rfc1123_date(value: str) -> datetime:
    """
    Parse an RFC 1123 timestamp into an aware UTC datetime.

    Raises:
        ValidationError: If the value is not a valid HTTP date
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Invalid HTTP date: {value}",
            "INVALID_TIMESTAMP",
            {"value": value, "original_error": str(e)}
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def body_byte_length(body: RequestBody) -> int:
    """
    Length of a request body in encoded bytes.

    Text is measured after UTF-8 encoding, so multi-byte characters count
    for every byte they occupy on the wire.
    """
    if body is None:
        return 0
    if isinstance(body, str):
        return len(body.encode('utf-8'))
    return len(body)


def decode_query_component(value: str) -> str:
    """Form-decode a single wire-form query key or value (``+`` is a space)."""
    return unquote_plus(value, encoding='utf-8', errors='strict')


def encode_byte_array(value: bytes) -> str:
    """
    Encode a byte array in base64 format.

    Args:
        value: Bytes to encode

    Returns:
        str: Standard base64 text with padding
    """
    return base64.b64encode(value).decode('ascii')


def decode_string(value: str) -> bytes:
    """
    Decode a base64 string into a byte array.

    Args:
        value: Standard base64 text; surrounding whitespace is ignored

    Returns:
        bytes: Decoded bytes

    Raises:
        ValidationError: If the value is not valid base64
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"Base64 value must be a string, got {type(value)}",
            "INVALID_BASE64",
            {"value_type": str(type(value))}
        )

    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            f"Invalid base64 string: {e}",
            "INVALID_BASE64",
            {"original_error": str(e)}
        ) from e


def escape_for_display(value: str) -> str:
    """Render control characters of a string to sign visibly (``\\n`` etc.)."""
    return value.encode('unicode_escape').decode('ascii')
