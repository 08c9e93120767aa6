"""
Type definitions for request signing functionality

This module provides the request/response model that flows through a signing
pipeline: an ordered case-insensitive header multimap, a URL with a
multi-valued query accessor, and the request and response containers.
"""

from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote, urlsplit, urlunsplit

from requests.utils import requote_uri

from ..exceptions import ValidationError


class HttpMethod(str, Enum):
    """HTTP methods understood by the pipeline"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    MERGE = "MERGE"


class HeaderConstants:
    """Header names used by shared key signing"""

    AUTHORIZATION = "Authorization"
    CONTENT_LENGTH = "Content-Length"
    CONTENT_MD5 = "Content-MD5"
    CONTENT_TYPE = "Content-Type"
    DATE = "Date"
    X_MS_DATE = "x-ms-date"


AUTHORIZATION_SCHEME = "SharedKey"


class HttpHeaders:
    """
    Ordered, case-insensitive multimap of HTTP headers.

    Header names keep the casing they were first given with; lookups ignore
    case. ``set`` replaces every value stored under a name, ``add`` appends
    another value, and ``get`` joins multiple values with ``", "``.
    """

    def __init__(self, headers: Optional[Union[Mapping[str, str], Iterable[Tuple[str, str]]]] = None):
        self._items: List[Tuple[str, str]] = []
        if headers is None:
            return

        items = headers.items() if hasattr(headers, 'items') else headers
        for name, value in items:
            self.add(name, value)

    def add(self, name: str, value: Union[str, int]) -> None:
        """Append a value for ``name`` without touching existing values."""
        self._items.append((self._check_name(name), str(value)))

    def set(self, name: str, value: Union[str, int]) -> None:
        """
        Replace all values for ``name`` with a single value.

        The header keeps the position of its first occurrence, or is appended
        if it was not present.
        """
        name = self._check_name(name)
        key = name.lower()
        replaced: List[Tuple[str, str]] = []
        inserted = False
        for existing_name, existing_value in self._items:
            if existing_name.lower() != key:
                replaced.append((existing_name, existing_value))
            elif not inserted:
                replaced.append((existing_name, str(value)))
                inserted = True
        if not inserted:
            replaced.append((name, str(value)))
        self._items = replaced

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the comma-joined values for ``name``, or ``default`` if absent."""
        values = self.get_all(name)
        if not values:
            return default
        return ", ".join(values)

    def get_all(self, name: str) -> List[str]:
        """Return every value stored for ``name`` in insertion order."""
        key = name.lower()
        return [value for existing_name, value in self._items if existing_name.lower() == key]

    def remove(self, name: str) -> None:
        """Drop every value stored for ``name``."""
        key = name.lower()
        self._items = [(n, v) for n, v in self._items if n.lower() != key]

    def items(self) -> List[Tuple[str, str]]:
        """Return (name, value) pairs in insertion order."""
        return list(self._items)

    def names(self) -> List[str]:
        """Return distinct header names in order of first appearance."""
        seen = set()
        names = []
        for name, _ in self._items:
            if name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)
        return names

    def to_dict(self) -> Dict[str, str]:
        """Collapse into a plain dict, joining repeated headers."""
        return {name: self.get(name) for name in self.names()}

    def copy(self) -> 'HttpHeaders':
        return HttpHeaders(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(existing_name.lower() == key for existing_name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.names())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpHeaders):
            return NotImplemented
        return [(n.lower(), v) for n, v in self._items] == [(n.lower(), v) for n, v in other._items]

    def __repr__(self) -> str:
        return f"HttpHeaders({self._items!r})"

    @staticmethod
    def _check_name(name: str) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(
                "Header name must be a non-empty string",
                "INVALID_HEADERS",
                {"name": repr(name)}
            )
        return name.strip()


class RequestUrl:
    """
    Request URL with a multi-valued query parameter accessor.

    Query parameters are kept exactly as they appear on the wire (still
    percent-encoded) and in their original order. Decoding is left to the
    consumer so that it happens exactly once.
    """

    def __init__(self, scheme: str, netloc: str, path: str = "", query: str = "", fragment: str = ""):
        self.scheme = scheme
        self.netloc = netloc
        self.path = path
        self.query = query
        self.fragment = fragment

    @classmethod
    def parse(cls, url: str) -> 'RequestUrl':
        """
        Parse an absolute http(s) URL.

        The URL is re-quoted the way requests prepares it, so characters such
        as spaces or non-ASCII text are held in the percent-encoded form that
        is sent on the wire.

        Raises:
            ValidationError: If the URL is not an absolute http or https URL
        """
        if not url or not isinstance(url, str):
            raise ValidationError("Request URL cannot be empty", "INVALID_URL", {"url": url})

        parts = urlsplit(requote_uri(url))
        if parts.scheme not in ('http', 'https') or not parts.netloc:
            raise ValidationError(
                f"Invalid URL format: {url}",
                "INVALID_URL",
                {"url": url, "scheme": parts.scheme}
            )
        return cls(parts.scheme, parts.netloc, parts.path, parts.query, parts.fragment)

    def query_pairs(self) -> List[Tuple[str, str]]:
        """
        Split the raw query string into (key, value) pairs in wire form.

        A parameter without ``=`` yields an empty value; empty segments such
        as the ones produced by ``&&`` are skipped.
        """
        pairs = []
        if not self.query:
            return pairs

        for segment in self.query.split('&'):
            if not segment:
                continue
            key, _, value = segment.partition('=')
            pairs.append((key, value))
        return pairs

    def get_query_parameters(self) -> Dict[str, List[str]]:
        """Return an ordered mapping of wire-form key to every wire-form value."""
        parameters: Dict[str, List[str]] = {}
        for key, value in self.query_pairs():
            parameters.setdefault(key, []).append(value)
        return parameters

    def add_query_parameter(self, key: str, value: str) -> None:
        """Percent-encode and append a query parameter."""
        segment = f"{quote(key, safe='$')}={quote(str(value), safe='')}"
        self.query = f"{self.query}&{segment}" if self.query else segment

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))

    def __repr__(self) -> str:
        return f"RequestUrl({str(self)!r})"


@dataclass
class PipelineRequest:
    """
    Outgoing HTTP request as seen by pipeline policies

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Request URL; a string is parsed into a RequestUrl
        headers: Request headers; a dict or pair list is wrapped in HttpHeaders
        body: Optional request body (string or bytes)
    """
    method: str
    url: RequestUrl
    headers: HttpHeaders = field(default_factory=HttpHeaders)
    body: Optional[Union[str, bytes]] = None

    def __post_init__(self):
        """Normalize and validate request after initialization"""
        if isinstance(self.method, HttpMethod):
            self.method = self.method.value

        if not self.method or not isinstance(self.method, str):
            raise ValidationError("Request method cannot be empty", "INVALID_METHOD")

        if isinstance(self.url, str):
            self.url = RequestUrl.parse(self.url)
        elif not isinstance(self.url, RequestUrl):
            raise ValidationError("Request URL must be a string or RequestUrl", "INVALID_URL")

        if not isinstance(self.headers, HttpHeaders):
            self.headers = HttpHeaders(self.headers)

        if self.body is not None and not isinstance(self.body, (str, bytes)):
            raise ValidationError(
                f"Body must be string, bytes, or None, got {type(self.body)}",
                "INVALID_REQUEST",
                {"body_type": str(type(self.body))}
            )


@dataclass
class PipelineResponse:
    """Response returned by the last stage of a pipeline"""
    status_code: int
    headers: HttpHeaders = field(default_factory=HttpHeaders)
    body: bytes = b""
    request: Optional[PipelineRequest] = None

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


# Type aliases for convenience
Clock = Callable[[], Optional[datetime]]
RequestBody = Union[str, bytes, None]
