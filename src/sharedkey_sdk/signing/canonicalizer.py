"""
String-to-sign construction for shared key authentication

The string built here has to match, byte for byte, what the service
reconstructs from the same request. Layout::

    METHOD
    Content-MD5
    Content-Type
    x-ms-date (or Date)
    /account/path
    key1:value1
    key2:value2

Query keys are lower-cased (ASCII letters only) and sorted by UTF-16 code
unit; keys and values are form-decoded exactly once. See
https://docs.microsoft.com/en-us/rest/api/storageservices/authorize-with-shared-key
"""

import string
from typing import Dict

from ..exceptions import MissingDateHeaderError, ValidationError
from .types import HeaderConstants, PipelineRequest
from .utils import decode_query_component

_ASCII_LOWERCASE = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _ascii_lower(value: str) -> str:
    return value.translate(_ASCII_LOWERCASE)


def _utf16_order(value: str) -> bytes:
    # Big-endian UTF-16 bytes compare in UTF-16 code unit order
    return value.encode('utf-16-be', 'surrogatepass')


class SharedKeyCanonicalizer:
    """
    Canonicalizer for the shared key (table service) signing scheme
    """

    def __init__(self, account_name: str):
        """
        Initialize canonicalizer.

        Args:
            account_name: Account name used as the first resource segment
        """
        if not account_name:
            raise ValidationError("Account name cannot be empty", "INVALID_ACCOUNT_NAME")
        self.account_name = account_name

    def build_string_to_sign(self, request: PipelineRequest) -> str:
        """
        Build the string to sign for a request.

        Args:
            request: Request whose headers and URL are canonicalized

        Returns:
            str: Newline-separated string to sign

        Raises:
            MissingDateHeaderError: If neither x-ms-date nor Date is set
        """
        # x-ms-date takes precedence over Date
        date_header = (
            self.get_header_value_to_sign(request, HeaderConstants.X_MS_DATE) or
            self.get_header_value_to_sign(request, HeaderConstants.DATE)
        )

        if not date_header:
            raise MissingDateHeaderError(
                details={"method": request.method, "path": request.url.path}
            )

        return '\n'.join([
            request.method.upper(),
            self.get_header_value_to_sign(request, HeaderConstants.CONTENT_MD5),
            self.get_header_value_to_sign(request, HeaderConstants.CONTENT_TYPE),
            date_header,
            self.get_canonicalized_resource_string(request),
        ])

    @staticmethod
    def get_header_value_to_sign(request: PipelineRequest, header_name: str) -> str:
        """Header value for signing; absent headers sign as an empty string."""
        return request.headers.get(header_name) or ""

    def get_canonicalized_resource_string(self, request: PipelineRequest) -> str:
        """
        Build the canonicalized resource: ``/account/path`` followed by one
        ``\\nkey:value`` line per query parameter.

        Raises:
            ValidationError: If a query component is not valid percent-encoded UTF-8
        """
        path = request.url.path or "/"
        canonicalized = f"/{self.account_name}{path}"

        lowercase_queries: Dict[str, str] = {}
        for raw_key, raw_value in request.url.query_pairs():
            key = _ascii_lower(self._decode(raw_key))
            # Last occurrence of a duplicate key wins
            lowercase_queries[key] = self._decode(raw_value)

        for key in sorted(lowercase_queries, key=_utf16_order):
            canonicalized += f"\n{key}:{lowercase_queries[key]}"

        return canonicalized

    @staticmethod
    def _decode(component: str) -> str:
        try:
            return decode_query_component(component)
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"Query component is not valid percent-encoded UTF-8: {component}",
                "INVALID_URL",
                {"component": component, "original_error": str(e)}
            ) from e


def build_string_to_sign(request: PipelineRequest, account_name: str) -> str:
    """
    Build the string to sign for a request.

    Args:
        request: Request to canonicalize
        account_name: Storage account name

    Returns:
        str: String to sign
    """
    return SharedKeyCanonicalizer(account_name).build_string_to_sign(request)
