"""
SharedKey Python SDK - Request Signing Module

Shared key (HMAC-SHA256) request signing for storage and table service
endpoints. This module provides the credential, the string-to-sign
canonicalizer, the signing pipeline policy and requests integration.
"""

from .types import (
    HttpMethod,
    HeaderConstants,
    HttpHeaders,
    RequestUrl,
    PipelineRequest,
    PipelineResponse,
    Clock,
    AUTHORIZATION_SCHEME,
)

from .credential import SharedKeyCredential

from .canonicalizer import (
    SharedKeyCanonicalizer,
    build_string_to_sign,
)

from .policy import (
    RequestPolicy,
    SharedKeyCredentialPolicy,
    build_pipeline,
    shared_key_policy_factory,
)

from .utils import (
    utc_now,
    fixed_clock,
    format_rfc1123_date,
    parse_rfc1123_date,
    body_byte_length,
    encode_byte_array,
    decode_string,
)

from .integration import (
    RequestsTransport,
    SharedKeyAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Types
    'HttpMethod',
    'HeaderConstants',
    'HttpHeaders',
    'RequestUrl',
    'PipelineRequest',
    'PipelineResponse',
    'Clock',
    'AUTHORIZATION_SCHEME',
    # Credential
    'SharedKeyCredential',
    # Canonicalization
    'SharedKeyCanonicalizer',
    'build_string_to_sign',
    # Pipeline
    'RequestPolicy',
    'SharedKeyCredentialPolicy',
    'build_pipeline',
    'shared_key_policy_factory',
    # Utilities
    'utc_now',
    'fixed_clock',
    'format_rfc1123_date',
    'parse_rfc1123_date',
    'body_byte_length',
    'encode_byte_array',
    'decode_string',
    # HTTP Integration
    'RequestsTransport',
    'SharedKeyAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
