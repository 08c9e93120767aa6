"""
SharedKey Python SDK
Shared key (HMAC-SHA256) request signing for storage and table services
"""

from .version import __version__
from .exceptions import (
    SharedKeySDKError,
    InvalidCredentialError,
    MissingDateHeaderError,
    ValidationError,
    ConfigurationError,
    TransportError,
)
from .signing import (
    # Types
    HttpMethod,
    HeaderConstants,
    HttpHeaders,
    RequestUrl,
    PipelineRequest,
    PipelineResponse,
    # Credential and canonicalization
    SharedKeyCredential,
    SharedKeyCanonicalizer,
    build_string_to_sign,
    # Pipeline
    RequestPolicy,
    SharedKeyCredentialPolicy,
    build_pipeline,
    shared_key_policy_factory,
    # Utilities
    utc_now,
    fixed_clock,
    format_rfc1123_date,
    encode_byte_array,
    decode_string,
    # HTTP Integration
    RequestsTransport,
    SharedKeyAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)
from .verification import (
    SharedKeyVerifier,
    VerificationResult,
    VerificationStatus,
    verify_request,
)
from .config import (
    SharedKeyConfig,
    LoggingConfig,
    configure_logging,
    load_config,
)


# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'SharedKeySDKError',
    'InvalidCredentialError',
    'MissingDateHeaderError',
    'ValidationError',
    'ConfigurationError',
    'TransportError',
    # Types
    'HttpMethod',
    'HeaderConstants',
    'HttpHeaders',
    'RequestUrl',
    'PipelineRequest',
    'PipelineResponse',
    # Credential and canonicalization
    'SharedKeyCredential',
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
    'encode_byte_array',
    'decode_string',
    # HTTP Integration
    'RequestsTransport',
    'SharedKeyAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
    # Verification
    'SharedKeyVerifier',
    'VerificationResult',
    'VerificationStatus',
    'verify_request',
    # Configuration
    'SharedKeyConfig',
    'LoggingConfig',
    'configure_logging',
    'load_config',
]
