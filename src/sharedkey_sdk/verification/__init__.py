"""
SharedKey Python SDK - Verification Module

Server-side re-computation of shared key signatures for emulators and for
diagnosing rejected requests.
"""

from .types import (
    VerificationStatus,
    VerificationResult,
    ParsedAuthorization,
)

from .verifier import (
    SharedKeyVerifier,
    parse_authorization_header,
    verify_request,
)

__all__ = [
    'VerificationStatus',
    'VerificationResult',
    'ParsedAuthorization',
    'SharedKeyVerifier',
    'parse_authorization_header',
    'verify_request',
]
