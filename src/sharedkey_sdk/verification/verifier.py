"""
Shared key signature verification

Re-computes the string to sign for a received request and checks it against
the Authorization header, the same way the service does. Used by local
service emulators and when debugging rejected requests.
"""

import logging
from datetime import timedelta, timezone
from typing import Optional

from ..signing.canonicalizer import SharedKeyCanonicalizer
from ..signing.credential import SharedKeyCredential
from ..signing.types import AUTHORIZATION_SCHEME, Clock, HeaderConstants, PipelineRequest
from ..signing.utils import parse_rfc1123_date, utc_now
from ..exceptions import ValidationError
from .types import ParsedAuthorization, VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)


def parse_authorization_header(value: Optional[str]) -> Optional[ParsedAuthorization]:
    """
    Split ``SharedKey account:signature`` into its parts.

    Returns:
        ParsedAuthorization or None if the value is missing or malformed
    """
    if not value:
        return None

    scheme, _, credentials = value.strip().partition(' ')
    account_name, separator, signature = credentials.strip().partition(':')
    if not scheme or not separator or not account_name or not signature:
        return None

    return ParsedAuthorization(scheme=scheme, account_name=account_name, signature=signature)


class SharedKeyVerifier:
    """
    Verifier for shared key signed requests
    """

    def __init__(
        self,
        credential: SharedKeyCredential,
        max_clock_skew: Optional[timedelta] = None,
        clock: Optional[Clock] = None
    ):
        """
        Initialize verifier.

        Args:
            credential: Credential of the account requests must be signed by
            max_clock_skew: Reject requests whose date differs from the clock
                by more than this; no date check when None
            clock: Clock used for the skew check (defaults to UTC now)
        """
        self.credential = credential
        self.canonicalizer = SharedKeyCanonicalizer(credential.account_name)
        self.max_clock_skew = max_clock_skew
        self.clock = clock or utc_now

    def verify(self, request: PipelineRequest) -> VerificationResult:
        """
        Verify a request's Authorization header.

        Returns:
            VerificationResult: VALID, or INVALID with a reason

        Raises:
            MissingDateHeaderError: If the request carries no date to verify
        """
        authorization = parse_authorization_header(request.headers.get(HeaderConstants.AUTHORIZATION))
        if authorization is None:
            return self._invalid("Missing or malformed Authorization header")

        if authorization.scheme != AUTHORIZATION_SCHEME:
            return self._invalid(f"Unsupported authorization scheme: {authorization.scheme}")

        if authorization.account_name != self.credential.account_name:
            return self._invalid(f"Request signed for unknown account: {authorization.account_name}")

        string_to_sign = self.canonicalizer.build_string_to_sign(request)

        if self.max_clock_skew is not None:
            skew_failure = self._check_clock_skew(request)
            if skew_failure:
                return self._invalid(skew_failure, string_to_sign)

        if not self.credential.verify_hmac_sha256(string_to_sign, authorization.signature):
            return self._invalid("Signature mismatch", string_to_sign)

        return VerificationResult(status=VerificationStatus.VALID, string_to_sign=string_to_sign)

    def _check_clock_skew(self, request: PipelineRequest) -> Optional[str]:
        date_value = (
            request.headers.get(HeaderConstants.X_MS_DATE) or
            request.headers.get(HeaderConstants.DATE)
        )
        try:
            request_time = parse_rfc1123_date(date_value)
        except ValidationError:
            return f"Unparseable request date: {date_value}"

        now = self.clock()
        if now is None:
            return None
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if abs(now - request_time) > self.max_clock_skew:
            return "Request date outside allowed clock skew"
        return None

    @staticmethod
    def _invalid(reason: str, string_to_sign: Optional[str] = None) -> VerificationResult:
        logger.debug(f"Shared key verification failed: {reason}")
        return VerificationResult(status=VerificationStatus.INVALID, reason=reason, string_to_sign=string_to_sign)


def verify_request(request: PipelineRequest, credential: SharedKeyCredential) -> VerificationResult:
    """
    Verify a request with the given credential.

    Args:
        request: Received request
        credential: Credential of the expected account

    Returns:
        VerificationResult: Verification outcome
    """
    return SharedKeyVerifier(credential).verify(request)
