"""
Type definitions for shared key verification
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VerificationStatus(str, Enum):
    """Verification result status"""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ParsedAuthorization:
    """
    Authorization header split into its parts

    Attributes:
        scheme: Authorization scheme, e.g. "SharedKey"
        account_name: Account the request claims to be signed by
        signature: Base64 signature
    """
    scheme: str
    account_name: str
    signature: str


@dataclass
class VerificationResult:
    """
    Outcome of verifying one request

    Attributes:
        status: VALID or INVALID
        reason: Why verification failed; None when valid
        string_to_sign: String the verifier reconstructed, when one was built
    """
    status: VerificationStatus
    reason: Optional[str] = None
    string_to_sign: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.status == VerificationStatus.VALID
