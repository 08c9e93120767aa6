"""
Shared key credential

Holds a storage account name and its decoded account key and computes the
HMAC-SHA256 message authentication codes used by shared key signing. The
MAC is computed with the cryptography package.
"""

from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..exceptions import InvalidCredentialError, ValidationError
from .utils import decode_string, encode_byte_array


class SharedKeyCredential:
    """
    Account name plus decoded account key.

    Instances are immutable and hold no per-call state, so a single
    credential can be shared by any number of concurrently signing policies.
    """

    __slots__ = ('_account_name', '_account_key')

    def __init__(self, account_name: str, account_key: str):
        """
        Initialize the credential.

        Args:
            account_name: Storage account name
            account_key: Base64-encoded account key

        Raises:
            InvalidCredentialError: If the account name is empty or the key is
                not valid base64 or decodes to zero bytes
        """
        if not account_name or not isinstance(account_name, str):
            raise InvalidCredentialError("Account name cannot be empty")

        try:
            decoded_key = decode_string(account_key)
        except ValidationError as e:
            raise InvalidCredentialError(
                f"Account key is not valid base64: {e.message}",
                details={"account_name": account_name}
            ) from e

        if not decoded_key:
            raise InvalidCredentialError(
                "Account key decodes to zero bytes",
                details={"account_name": account_name}
            )

        object.__setattr__(self, '_account_name', account_name)
        object.__setattr__(self, '_account_key', decoded_key)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def account_name(self) -> str:
        return self._account_name

    @property
    def account_key(self) -> bytes:
        return self._account_key

    def compute_hmac_sha256(self, message: Union[str, bytes]) -> str:
        """
        Compute the base64 HMAC-SHA256 of a message with the account key.

        Args:
            message: Message to authenticate; text is UTF-8 encoded first

        Returns:
            str: Base64-encoded 32-byte MAC
        """
        mac = hmac.HMAC(self._account_key, hashes.SHA256())
        mac.update(_to_bytes(message))
        return encode_byte_array(mac.finalize())

    def verify_hmac_sha256(self, message: Union[str, bytes], signature: str) -> bool:
        """
        Check a base64 MAC against the message in constant time.

        Returns:
            bool: True if the signature was produced with this account key
        """
        try:
            expected = decode_string(signature)
        except ValidationError:
            return False

        mac = hmac.HMAC(self._account_key, hashes.SHA256())
        mac.update(_to_bytes(message))
        try:
            mac.verify(expected)
        except InvalidSignature:
            return False
        return True

    def __repr__(self) -> str:
        return f"SharedKeyCredential(account_name={self._account_name!r})"


def _to_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return message.encode('utf-8')
    return bytes(message)
