"""
Shared key signing policy

A request policy is one link in a pipeline: it receives a request, does its
work and hands the request to the next policy it was constructed with. The
last link is a transport that actually sends the request. This module
provides the policy base class, the pipeline builder and the policy that
signs requests with a shared key.
"""

import logging
from typing import Callable, Optional, Union

from ..exceptions import InvalidCredentialError
from .canonicalizer import SharedKeyCanonicalizer
from .credential import SharedKeyCredential
from .types import (
    AUTHORIZATION_SCHEME,
    Clock,
    HeaderConstants,
    PipelineRequest,
    PipelineResponse,
)
from .utils import body_byte_length, format_rfc1123_date, utc_now

logger = logging.getLogger(__name__)


class RequestPolicy:
    """
    Base class for pipeline links.

    Subclasses implement ``send_request`` and call
    ``self.next_policy.send_request`` to continue down the pipeline.
    """

    def __init__(self, next_policy: Optional['RequestPolicy']):
        self.next_policy = next_policy

    def send_request(self, request: PipelineRequest) -> PipelineResponse:
        raise NotImplementedError


PolicyFactory = Callable[[RequestPolicy], RequestPolicy]


def build_pipeline(transport: RequestPolicy, *factories: PolicyFactory) -> RequestPolicy:
    """
    Chain policies in front of a transport.

    Args:
        transport: Last stage of the pipeline
        *factories: Callables taking the next policy and returning a policy;
            the first factory becomes the outermost link

    Returns:
        RequestPolicy: Head of the pipeline
    """
    head = transport
    for factory in reversed(factories):
        head = factory(head)
    return head


class SharedKeyCredentialPolicy(RequestPolicy):
    """
    Policy that signs each request with a shared key before forwarding it.

    Every call is independent: the policy keeps no state between requests
    apart from the read-only credential and clock it was built with.
    """

    def __init__(
        self,
        next_policy: Optional[RequestPolicy],
        account_name: str,
        account_key: Union[str, SharedKeyCredential],
        clock: Optional[Clock] = None,
        log_string_to_sign: bool = False
    ):
        """
        Initialize the signing policy.

        Args:
            next_policy: Policy that receives the signed request
            account_name: Storage account name
            account_key: Base64-encoded account key, or an existing credential
                for the same account
            clock: Source of the x-ms-date timestamp (defaults to UTC now);
                returning None skips setting x-ms-date
            log_string_to_sign: Log each string to sign at DEBUG level

        Raises:
            InvalidCredentialError: If the key cannot be decoded or the
                credential belongs to another account
        """
        super().__init__(next_policy)

        if isinstance(account_key, SharedKeyCredential):
            if account_key.account_name != account_name:
                raise InvalidCredentialError(
                    "Credential account name does not match policy account name",
                    details={"account_name": account_name, "credential_account_name": account_key.account_name}
                )
            self.credential = account_key
        else:
            self.credential = SharedKeyCredential(account_name, account_key)

        self.canonicalizer = SharedKeyCanonicalizer(self.credential.account_name)
        self.clock = clock or utc_now
        self.log_string_to_sign = log_string_to_sign

    @classmethod
    def from_credential(
        cls,
        next_policy: Optional[RequestPolicy],
        credential: SharedKeyCredential,
        clock: Optional[Clock] = None,
        log_string_to_sign: bool = False
    ) -> 'SharedKeyCredentialPolicy':
        return cls(next_policy, credential.account_name, credential, clock, log_string_to_sign)

    @property
    def account_name(self) -> str:
        return self.credential.account_name

    def send_request(self, request: PipelineRequest) -> PipelineResponse:
        """
        Sign the request and forward it to the next policy.

        Args:
            request: Request to sign; its headers are modified in place

        Returns:
            PipelineResponse: Response of the next policy, unmodified

        Raises:
            MissingDateHeaderError: If no date header is available to sign;
                the request is not forwarded
        """
        if self.next_policy is None:
            raise RuntimeError("SharedKeyCredentialPolicy has no next policy to forward to")
        return self.next_policy.send_request(self.sign_request(request))

    def sign_request(self, request: PipelineRequest) -> PipelineRequest:
        """
        Add x-ms-date, Content-Length and Authorization headers to a request.

        Args:
            request: Request to sign in place

        Returns:
            PipelineRequest: The same request object
        """
        # A clock that yields None leaves the caller's date headers in charge
        now = self.clock()
        if now is not None:
            request.headers.set(HeaderConstants.X_MS_DATE, format_rfc1123_date(now))

        if isinstance(request.body, str) and len(request.body) > 0:
            request.headers.set(HeaderConstants.CONTENT_LENGTH, body_byte_length(request.body))

        string_to_sign = self.canonicalizer.build_string_to_sign(request)
        if self.log_string_to_sign:
            logger.debug(f"String to sign: {string_to_sign!r}")

        signature = self.credential.compute_hmac_sha256(string_to_sign)
        request.headers.set(
            HeaderConstants.AUTHORIZATION,
            f"{AUTHORIZATION_SCHEME} {self.credential.account_name}:{signature}"
        )

        logger.debug(f"Signed {request.method.upper()} request to {request.url.path or '/'}")
        return request


def shared_key_policy_factory(
    account_name: str,
    account_key: Union[str, SharedKeyCredential],
    clock: Optional[Clock] = None,
    log_string_to_sign: bool = False
) -> PolicyFactory:
    """
    Create a factory for use with ``build_pipeline``.

    The credential is decoded once, here, and shared by every policy the
    factory creates.
    """
    if isinstance(account_key, SharedKeyCredential):
        credential = account_key
    else:
        credential = SharedKeyCredential(account_name, account_key)

    def create(next_policy: RequestPolicy) -> SharedKeyCredentialPolicy:
        return SharedKeyCredentialPolicy(next_policy, account_name, credential, clock, log_string_to_sign)

    return create
