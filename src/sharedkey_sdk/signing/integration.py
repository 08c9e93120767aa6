"""
HTTP client integration for request signing

This module connects the signing pipeline to the requests library: a
transport that ends a pipeline by sending through a requests.Session, an
auth hook that signs requests.PreparedRequest objects, and a session wrapper
that signs every outgoing request.
"""

import json
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import urljoin

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest

from ..exceptions import TransportError
from .credential import SharedKeyCredential
from .policy import RequestPolicy, SharedKeyCredentialPolicy, build_pipeline, shared_key_policy_factory
from .types import Clock, HeaderConstants, HttpHeaders, PipelineRequest, PipelineResponse

logger = logging.getLogger(__name__)

# Headers written by SharedKeyCredentialPolicy.sign_request
SIGNED_HEADERS = (
    HeaderConstants.X_MS_DATE,
    HeaderConstants.CONTENT_LENGTH,
    HeaderConstants.AUTHORIZATION,
)


class RequestsTransport(RequestPolicy):
    """
    Last pipeline stage: sends a PipelineRequest with requests.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """
        Initialize transport.

        Args:
            session: Optional existing requests session to send through
            timeout: Optional per-request timeout in seconds
        """
        super().__init__(None)
        self.session = session or requests.Session()
        self.timeout = timeout

    def send_request(self, request: PipelineRequest) -> PipelineResponse:
        """
        Send a request and wrap the result.

        Raises:
            TransportError: If requests fails to complete the exchange
        """
        body = request.body
        if isinstance(body, str):
            body = body.encode('utf-8')

        try:
            response = self.session.request(
                method=request.method.upper(),
                url=str(request.url),
                headers=request.headers.to_dict(),
                data=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(
                f"Request to {request.url} failed: {e}",
                details={"method": request.method, "url": str(request.url), "original_error": str(e)}
            ) from e

        return PipelineResponse(
            status_code=response.status_code,
            headers=HttpHeaders(list(response.headers.items())),
            body=response.content,
            request=request,
        )

    def close(self) -> None:
        self.session.close()


def sign_prepared_request(
    prepared_request: PreparedRequest,
    policy: SharedKeyCredentialPolicy
) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        policy: Policy providing credential and clock

    Returns:
        PreparedRequest: Request with signature headers added

    Raises:
        MissingDateHeaderError: If signing fails for lack of a date header
    """
    body = prepared_request.body if isinstance(prepared_request.body, (str, bytes)) else None
    headers = HttpHeaders(list(prepared_request.headers.items())) if prepared_request.headers else HttpHeaders()

    signable_request = PipelineRequest(
        method=prepared_request.method,
        url=prepared_request.url,
        headers=headers,
        body=body,
    )
    policy.sign_request(signable_request)

    # Send text bodies as UTF-8 so they match the Content-Length set above
    if isinstance(prepared_request.body, str):
        prepared_request.body = prepared_request.body.encode('utf-8')

    for name in SIGNED_HEADERS:
        value = signable_request.headers.get(name)
        if value is not None:
            prepared_request.headers[name] = value

    return prepared_request


class SharedKeyAuth(AuthBase):
    """
    requests auth hook that signs each request with a shared key.

    Usage::

        requests.get(url, auth=SharedKeyAuth("myaccount", account_key))
    """

    def __init__(
        self,
        account_name: str,
        account_key: Union[str, SharedKeyCredential],
        clock: Optional[Clock] = None,
        log_string_to_sign: bool = False
    ):
        self.policy = SharedKeyCredentialPolicy(None, account_name, account_key, clock, log_string_to_sign)

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        return sign_prepared_request(r, self.policy)


class SigningSession:
    """
    Session that sends every request through a shared key signing pipeline.

    Signing failures are raised to the caller; a request that cannot be
    signed is never sent.
    """

    def __init__(
        self,
        account_name: str,
        account_key: Union[str, SharedKeyCredential],
        endpoint: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        clock: Optional[Clock] = None,
        log_string_to_sign: bool = False
    ):
        """
        Initialize signing session.

        Args:
            account_name: Storage account name
            account_key: Base64-encoded account key or credential
            endpoint: Optional base URL that relative request URLs are joined to
            session: Optional existing requests session to wrap
            timeout: Optional per-request timeout in seconds
            clock: Optional clock for the x-ms-date header
            log_string_to_sign: Log strings to sign at DEBUG level
        """
        self.endpoint = endpoint.rstrip('/') + '/' if endpoint else None
        self.transport = RequestsTransport(session, timeout)
        self.pipeline = build_pipeline(
            self.transport,
            shared_key_policy_factory(account_name, account_key, clock, log_string_to_sign),
        )
        logger.info(f"Configured shared key signing for account: {account_name}")

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Union[str, bytes]] = None,
        json_body: Optional[Any] = None
    ) -> PipelineResponse:
        """
        Sign and send a request.

        Args:
            method: HTTP method
            url: Absolute URL, or a path relative to the session endpoint
            params: Query parameters to append
            headers: Extra request headers
            data: Raw request body
            json_body: Object to serialize as a JSON body

        Returns:
            PipelineResponse: HTTP response
        """
        request_headers = HttpHeaders(headers or {})
        body = data

        if json_body is not None:
            body = json.dumps(json_body)
            if HeaderConstants.CONTENT_TYPE not in request_headers:
                request_headers.set(HeaderConstants.CONTENT_TYPE, 'application/json')

        request = PipelineRequest(
            method=method,
            url=self._resolve_url(url),
            headers=request_headers,
            body=body,
        )
        for key, value in (params or {}).items():
            request.url.add_query_parameter(key, value)

        return self.pipeline.send_request(request)

    def _resolve_url(self, url: str) -> str:
        if self.endpoint and '://' not in url:
            return urljoin(self.endpoint, url.lstrip('/'))
        return url

    def get(self, url: str, **kwargs) -> PipelineResponse:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> PipelineResponse:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> PipelineResponse:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> PipelineResponse:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def patch(self, url: str, **kwargs) -> PipelineResponse:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def head(self, url: str, **kwargs) -> PipelineResponse:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.transport.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(config, session: Optional[requests.Session] = None,
                           timeout: Optional[float] = None) -> SigningSession:
    """
    Create a signing session from a SharedKeyConfig.

    Args:
        config: Object with account_name, account_key, endpoint and
            log_string_to_sign attributes
        session: Optional requests session to send through
        timeout: Optional per-request timeout in seconds

    Returns:
        SigningSession: Configured signing session
    """
    return SigningSession(
        account_name=config.account_name,
        account_key=config.account_key,
        endpoint=config.endpoint,
        session=session,
        timeout=timeout,
        log_string_to_sign=config.log_string_to_sign,
    )
