"""
Tests for shared key signature verification
"""

from datetime import datetime, timedelta

import pytest

from sharedkey_sdk.signing import PipelineRequest, SharedKeyCredential, SharedKeyCredentialPolicy, fixed_clock
from sharedkey_sdk.verification import (
    SharedKeyVerifier,
    VerificationStatus,
    parse_authorization_header,
    verify_request,
)
from sharedkey_sdk.exceptions import MissingDateHeaderError

from tests.helpers import (
    ACCOUNT_KEY,
    ACCOUNT_NAME,
    FIXED_DATE,
    FIXED_INSTANT,
    LIST_TABLES_SIGNATURE,
    LIST_TABLES_STRING_TO_SIGN,
    LIST_TABLES_URL,
)


def signed_request(clock, url=LIST_TABLES_URL, method="GET", body=None):
    policy = SharedKeyCredentialPolicy(None, ACCOUNT_NAME, ACCOUNT_KEY, clock=clock)
    return policy.sign_request(PipelineRequest(method=method, url=url, body=body))


class TestParseAuthorizationHeader:
    """Test Authorization header parsing"""

    def test_valid_header(self):
        parsed = parse_authorization_header(f"SharedKey acct:{LIST_TABLES_SIGNATURE}")
        assert parsed.scheme == "SharedKey"
        assert parsed.account_name == "acct"
        assert parsed.signature == LIST_TABLES_SIGNATURE

    @pytest.mark.parametrize("value", [None, "", "SharedKey", "SharedKey acct", "SharedKey :sig", "SharedKey acct:"])
    def test_malformed_headers(self, value):
        assert parse_authorization_header(value) is None


class TestSharedKeyVerifier:
    """Test request verification"""

    def test_valid_request(self, credential, clock):
        result = SharedKeyVerifier(credential).verify(signed_request(clock))

        assert result.valid
        assert result.status == VerificationStatus.VALID
        assert result.reason is None
        assert result.string_to_sign == LIST_TABLES_STRING_TO_SIGN

    def test_valid_request_with_text_body(self, credential, clock):
        request = signed_request(clock, url="https://acct.table.core.windows.net/Tables",
                                 method="POST", body="héllo wörld")
        assert SharedKeyVerifier(credential).verify(request).valid

    def test_missing_authorization(self, credential):
        request = PipelineRequest(method="GET", url=LIST_TABLES_URL, headers={"x-ms-date": FIXED_DATE})

        result = SharedKeyVerifier(credential).verify(request)

        assert result.status == VerificationStatus.INVALID
        assert "Authorization" in result.reason
        assert result.string_to_sign is None

    def test_wrong_scheme(self, credential):
        request = PipelineRequest(
            method="GET",
            url=LIST_TABLES_URL,
            headers={"x-ms-date": FIXED_DATE, "Authorization": f"SharedKeyLite acct:{LIST_TABLES_SIGNATURE}"},
        )

        result = SharedKeyVerifier(credential).verify(request)

        assert not result.valid
        assert "SharedKeyLite" in result.reason

    def test_wrong_account(self, credential):
        request = PipelineRequest(
            method="GET",
            url=LIST_TABLES_URL,
            headers={"x-ms-date": FIXED_DATE, "Authorization": f"SharedKey other:{LIST_TABLES_SIGNATURE}"},
        )

        result = SharedKeyVerifier(credential).verify(request)

        assert not result.valid
        assert "other" in result.reason

    def test_tampered_request(self, credential, clock):
        request = signed_request(clock)
        request.url.add_query_parameter("extra", "1")

        result = SharedKeyVerifier(credential).verify(request)

        assert not result.valid
        assert result.reason == "Signature mismatch"
        assert result.string_to_sign.endswith("\nextra:1")

    def test_wrong_key(self, clock):
        other = SharedKeyCredential(ACCOUNT_NAME, "b3RoZXIta2V5")
        assert not SharedKeyVerifier(other).verify(signed_request(clock)).valid

    def test_non_base64_signature(self, credential):
        request = PipelineRequest(
            method="GET",
            url=LIST_TABLES_URL,
            headers={"x-ms-date": FIXED_DATE, "Authorization": "SharedKey acct:not*base64"},
        )
        assert not SharedKeyVerifier(credential).verify(request).valid

    def test_missing_date_raises(self, credential):
        request = PipelineRequest(
            method="GET",
            url=LIST_TABLES_URL,
            headers={"Authorization": f"SharedKey acct:{LIST_TABLES_SIGNATURE}"},
        )
        with pytest.raises(MissingDateHeaderError):
            SharedKeyVerifier(credential).verify(request)

    def test_clock_skew_within_limit(self, credential, clock):
        verifier = SharedKeyVerifier(
            credential,
            max_clock_skew=timedelta(minutes=15),
            clock=fixed_clock(FIXED_INSTANT + timedelta(minutes=10)),
        )
        assert verifier.verify(signed_request(clock)).valid

    def test_clock_skew_exceeded(self, credential, clock):
        verifier = SharedKeyVerifier(
            credential,
            max_clock_skew=timedelta(minutes=15),
            clock=fixed_clock(FIXED_INSTANT - timedelta(minutes=20)),
        )

        result = verifier.verify(signed_request(clock))

        assert not result.valid
        assert "clock skew" in result.reason

    def test_unparseable_date_with_skew_check(self, credential):
        request = PipelineRequest(
            method="GET",
            url=LIST_TABLES_URL,
            headers={"x-ms-date": "yesterday", "Authorization": f"SharedKey acct:{LIST_TABLES_SIGNATURE}"},
        )
        verifier = SharedKeyVerifier(credential, max_clock_skew=timedelta(minutes=15))

        result = verifier.verify(request)

        assert not result.valid
        assert "yesterday" in result.reason

    def test_verify_request_helper(self, credential, clock):
        assert verify_request(signed_request(clock), credential).valid

    def test_naive_clock_taken_as_utc(self, credential, clock):
        verifier = SharedKeyVerifier(
            credential,
            max_clock_skew=timedelta(minutes=5),
            clock=lambda: datetime(2024, 1, 15, 10, 32, 0),
        )
        assert verifier.verify(signed_request(clock)).valid

    def test_clock_returning_none_skips_skew_check(self, credential, clock):
        verifier = SharedKeyVerifier(credential, max_clock_skew=timedelta(seconds=1), clock=lambda: None)
        assert verifier.verify(signed_request(clock)).valid
