"""
Shared fixtures for SharedKey SDK tests
"""

import pytest

from sharedkey_sdk.signing import SharedKeyCredential, fixed_clock

from tests.helpers import ACCOUNT_KEY, ACCOUNT_NAME, FIXED_INSTANT


@pytest.fixture
def credential():
    """Credential for the test account"""
    return SharedKeyCredential(ACCOUNT_NAME, ACCOUNT_KEY)


@pytest.fixture
def clock():
    """Clock frozen at FIXED_INSTANT"""
    return fixed_clock(FIXED_INSTANT)
