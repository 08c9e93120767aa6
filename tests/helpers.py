"""
Reference values shared by the SharedKey SDK tests

The reference signatures below were computed independently of the SDK with
``openssl dgst -sha256 -hmac``.
"""

from datetime import datetime, timezone

ACCOUNT_NAME = "acct"
# base64("shared-secret-key-for-tests")
ACCOUNT_KEY = "c2hhcmVkLXNlY3JldC1rZXktZm9yLXRlc3Rz"
FIXED_INSTANT = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
FIXED_DATE = "Mon, 15 Jan 2024 10:30:00 GMT"

LIST_TABLES_URL = "https://acct.table.core.windows.net/mytable?comp=list&$top=5"
LIST_TABLES_STRING_TO_SIGN = (
    "GET\n"
    "\n"
    "\n"
    "Mon, 15 Jan 2024 10:30:00 GMT\n"
    "/acct/mytable\n"
    "$top:5\n"
    "comp:list"
)
LIST_TABLES_SIGNATURE = "SVX4gZh8bxmFhnUuvvGGzeVGRLqgWFJ9InYmBCjOre0="

CREATE_TABLE_URL = "https://acct.table.core.windows.net/Tables"
CREATE_TABLE_STRING_TO_SIGN = (
    "POST\n"
    "\n"
    "application/json\n"
    "Mon, 15 Jan 2024 10:30:00 GMT\n"
    "/acct/Tables"
)
CREATE_TABLE_SIGNATURE = "dfrrJFJ+u2rumqsMbiIXZfmWoMgMmJjF4TEafrGe+IY="

HELLO_SIGNATURE = "qwqiTqqO5Viq/63kWBdZi3YbHNVIoCX8XZHDsYZLMz8="

