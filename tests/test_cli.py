"""
Tests for the sharedkey-sign command line interface
"""

import argparse

import pytest

from sharedkey_sdk.cli import create_parser, main, parse_header_arguments

from tests.helpers import (
    ACCOUNT_KEY,
    ACCOUNT_NAME,
    CREATE_TABLE_URL,
    FIXED_DATE,
    LIST_TABLES_SIGNATURE,
    LIST_TABLES_URL,
)

CONNECTION_STRING = f"AccountName={ACCOUNT_NAME};AccountKey={ACCOUNT_KEY};"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep credentials from the developer's shell out of the tests"""
    for name in ("SHAREDKEY_ACCOUNT_NAME", "SHAREDKEY_ACCOUNT_KEY", "SHAREDKEY_CONNECTION_STRING",
                 "SHAREDKEY_ENDPOINT", "SHAREDKEY_LOG_LEVEL", "SHAREDKEY_LOG_STRING_TO_SIGN"):
        monkeypatch.delenv(name, raising=False)


class TestParseHeaderArguments:

    def test_parses_headers(self):
        headers = parse_header_arguments(["Content-Type: application/json", f"x-ms-date: {FIXED_DATE}"])
        assert headers.get("content-type") == "application/json"
        assert headers.get("X-MS-DATE") == FIXED_DATE

    @pytest.mark.parametrize("value", ["no-colon", ": value"])
    def test_malformed(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_header_arguments([value])


class TestSignCommand:
    """Test the sign subcommand"""

    def test_sign_with_fixed_date(self, capsys):
        exit_code = main([
            "--connection-string", CONNECTION_STRING,
            "sign", "GET", LIST_TABLES_URL, "--date", FIXED_DATE,
        ])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "String to sign: GET\\n\\n\\nMon, 15 Jan 2024 10:30:00 GMT\\n/acct/mytable\\n$top:5\\ncomp:list" in output
        assert f"x-ms-date: {FIXED_DATE}" in output
        assert f"Authorization: SharedKey acct:{LIST_TABLES_SIGNATURE}" in output
        assert "Content-Length" not in output

    def test_sign_with_body(self, capsys):
        exit_code = main([
            "--connection-string", CONNECTION_STRING,
            "sign", "POST", CREATE_TABLE_URL,
            "-H", "Content-Type: text/plain",
            "--body", "héllo wörld",
            "--date", FIXED_DATE,
        ])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "Content-Length: 13" in output

    def test_sign_from_config_file(self, tmp_path, capsys):
        config_file = tmp_path / "sharedkey.json"
        config_file.write_text(f'{{"account_name": "{ACCOUNT_NAME}", "account_key": "{ACCOUNT_KEY}"}}')

        exit_code = main(["--config", str(config_file), "sign", "GET", LIST_TABLES_URL, "--date", FIXED_DATE])

        assert exit_code == 0
        assert LIST_TABLES_SIGNATURE in capsys.readouterr().out

    def test_sign_without_credentials(self, capsys):
        exit_code = main(["sign", "GET", LIST_TABLES_URL])

        assert exit_code == 1
        assert "account_name is required" in capsys.readouterr().err

    def test_sign_with_invalid_date(self, capsys):
        exit_code = main(["--connection-string", CONNECTION_STRING, "sign", "GET", LIST_TABLES_URL, "--date", "soon"])

        assert exit_code == 1
        assert "Invalid HTTP date" in capsys.readouterr().err

    def test_sign_with_bad_header(self, capsys):
        exit_code = main(["--connection-string", CONNECTION_STRING, "sign", "GET", LIST_TABLES_URL, "-H", "broken"])

        assert exit_code == 1
        assert "Header must be" in capsys.readouterr().err


class TestVerifyCommand:
    """Test the verify subcommand"""

    def verify(self, signature):
        return main([
            "--connection-string", CONNECTION_STRING,
            "verify", "GET", LIST_TABLES_URL,
            "-H", f"x-ms-date: {FIXED_DATE}",
            "-H", f"Authorization: SharedKey acct:{signature}",
        ])

    def test_valid_signature(self, capsys):
        exit_code = self.verify(LIST_TABLES_SIGNATURE)

        assert exit_code == 0
        assert "✓ Signature is valid" in capsys.readouterr().out

    def test_invalid_signature(self, capsys):
        exit_code = self.verify("AAAA" + LIST_TABLES_SIGNATURE[4:])

        assert exit_code == 1
        assert "✗ Signature is invalid: Signature mismatch" in capsys.readouterr().out

    def test_missing_date(self, capsys):
        exit_code = main([
            "--connection-string", CONNECTION_STRING,
            "verify", "GET", LIST_TABLES_URL,
            "-H", f"Authorization: SharedKey acct:{LIST_TABLES_SIGNATURE}",
        ])

        assert exit_code == 1
        assert "x-ms-date or date header must be present" in capsys.readouterr().err


class TestMain:

    def test_no_command_shows_help(self, capsys):
        assert main([]) == 1
        assert "usage: sharedkey-sign" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "SharedKey Python SDK" in capsys.readouterr().out
