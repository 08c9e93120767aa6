"""
Command-line interface for SharedKey Python SDK
Shows the string to sign and Authorization header for a request, and checks
captured requests against an account key
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LoggingConfig, configure_logging, load_config, validate_config
from .exceptions import SharedKeySDKError
from .signing import (
    HeaderConstants,
    HttpHeaders,
    PipelineRequest,
    SharedKeyCredentialPolicy,
    fixed_clock,
    parse_rfc1123_date,
)
from .signing.utils import escape_for_display
from .verification import SharedKeyVerifier


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='sharedkey-sign',
        description='Compute and check shared key request signatures'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'SharedKey Python SDK {__version__}'
    )
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--connection-string', help='Storage connection string')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    setup_sign_parser(subparsers)
    setup_verify_parser(subparsers)

    return parser


def _add_request_arguments(command_parser):
    command_parser.add_argument('method', help='HTTP method')
    command_parser.add_argument('url', help='Absolute request URL')
    command_parser.add_argument(
        '-H', '--header',
        action='append',
        default=[],
        metavar='NAME: VALUE',
        help='Request header (repeatable)'
    )
    command_parser.add_argument('--body', help='Request body text')


def setup_sign_parser(subparsers):
    """Setup sign subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Sign a request and print the result')
    _add_request_arguments(sign_parser)
    sign_parser.add_argument(
        '--date',
        help='Use this RFC 1123 timestamp for x-ms-date instead of the current time'
    )


def setup_verify_parser(subparsers):
    """Setup verify subcommand."""
    verify_parser = subparsers.add_parser(
        'verify',
        help='Check the Authorization header of a captured request'
    )
    _add_request_arguments(verify_parser)


def parse_header_arguments(values: List[str]) -> HttpHeaders:
    """Turn ``Name: value`` strings into HttpHeaders."""
    headers = HttpHeaders()
    for value in values:
        name, separator, header_value = value.partition(':')
        if not separator or not name.strip():
            raise argparse.ArgumentTypeError(f"Header must be 'Name: value', got {value!r}")
        headers.add(name.strip(), header_value.strip())
    return headers


def build_request(args) -> PipelineRequest:
    return PipelineRequest(
        method=args.method,
        url=args.url,
        headers=parse_header_arguments(args.header),
        body=args.body,
    )


def handle_sign_command(args) -> int:
    """Handle sign command."""
    config = load_config(args.config, args.connection_string)
    credential = validate_config(config)
    clock = fixed_clock(parse_rfc1123_date(args.date)) if args.date else None

    policy = SharedKeyCredentialPolicy.from_credential(None, credential, clock=clock)
    request = policy.sign_request(build_request(args))
    string_to_sign = policy.canonicalizer.build_string_to_sign(request)

    print(f"String to sign: {escape_for_display(string_to_sign)}")
    print(f"{HeaderConstants.X_MS_DATE}: {request.headers.get(HeaderConstants.X_MS_DATE)}")
    content_length = request.headers.get(HeaderConstants.CONTENT_LENGTH)
    if content_length is not None:
        print(f"{HeaderConstants.CONTENT_LENGTH}: {content_length}")
    print(f"{HeaderConstants.AUTHORIZATION}: {request.headers.get(HeaderConstants.AUTHORIZATION)}")
    return 0


def handle_verify_command(args) -> int:
    """Handle verify command."""
    config = load_config(args.config, args.connection_string)
    credential = validate_config(config)

    result = SharedKeyVerifier(credential).verify(build_request(args))
    if result.string_to_sign is not None:
        print(f"String to sign: {escape_for_display(result.string_to_sign)}")

    if result.valid:
        print("✓ Signature is valid")
        return 0

    print(f"✗ Signature is invalid: {result.reason}")
    return 1


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.verbose:
            configure_logging(LoggingConfig(level="DEBUG"))

        if args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'verify':
            return handle_verify_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (SharedKeySDKError, argparse.ArgumentTypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
